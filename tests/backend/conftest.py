from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from backend.app.main import create_app


@pytest.fixture()
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.delenv("MAX_EXISTING_CANDIDATES", raising=False)
    monkeypatch.delenv("LIKELY_DUPLICATE_MIN_CONFIDENCE", raising=False)
    app = create_app()
    return TestClient(app)
