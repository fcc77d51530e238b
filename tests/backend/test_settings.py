from __future__ import annotations

from backend.app.settings import load_settings


def test_defaults(monkeypatch) -> None:
    for name in ("MAX_EXISTING_CANDIDATES", "LIKELY_DUPLICATE_MIN_CONFIDENCE", "LOG_LEVEL", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.max_existing_candidates == 500
    assert settings.likely_duplicate_min_confidence == 70
    assert settings.log_level == "INFO"
    assert settings.cors_allow_origins == ("*",)


def test_invalid_and_out_of_range_values_fall_back(monkeypatch) -> None:
    monkeypatch.setenv("MAX_EXISTING_CANDIDATES", "lots")
    monkeypatch.setenv("LIKELY_DUPLICATE_MIN_CONFIDENCE", "10")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://portal.example.com, https://admin.example.com")
    settings = load_settings()
    assert settings.max_existing_candidates == 500
    assert settings.likely_duplicate_min_confidence == 50
    assert settings.cors_allow_origins == (
        "https://portal.example.com",
        "https://admin.example.com",
    )
