from __future__ import annotations

from backend.app.observability import MetricsRegistry


def test_metrics_endpoint_exposes_counters(client) -> None:
    health = client.get("/health")
    assert health.status_code == 200

    client.post("/duplicates/check", json={"candidate": {"first_name": "Jane"}})

    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    body = metrics.text
    assert "candidate_dedupe_requests_total" in body
    assert "candidate_dedupe_requests_5xx_total" in body
    assert 'candidate_dedupe_checks_total{action="allow"} 1' in body


def test_readiness_endpoint(client) -> None:
    response = client.get("/health/ready")
    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_registry_snapshot_counts_checks() -> None:
    registry = MetricsRegistry()
    registry.record(route="/duplicates/check", status_code=200, latency_ms=3.0)
    registry.record(route="/duplicates/check", status_code=500, latency_ms=5.0)
    registry.record_duplicate_check(action="warn")
    registry.record_duplicate_check(action="block")

    snap = registry.snapshot()
    assert snap.requests_total == 2
    assert snap.requests_5xx == 1
    assert snap.duplicate_checks_total == 2
    assert 'route="/duplicates/check",status="500"' in registry.to_prometheus()


def test_matches_reported_counts_returned_matches(client) -> None:
    existing = {"id": "cand_1", "first_name": "Jane", "last_name": "Doe", "phone": "07123456789"}
    client.post(
        "/duplicates/check",
        json={
            "candidate": {"first_name": "Jane", "last_name": "Doe", "phone": "+447123456789"},
            "existing_candidates": [existing, dict(existing, id="cand_2")],
        },
    )
    snap = client.app.state.metrics.snapshot()
    assert snap.matches_reported == 2
    assert snap.checks_by_action == {"warn": 1}
    assert "candidate_dedupe_matches_reported_total 2" in client.get("/metrics").text
