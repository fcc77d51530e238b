from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from threading import Lock
from typing import Iterable

from fastapi import Request

logger = logging.getLogger("candidate_dedupe")

METRIC_PREFIX = "candidate_dedupe"


@dataclass
class MetricsSnapshot:
    requests_total: int
    requests_5xx: int
    total_latency_ms: float
    checks_by_action: dict[str, int] = field(default_factory=dict)
    matches_reported: int = 0
    by_route_status: dict[tuple[str, int], int] = field(default_factory=dict)

    @property
    def duplicate_checks_total(self) -> int:
        return sum(self.checks_by_action.values())

    @property
    def avg_latency_ms(self) -> float:
        return self.total_latency_ms / self.requests_total if self.requests_total else 0.0


def _family(name: str, kind: str, help_text: str, samples: Iterable[str]) -> list[str]:
    metric = f"{METRIC_PREFIX}_{name}"
    lines = [f"# HELP {metric} {help_text}", f"# TYPE {metric} {kind}"]
    lines.extend(f"{metric}{sample}" for sample in samples)
    return lines


class MetricsRegistry:
    """Request and duplicate-check counters, rendered in Prometheus text format."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._requests_total = 0
        self._requests_5xx = 0
        self._total_latency_ms = 0.0
        self._by_route_status: dict[tuple[str, int], int] = {}
        self._checks_by_action: dict[str, int] = {}
        self._matches_reported = 0

    def record(self, *, route: str, status_code: int, latency_ms: float) -> None:
        with self._lock:
            self._requests_total += 1
            if status_code >= 500:
                self._requests_5xx += 1
            self._total_latency_ms += latency_ms
            key = (route, status_code)
            self._by_route_status[key] = self._by_route_status.get(key, 0) + 1

    def record_duplicate_check(self, *, action: str, matches: int = 0) -> None:
        with self._lock:
            self._checks_by_action[action] = self._checks_by_action.get(action, 0) + 1
            self._matches_reported += matches

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return MetricsSnapshot(
                requests_total=self._requests_total,
                requests_5xx=self._requests_5xx,
                total_latency_ms=self._total_latency_ms,
                checks_by_action=dict(self._checks_by_action),
                matches_reported=self._matches_reported,
                by_route_status=dict(self._by_route_status),
            )

    def to_prometheus(self) -> str:
        snap = self.snapshot()
        lines: list[str] = []
        lines += _family("requests_total", "counter", "Total HTTP requests", [f" {snap.requests_total}"])
        lines += _family(
            "requests_5xx_total", "counter", "Total 5xx HTTP requests", [f" {snap.requests_5xx}"]
        )
        lines += _family(
            "request_avg_latency_ms",
            "gauge",
            "Average request latency ms",
            [f" {snap.avg_latency_ms:.2f}"],
        )
        lines += _family(
            "checks_total",
            "counter",
            "Duplicate checks by recommended action",
            (f'{{action="{action}"}} {count}' for action, count in sorted(snap.checks_by_action.items())),
        )
        lines += _family(
            "matches_reported_total",
            "counter",
            "Duplicate matches returned across all checks",
            [f" {snap.matches_reported}"],
        )
        lines += _family(
            "route_requests_total",
            "counter",
            "HTTP requests by route and status",
            (
                f'{{route="{route}",status="{status_code}"}} {count}'
                for (route, status_code), count in sorted(snap.by_route_status.items())
            ),
        )
        return "\n".join(lines) + "\n"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


async def observe_request(
    request: Request,
    call_next,
    *,
    metrics: MetricsRegistry,
):
    start = time.perf_counter()
    path = request.url.path
    try:
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000.0
        metrics.record(route=path, status_code=response.status_code, latency_ms=latency_ms)
        logger.info(
            "request_complete method=%s path=%s status=%s latency_ms=%.2f",
            request.method,
            path,
            response.status_code,
            latency_ms,
        )
        return response
    except Exception:
        latency_ms = (time.perf_counter() - start) * 1000.0
        metrics.record(route=path, status_code=500, latency_ms=latency_ms)
        logger.exception(
            "request_failed method=%s path=%s latency_ms=%.2f",
            request.method,
            path,
            latency_ms,
        )
        raise
