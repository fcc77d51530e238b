from __future__ import annotations

from fastapi import APIRouter, FastAPI, HTTPException, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from backend.app.models import (
    DuplicateCheckIdResponse,
    DuplicateCheckInput,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    LikelyDuplicateResponse,
)
from backend.app.observability import MetricsRegistry, configure_logging, observe_request
from backend.app.services.dedupe import (
    CandidateLimitExceededError,
    ensure_within_limit,
    find_duplicates,
    generate_duplicate_check_id,
    is_likely_duplicate,
)
from backend.app.settings import Settings, load_settings


def create_app() -> FastAPI:
    settings = load_settings()
    app = FastAPI(title="Candidate Duplicate Detection API", version="0.1.0")
    configure_logging(settings.log_level)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.metrics = MetricsRegistry()

    @app.middleware("http")
    async def observability_middleware(request: Request, call_next):
        return await observe_request(request, call_next, metrics=app.state.metrics)

    app.include_router(build_router())
    return app


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_metrics(request: Request) -> MetricsRegistry:
    return request.app.state.metrics


def _enforce_limit(payload: DuplicateCheckRequest, settings: Settings) -> None:
    try:
        ensure_within_limit(payload.existing_candidates, settings.max_existing_candidates)
    except CandidateLimitExceededError as exc:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(exc),
        ) from exc


def build_router() -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @router.get("/health/ready")
    def readiness() -> dict[str, str]:
        return {"status": "ready"}

    @router.get("/metrics", response_class=PlainTextResponse)
    def metrics(request: Request) -> Response:
        registry = get_metrics(request)
        return PlainTextResponse(registry.to_prometheus())

    @router.post("/duplicates/check", response_model=DuplicateCheckResponse)
    def check_duplicates(payload: DuplicateCheckRequest, request: Request) -> DuplicateCheckResponse:
        _enforce_limit(payload, get_settings(request))
        response = find_duplicates(payload.candidate, payload.existing_candidates)
        get_metrics(request).record_duplicate_check(
            action=response.recommended_action.value,
            matches=len(response.matches),
        )
        return response

    @router.post("/duplicates/likely", response_model=LikelyDuplicateResponse)
    def likely_duplicate(payload: DuplicateCheckRequest, request: Request) -> LikelyDuplicateResponse:
        settings = get_settings(request)
        _enforce_limit(payload, settings)
        likely = is_likely_duplicate(
            payload.candidate,
            payload.existing_candidates,
            min_confidence=settings.likely_duplicate_min_confidence,
        )
        return LikelyDuplicateResponse(
            likely_duplicate=likely,
            min_confidence=settings.likely_duplicate_min_confidence,
        )

    @router.post("/duplicates/check-id", response_model=DuplicateCheckIdResponse)
    def duplicate_check_id(payload: DuplicateCheckInput) -> DuplicateCheckIdResponse:
        return DuplicateCheckIdResponse(check_id=generate_duplicate_check_id(payload))

    return router
