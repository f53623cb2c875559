"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from calorie_tracker.api.dashboard import router as dashboard_router
from calorie_tracker.api.models import AnalyzeRequest
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.errors import InferenceUnavailable, PersistenceFailed
from calorie_tracker.domain.meals import MealAnalysis


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(dashboard_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/analyze")
    async def analyze(payload: AnalyzeRequest, request: Request) -> JSONResponse:
        """Estimate a meal from a photo and save it onto the entry, if given."""
        state_container: AppContainer = request.app.state.container
        entry_id = str(payload.entry_id) if payload.entry_id else ""
        try:
            analysis = await state_container.analysis_service.analyze(
                payload.image_url, payload.entry_id
            )
        except ValueError as exc:
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=_error_payload(
                    state_container, exc, "invalid_image_reference"
                ),
            )
        except InferenceUnavailable as exc:
            logger.exception("Meal analysis failed", extra={"entry_id": entry_id})
            return JSONResponse(
                status_code=status.HTTP_502_BAD_GATEWAY,
                content=_error_payload(state_container, exc, "inference_unavailable"),
            )
        except PersistenceFailed as exc:
            logger.exception(
                "Failed to save meal analysis", extra={"entry_id": entry_id}
            )
            content = _analysis_payload(exc.analysis, entry_id, saved=False)
            content.update(_error_payload(state_container, exc, "persistence_failed"))
            content["ok"] = True
            return JSONResponse(content=content)
        return JSONResponse(
            content=_analysis_payload(analysis, entry_id, saved=bool(entry_id))
        )

    return app


def _analysis_payload(
    analysis: MealAnalysis, entry_id: str, *, saved: bool
) -> dict[str, object]:
    return {"ok": True, "saved": saved, "entry_id": entry_id, **analysis.model_dump()}


def _error_payload(
    state_container: AppContainer, exc: Exception, error: str
) -> dict[str, object]:
    """Return an error body, with debug detail in the local environment."""
    payload: dict[str, object] = {"ok": False, "error": error}
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            payload["detail"] = detail
    return payload
