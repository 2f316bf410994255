from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from weight_ocr.admission.gate import AdmissionGate, AdmissionRejected
from weight_ocr.api.routes import router
from weight_ocr.core.config import Settings, settings as default_settings
from weight_ocr.core.logging import configure_logging
from weight_ocr.history.store import HistoryStore
from weight_ocr.ocr.base_ocr import OCREngine
from weight_ocr.ocr.factory import get_ocr_engine
from weight_ocr.pipeline.pipeline import EngineFailure, WeightRecognitionPipeline
from weight_ocr.storage.uploads import UploadStorage
from weight_ocr.webhook.dispatcher import WebhookDispatcher

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, ocr_engine: OCREngine | None = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)
    app = FastAPI(title="Weight OCR Server", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    # One gate per process, shared by every request through the pipeline
    gate = AdmissionGate(settings.max_concurrent)
    app.state.settings = settings
    app.state.gate = gate
    app.state.pipeline = WeightRecognitionPipeline(ocr_engine or get_ocr_engine(settings), gate)
    app.state.history = HistoryStore(settings.history_size)
    app.state.storage = UploadStorage(settings.upload_dir, keep=settings.keep_uploads)
    app.state.webhook = (
        WebhookDispatcher(
            settings.webhook_url,
            timeout=settings.webhook_timeout_seconds,
            max_attempts=settings.webhook_max_attempts,
        )
        if settings.webhook_url
        else None
    )

    app.include_router(router)
    register_error_handlers(app)

    @app.on_event("startup")
    async def _startup() -> None:
        app.state.storage.ensure_dir()
        logger.info(
            "startup",
            extra={
                "ocr_provider": settings.ocr_provider,
                "max_concurrent": settings.max_concurrent,
                "upload_dir": str(app.state.storage.directory),
                "webhook_enabled": app.state.webhook is not None,
            },
        )

    return app


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AdmissionRejected)
    async def _admission_rejected(_: Request, exc: AdmissionRejected) -> JSONResponse:
        return JSONResponse(
            status_code=429,
            headers={"Retry-After": "1"},
            content={
                "success": False,
                "error": "Too many recognitions in progress, try again later",
                "inFlight": exc.in_flight,
                "limit": exc.limit,
            },
        )

    @app.exception_handler(EngineFailure)
    async def _engine_failure(_: Request, exc: EngineFailure) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to process image", "message": str(exc)},
        )

    @app.exception_handler(Exception)
    async def _unhandled(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error", "message": str(exc)},
        )


app = create_app()
