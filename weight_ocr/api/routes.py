from __future__ import annotations

import html
import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse
from starlette.datastructures import UploadFile

from weight_ocr.admission.gate import AdmissionGate
from weight_ocr.history.store import HistoryStore, ReadingRecord
from weight_ocr.pipeline.pipeline import WeightRecognitionPipeline
from weight_ocr.schemas import HealthResponse, HistoryResponse, ReadingOut, UploadResponse
from weight_ocr.storage.uploads import UploadStorage, is_allowed_image
from weight_ocr.webhook.dispatcher import WebhookDispatcher

logger = logging.getLogger(__name__)
router = APIRouter()

KNOWN_METADATA_FIELDS = ("timestamp", "userId", "location", "deviceId", "notes")
IMAGE_FIELD = "image"


def get_gate(request: Request) -> AdmissionGate:
    return request.app.state.gate


def get_pipeline(request: Request) -> WeightRecognitionPipeline:
    return request.app.state.pipeline


def get_history(request: Request) -> HistoryStore:
    return request.app.state.history


def get_storage(request: Request) -> UploadStorage:
    return request.app.state.storage


def get_webhook(request: Request) -> WebhookDispatcher | None:
    return request.app.state.webhook


def collect_metadata(form_items: list[tuple[str, Any]]) -> dict[str, Any]:
    """Known fields always present (``None`` if absent); anything else passes through."""
    metadata: dict[str, Any] = {key: None for key in KNOWN_METADATA_FIELDS}
    for key, value in form_items:
        if key == IMAGE_FIELD or isinstance(value, UploadFile):
            continue
        if key in KNOWN_METADATA_FIELDS:
            value = value or None
        metadata[key] = value
    return metadata


def _to_out(record: ReadingRecord) -> ReadingOut:
    return ReadingOut(
        weight=record.weight,
        confidence=record.confidence,
        raw_text=record.raw_text,
        filename=record.filename,
        uploaded_at=record.uploaded_at,
        metadata=record.metadata,
    )


@router.get("/")
async def root(request: Request) -> dict[str, Any]:
    return {
        "message": "Weight OCR Server",
        "version": request.app.version,
        "endpoints": {
            "upload": "POST /api/upload - Upload image of weight display",
            "history": "GET /api/history - Recent readings",
            "dashboard": "GET /dashboard - Recent readings as HTML",
            "health": "GET /health - Health check",
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health(gate: AdmissionGate = Depends(get_gate)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(timezone.utc),
        in_flight=gate.in_flight,
        limit=gate.limit,
    )


@router.post("/api/upload", response_model=UploadResponse)
async def upload_image(
    request: Request,
    background_tasks: BackgroundTasks,
    pipeline: WeightRecognitionPipeline = Depends(get_pipeline),
    history: HistoryStore = Depends(get_history),
    storage: UploadStorage = Depends(get_storage),
    webhook: WebhookDispatcher | None = Depends(get_webhook),
) -> UploadResponse:
    form = await request.form()
    image = form.get(IMAGE_FIELD)
    if not isinstance(image, UploadFile) or not image.filename:
        raise HTTPException(status_code=400, detail="No image file provided")

    if not is_allowed_image(image.filename, image.content_type):
        raise HTTPException(status_code=415, detail="Only image files are allowed")

    content = await image.read()
    max_bytes = request.app.state.settings.max_upload_bytes
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail=f"Image exceeds {max_bytes} bytes")

    metadata = collect_metadata(form.multi_items())
    path = storage.save(image.filename, content)
    logger.info("upload_received", extra={"stored_as": path.name, "metadata_keys": sorted(metadata)})

    try:
        result = await pipeline.recognize(content)
    except Exception:
        # Nothing refers to a failed or rejected upload
        path.unlink(missing_ok=True)
        raise
    storage.discard(path)

    record = ReadingRecord(
        weight=result.weight,
        confidence=result.confidence,
        raw_text=result.raw_text,
        filename=path.name,
        uploaded_at=datetime.now(timezone.utc),
        metadata=metadata,
    )
    history.add(record)
    reading = _to_out(record)

    if webhook is not None:
        background_tasks.add_task(webhook.dispatch, reading.model_dump(mode="json", by_alias=True))

    logger.info(
        "weight_recognized",
        extra={"stored_as": path.name, "weight": result.weight, "confidence": round(result.confidence, 4)},
    )
    return UploadResponse(data=reading)


@router.get("/api/history", response_model=HistoryResponse)
async def get_recent_readings(
    limit: int | None = Query(default=None, ge=1),
    history: HistoryStore = Depends(get_history),
) -> HistoryResponse:
    return HistoryResponse(
        capacity=history.max_size,
        items=[_to_out(r) for r in history.recent(limit)],
    )


@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(
    history: HistoryStore = Depends(get_history),
    gate: AdmissionGate = Depends(get_gate),
) -> HTMLResponse:
    rows = "\n".join(
        "<tr>"
        f"<td>{html.escape(r.uploaded_at.isoformat())}</td>"
        f"<td><strong>{html.escape(r.weight)}</strong></td>"
        f"<td>{r.confidence:.1%}</td>"
        f"<td><code>{html.escape(r.raw_text)}</code></td>"
        f"<td>{html.escape(str(r.metadata.get('deviceId') or ''))}</td>"
        f"<td>{html.escape(r.filename)}</td>"
        "</tr>"
        for r in history.recent()
    )
    if not rows:
        rows = '<tr><td colspan="6">No readings yet.</td></tr>'

    page = f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta http-equiv="refresh" content="10">
<title>Weight OCR Dashboard</title>
<style>
body {{ font-family: sans-serif; margin: 2rem; }}
table {{ border-collapse: collapse; width: 100%; }}
th, td {{ border: 1px solid #ccc; padding: 0.4rem 0.6rem; text-align: left; }}
th {{ background: #f3f3f3; }}
</style>
</head>
<body>
<h1>Weight OCR Dashboard</h1>
<p>Recognitions in flight: {gate.in_flight} / {gate.limit}</p>
<table>
<thead><tr><th>Uploaded</th><th>Weight</th><th>Confidence</th><th>Raw text</th><th>Device</th><th>File</th></tr></thead>
<tbody>
{rows}
</tbody>
</table>
</body>
</html>"""
    return HTMLResponse(content=page)
