"""Recognition pipeline: admission → OCR → extraction → confidence."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from weight_ocr.admission.gate import AdmissionGate
from weight_ocr.confidence.confidence import compute_confidence
from weight_ocr.extraction.extractor import extract_weight
from weight_ocr.ocr.base_ocr import OCREngine, OCRResult

logger = logging.getLogger(__name__)


class EngineFailure(RuntimeError):
    """The OCR engine raised while recognizing an image."""


@dataclass(frozen=True)
class WeightRecognitionResult:
    weight: str
    confidence: float  # 0.0 to 1.0
    raw_text: str


class WeightRecognitionPipeline:
    def __init__(self, ocr_engine: OCREngine, gate: AdmissionGate) -> None:
        self._ocr_engine = ocr_engine
        self._gate = gate

    @property
    def gate(self) -> AdmissionGate:
        return self._gate

    async def recognize(self, image_bytes: bytes) -> WeightRecognitionResult:
        """Recognize the weight shown in *image_bytes*.

        Raises:
            AdmissionRejected: every recognition slot is busy; retry later.
            EngineFailure: the OCR engine failed on this image.
        """
        ocr_result = await self._run_engine(image_bytes)

        extracted = extract_weight(ocr_result.text)
        confidence = compute_confidence(ocr_result.confidence, extracted.confidence)

        logger.info(
            "weight_extracted",
            extra={
                "weight": extracted.value,
                "engine_confidence": ocr_result.confidence,
                "extraction_confidence": extracted.confidence,
                "confidence": round(confidence, 4),
            },
        )

        return WeightRecognitionResult(
            weight=extracted.value,
            confidence=confidence,
            raw_text=ocr_result.text.strip(),
        )

    async def _run_engine(self, image_bytes: bytes) -> OCRResult:
        with self._gate.admit():
            t0 = time.monotonic()
            try:
                result = await self._ocr_engine.extract_text(image_bytes)
            except Exception as exc:
                logger.exception("ocr_failed", extra={"error": str(exc)})
                raise EngineFailure(str(exc) or exc.__class__.__name__) from exc
            logger.info(
                "ocr_complete",
                extra={
                    "duration_ms": int((time.monotonic() - t0) * 1000),
                    "confidence": result.confidence,
                },
            )
            return result
