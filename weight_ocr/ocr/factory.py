from __future__ import annotations

from weight_ocr.core.config import Settings, settings as default_settings
from weight_ocr.ocr.base_ocr import OCREngine
from weight_ocr.ocr.mock_ocr import MockOCREngine


def get_ocr_engine(settings: Settings | None = None) -> OCREngine:
    """Return the configured OCR engine instance.

    OCR_PROVIDER options:
        mock     : fixed display reading (dev/test, no deps required)
        tesseract: TesseractOCREngine (needs the tesseract binary on PATH)
        paddleocr: PaddleOCREngine (pip install paddlepaddle paddleocr)
    """
    settings = settings or default_settings
    provider = settings.ocr_provider.lower().strip()

    if provider == "mock":
        return MockOCREngine()

    if provider == "tesseract":
        from weight_ocr.ocr.engines import TesseractOCREngine
        return TesseractOCREngine(
            lang=settings.tesseract_lang,
            char_whitelist=settings.tesseract_char_whitelist,
            psm=settings.tesseract_psm,
            preprocess=settings.ocr_preprocess,
        )

    if provider == "paddleocr":
        from weight_ocr.ocr.engines import PaddleOCREngine
        return PaddleOCREngine(
            lang=settings.paddle_lang,
            use_gpu=settings.paddle_use_gpu,
            preprocess=settings.ocr_preprocess,
        )

    raise ValueError(f"Unknown OCR_PROVIDER={settings.ocr_provider!r}")
