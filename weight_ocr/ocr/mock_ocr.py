from __future__ import annotations

from weight_ocr.ocr.base_ocr import OCRResult, OCREngine


class MockOCREngine(OCREngine):
    def __init__(self, text: str = "1\n1626", confidence: float = 88.0) -> None:
        self._text = text
        self._confidence = confidence

    async def extract_text(self, image_bytes: bytes) -> OCRResult:
        # Mock OCR for development/testing: a seven-segment reading with a stray fragment
        return OCRResult(text=self._text, confidence=self._confidence)
