"""TesseractOCREngine (default) and PaddleOCREngine for weight display photos."""
from __future__ import annotations

import asyncio
import io
import logging

import pytesseract
from PIL import Image, ImageOps

from weight_ocr.ocr.base_ocr import OCREngine, OCRResult

logger = logging.getLogger(__name__)


def load_image(image_bytes: bytes, *, preprocess: bool) -> Image.Image:
    """Decode *image_bytes*; optionally flatten to grayscale and stretch contrast.

    LCD and LED displays photographed under warehouse lighting are often low
    contrast, which hurts digit recognition more than anything else.
    """
    img = Image.open(io.BytesIO(image_bytes))
    img.load()
    if not preprocess:
        return img.convert("RGB")
    return ImageOps.autocontrast(img.convert("L"))


# ---------------------------------------------------------------------------
# TesseractOCREngine: pytesseract
# ---------------------------------------------------------------------------

class TesseractOCREngine(OCREngine):
    """OCR engine backed by the Tesseract binary via pytesseract.

    Tesseract is told to expect a single uniform block of text (PSM 6) and to
    only emit digits, separators and the ``kg`` unit.

    Config (via .env):
        OCR_PROVIDER=tesseract
        TESSERACT_LANG=eng
        TESSERACT_CHAR_WHITELIST="0123456789.,kg "
        TESSERACT_PSM=6
    """

    def __init__(
        self,
        lang: str = "eng",
        char_whitelist: str = "0123456789.,kg ",
        psm: int = 6,
        preprocess: bool = True,
    ) -> None:
        self._lang = lang
        self._config = f'--psm {psm} -c "tessedit_char_whitelist={char_whitelist}"'
        self._preprocess = preprocess

    async def extract_text(self, image_bytes: bytes) -> OCRResult:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._recognize, image_bytes)

    def _recognize(self, image_bytes: bytes) -> OCRResult:
        img = load_image(image_bytes, preprocess=self._preprocess)
        data = pytesseract.image_to_data(
            img,
            lang=self._lang,
            config=self._config,
            output_type=pytesseract.Output.DICT,
        )

        lines: dict[tuple[int, int, int], list[str]] = {}
        confidences: list[float] = []
        for i, word in enumerate(data["text"]):
            word = (word or "").strip()
            conf = float(data["conf"][i])
            if not word or conf < 0:
                continue
            key = (data["block_num"][i], data["par_num"][i], data["line_num"][i])
            lines.setdefault(key, []).append(word)
            confidences.append(conf)

        full_text = "\n".join(" ".join(words) for words in lines.values())
        avg_confidence = sum(confidences) / len(confidences) if confidences else 0.0

        logger.info(
            "tesseract_complete",
            extra={"lines": len(lines), "avg_confidence": round(avg_confidence, 2)},
        )

        return OCRResult(text=full_text, confidence=avg_confidence)


# ---------------------------------------------------------------------------
# PaddleOCREngine: PaddleOCR
# ---------------------------------------------------------------------------

class PaddleOCREngine(OCREngine):
    """OCR engine backed by PaddleOCR (runs 100% locally).

    Install dependency:
        pip install paddlepaddle paddleocr

    Config (via .env):
        OCR_PROVIDER=paddleocr
        PADDLE_LANG=en
        PADDLE_USE_GPU=false
    """

    def __init__(self, lang: str = "en", use_gpu: bool = False, preprocess: bool = True) -> None:
        self._lang = lang
        self._use_gpu = use_gpu
        self._preprocess = preprocess
        self._ocr = None   # lazy-init to avoid import cost at startup

    def _get_ocr(self):
        if self._ocr is None:
            try:
                from paddleocr import PaddleOCR  # type: ignore[import]
            except ModuleNotFoundError as exc:
                raise RuntimeError(
                    "PaddleOCR is not installed. Run: pip install paddlepaddle paddleocr"
                ) from exc
            self._ocr = PaddleOCR(
                use_angle_cls=True,
                lang=self._lang,
                use_gpu=self._use_gpu,
                show_log=False,
            )
        return self._ocr

    async def extract_text(self, image_bytes: bytes) -> OCRResult:
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, self._recognize, image_bytes)

    def _recognize(self, image_bytes: bytes) -> OCRResult:
        import numpy as np  # type: ignore[import]

        img = load_image(image_bytes, preprocess=self._preprocess).convert("RGB")
        result = self._get_ocr().ocr(np.array(img), cls=True)

        lines: list[str] = []
        confidences: list[float] = []
        if result and result[0]:
            for line in result[0]:
                # Each line: [bounding_box, [text, confidence]]
                text, conf = line[1]
                lines.append(text)
                confidences.append(float(conf))

        full_text = "\n".join(lines)
        # PaddleOCR reports 0.0-1.0; OCRResult uses the 0-100 engine scale
        avg_confidence = 100.0 * sum(confidences) / len(confidences) if confidences else 0.0

        logger.info(
            "paddleocr_complete",
            extra={"lines": len(lines), "avg_confidence": round(avg_confidence, 2)},
        )

        return OCRResult(text=full_text, confidence=avg_confidence)
