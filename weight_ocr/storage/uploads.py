"""Upload validation and on-disk storage of submitted display photos."""
from __future__ import annotations

import logging
import random
import re
import time
from pathlib import Path

logger = logging.getLogger(__name__)

ALLOWED_TYPES = re.compile(r"jpeg|jpg|png|gif|bmp|webp")


def is_allowed_image(filename: str, content_type: str | None) -> bool:
    """Both the extension and the MIME type have to look like an image."""
    extension = Path(filename).suffix.lower()
    return bool(ALLOWED_TYPES.search(extension)) and bool(ALLOWED_TYPES.search(content_type or ""))


def make_upload_name(original_filename: str) -> str:
    suffix = Path(original_filename).suffix.lower()
    return f"weight-{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1)}{suffix}"


class UploadStorage:
    def __init__(self, upload_dir: str | Path, *, keep: bool = True) -> None:
        self._dir = Path(upload_dir)
        self._keep = keep

    @property
    def directory(self) -> Path:
        return self._dir

    def ensure_dir(self) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)

    def save(self, original_filename: str, content: bytes) -> Path:
        self.ensure_dir()
        path = self._dir / make_upload_name(original_filename)
        path.write_bytes(content)
        logger.info("upload_stored", extra={"path": str(path), "size_bytes": len(content)})
        return path

    def discard(self, path: Path) -> None:
        """Remove *path* unless uploads are configured to be kept."""
        if self._keep:
            return
        path.unlink(missing_ok=True)
