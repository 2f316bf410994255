"""Shared pytest configuration and fixtures."""
from __future__ import annotations

import os
import tempfile

# Provide env vars before any weight_ocr module is imported
os.environ.setdefault("OCR_PROVIDER", "mock")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="weight-ocr-uploads-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from weight_ocr.core.config import Settings  # noqa: E402
from weight_ocr.main import create_app  # noqa: E402
from weight_ocr.ocr.mock_ocr import MockOCREngine  # noqa: E402


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        ocr_provider="mock",
        upload_dir=str(tmp_path / "uploads"),
        max_concurrent=2,
        history_size=5,
        webhook_url=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings, ocr_engine=MockOCREngine())


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


