"""
Shared fixtures: temporary settings, a fake OCR provider and an API client
wired through dependency overrides (no live Vision calls).
"""
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_image_storage, get_text_detector
from app.core.config import Settings, get_settings
from app.main import app
from app.services.chassis_service import ChassisService
from app.services.ocr_service import TextDetector
from app.services.storage import ImageStorage


class FakeTextDetector(TextDetector):
    """Returns canned text and records every image it was asked to read."""

    def __init__(self, text: str = "", error: Optional[Exception] = None):
        self.text = text
        self.error = error
        self.calls: list[bytes] = []

    def detect_text(self, content: bytes) -> str:
        self.calls.append(content)
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(DATA_DIR=tmp_path / "data", GOOGLE_APPLICATION_CREDENTIALS=None)


@pytest.fixture
def storage(test_settings) -> ImageStorage:
    image_storage = ImageStorage(test_settings.UPLOAD_DIR)
    image_storage.ensure_directory()
    return image_storage


@pytest.fixture
def fake_detector() -> FakeTextDetector:
    return FakeTextDetector()


@pytest.fixture
def service(fake_detector, storage) -> ChassisService:
    return ChassisService(text_detector=fake_detector, storage=storage)


@pytest.fixture
def client(test_settings, storage, fake_detector):
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_image_storage] = lambda: storage
    app.dependency_overrides[get_text_detector] = lambda: fake_detector

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def saved_files(storage):
    """Files currently in the upload directory."""
    return lambda: sorted(p.name for p in storage.upload_dir.iterdir())
