"""
OCR Service - Google Cloud Vision text detection.

Single responsibility: turn image bytes into recognized text.
The client is built once at startup; when credentials are missing or broken
the service is simply unavailable (None) instead of crashing the app.
"""
from abc import ABC, abstractmethod
from typing import Optional

from google.cloud import vision
from google.oauth2 import service_account

from app.core.config import Settings
from app.core.exceptions import OCRServiceError
from app.utils.logger import get_logger

logger = get_logger(__name__)


class TextDetector(ABC):
    """Interface for OCR providers."""

    @abstractmethod
    def detect_text(self, content: bytes) -> str:
        """
        Recognize text in an image.

        Args:
            content: Raw image bytes

        Returns:
            Full recognized text, or "" when nothing legible was found
        """


class VisionTextDetector(TextDetector):
    """Wrapper over Google Cloud Vision `text_detection`."""

    def __init__(self, client: vision.ImageAnnotatorClient):
        self.client = client

    def detect_text(self, content: bytes) -> str:
        image = vision.Image(content=content)
        response = self.client.text_detection(image=image)

        if response.error.message:
            raise OCRServiceError(
                message=f"Google Vision API error: {response.error.message}",
                component="VisionTextDetector"
            )

        # First annotation holds the whole text block
        annotations = response.text_annotations
        if not annotations:
            return ""
        return annotations[0].description or ""


def load_vision_client(settings: Settings) -> Optional[vision.ImageAnnotatorClient]:
    """
    Build a Vision client from inline JSON credentials or a key file.

    Returns:
        The client, or None if credentials are missing or invalid
    """
    try:
        if not settings.cleaned_credentials():
            raise ValueError("GOOGLE_APPLICATION_CREDENTIALS missing")

        if settings.credentials_are_inline():
            credentials = service_account.Credentials.from_service_account_info(
                settings.credentials_info()
            )
            logger.info("Using inline JSON credentials")
        else:
            key_path = settings.credentials_path()
            if not key_path.exists():
                raise FileNotFoundError(f"Credentials file not found: {key_path}")
            credentials = service_account.Credentials.from_service_account_file(str(key_path))
            logger.info(f"Using credentials file: {key_path}")

        client_options = None
        if settings.GOOGLE_CLOUD_PROJECT_ID:
            client_options = {"quota_project_id": settings.GOOGLE_CLOUD_PROJECT_ID}

        client = vision.ImageAnnotatorClient(
            credentials=credentials,
            client_options=client_options
        )
        logger.info("Google Vision client initialized")
        return client

    except Exception as e:
        logger.error(f"Vision client error: {e}")
        return None


def build_text_detector(settings: Settings) -> Optional[TextDetector]:
    client = load_vision_client(settings)
    return VisionTextDetector(client) if client is not None else None
