"""
Image storage for successfully processed uploads.

Write-once: files are never read back, listed or cleaned up by this service.
"""
import time
import uuid
from pathlib import Path

from app.core.exceptions import ImageStorageError
from app.models.chassis import PersistedImage
from app.utils.logger import get_logger

logger = get_logger(__name__)


class ImageStorage:
    """Saves image bytes into a single upload directory."""

    def __init__(self, upload_dir: Path):
        self.upload_dir = Path(upload_dir)

    def ensure_directory(self) -> Path:
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"Upload directory ready: {self.upload_dir}")
            return self.upload_dir
        except OSError as e:
            raise ImageStorageError(
                message=f"Could not create upload directory {self.upload_dir}",
                component="ImageStorage",
                original_error=e
            )

    @staticmethod
    def generate_filename(original_filename: str) -> str:
        """
        Build a collision-resistant name: epoch millis + random suffix,
        keeping the original extension.

        'IMG_001.jpg' → '1700000000000-3f9a0c1b2d4e.jpg'
        """
        millis = int(time.time() * 1000)
        suffix = uuid.uuid4().hex[:12]
        extension = Path(original_filename or "").suffix
        return f"{millis}-{suffix}{extension}"

    def save(self, content: bytes, original_filename: str) -> PersistedImage:
        """
        Write image bytes under a freshly generated filename.

        Raises:
            ImageStorageError: If the file could not be written
        """
        filename = self.generate_filename(original_filename)
        path = self.upload_dir / filename

        try:
            path.write_bytes(content)
        except OSError as e:
            raise ImageStorageError(
                message=f"Could not save image {filename}",
                component="ImageStorage",
                original_error=e
            )

        logger.info(f"Image saved: {path}")
        return PersistedImage(filename=filename, path=path)
