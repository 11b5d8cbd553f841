from pathlib import Path
from typing import Optional

from app.core.config import Settings
from app.core.exceptions import UploadRejectedError


def validate_image_upload(
        filename: Optional[str],
        content_type: Optional[str],
        size: int,
        settings: Settings
) -> None:
    """
    Screen one uploaded file before it reaches the pipeline.

    Both the extension and the declared media type must be allowed image types,
    and the file must fit within MAX_UPLOAD_SIZE.

    Raises:
        UploadRejectedError: If validation fails
    """
    extension = Path(filename or "").suffix.lower()
    media_type = (content_type or "").split(";")[0].strip().lower()

    if extension not in settings.ALLOWED_EXTENSIONS or media_type not in settings.ALLOWED_CONTENT_TYPES:
        raise UploadRejectedError("Only image files allowed!", component="validate_image_upload")

    if size > settings.MAX_UPLOAD_SIZE:
        max_mb = settings.MAX_UPLOAD_SIZE / 1024 / 1024
        raise UploadRejectedError(f"File too large. Max {max_mb:.0f}MB.", component="validate_image_upload")
