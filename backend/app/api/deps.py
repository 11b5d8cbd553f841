"""
API Dependencies - Shared dependencies for FastAPI routes.

Process-wide objects (Vision client, image storage) are built once in the
application lifespan and stored on `app.state`; these functions hand them to
route handlers. Tests override them through `app.dependency_overrides`.
"""

from typing import Optional

from fastapi import Depends, Request
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.formparsers import MultiPartException

from app.core.config import Settings, get_settings
from app.core.exceptions import UploadRejectedError
from app.models.chassis import UploadedImage
from app.services.chassis_extractor import ExtractionRules
from app.services.chassis_service import ChassisService
from app.services.ocr_service import TextDetector
from app.services.storage import ImageStorage
from app.validation.validators import validate_image_upload


# ==================== Services ====================

def get_text_detector(request: Request) -> Optional[TextDetector]:
    """
    Get the OCR text detector built at startup.

    Returns None when Vision credentials were missing or invalid.
    """
    return getattr(request.app.state, "text_detector", None)


def get_image_storage(
        request: Request,
        settings: Settings = Depends(get_settings)
) -> ImageStorage:
    storage = getattr(request.app.state, "image_storage", None)
    return storage if storage is not None else ImageStorage(settings.UPLOAD_DIR)


def get_chassis_service(
        text_detector: Optional[TextDetector] = Depends(get_text_detector),
        storage: ImageStorage = Depends(get_image_storage),
        settings: Settings = Depends(get_settings)
) -> ChassisService:
    """
    Get a chassis service wired with the shared collaborators.

    Usage:
        @router.post("/extract-chassis")
        async def extract(service: ChassisService = Depends(get_chassis_service)):
            outcome = await service.process(images)
    """
    return ChassisService(
        text_detector=text_detector,
        storage=storage,
        rules=ExtractionRules.from_settings(settings),
        preview_length=settings.EXTRACTED_TEXT_PREVIEW_LENGTH,
        log_preview_length=settings.OCR_LOG_PREVIEW_LENGTH
    )


# ==================== Validation ====================

async def get_uploaded_images(
        request: Request,
        settings: Settings = Depends(get_settings)
) -> list[UploadedImage]:
    """
    Collect every file part of a multipart body, whatever its field name.

    Every file is screened (type, size) before the pipeline sees any of them;
    non-file fields are ignored.

    Raises:
        UploadRejectedError: If the body cannot be parsed or a file is rejected
    """
    try:
        form = await request.form()
    except StarletteHTTPException as e:
        raise UploadRejectedError(str(e.detail) or "Upload error", component="get_uploaded_images")
    except MultiPartException as e:
        raise UploadRejectedError(e.message or "Upload error", component="get_uploaded_images")

    images = []
    try:
        for _, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue

            # The parser already knows the part size; oversized parts are
            # rejected before their bytes are pulled into memory
            validate_image_upload(
                filename=value.filename,
                content_type=value.content_type,
                size=value.size or 0,
                settings=settings
            )
            content = await value.read(settings.MAX_UPLOAD_SIZE + 1)
            validate_image_upload(
                filename=value.filename,
                content_type=value.content_type,
                size=len(content),
                settings=settings
            )
            images.append(UploadedImage(
                content=content,
                filename=value.filename or "",
                content_type=value.content_type or ""
            ))
    finally:
        await form.close()

    return images
