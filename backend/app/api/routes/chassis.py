"""
Chassis Extraction Routes.

Single endpoint: upload a vehicle photo, get back its chassis/VIN number.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.api.deps import get_chassis_service, get_uploaded_images
from app.api.responses import outcome_to_response
from app.models.chassis import (
    ChassisNotFoundResponse,
    ChassisSuccessResponse,
    ErrorResponse,
    UploadedImage,
)
from app.services.chassis_service import ChassisService
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post(
    "/extract-chassis",
    response_model=ChassisSuccessResponse | ChassisNotFoundResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def extract_chassis(
        images: list[UploadedImage] = Depends(get_uploaded_images),
        service: ChassisService = Depends(get_chassis_service)
) -> JSONResponse:
    """
    Extract a chassis number from an uploaded image.

    Process:
    1. Accept any multipart field name; only the first file is used
    2. Run OCR (Google Vision)
    3. Match the chassis number in the recognized text
    4. Save the image only when a chassis number was found

    Returns:
        200: chassis number found (success=true) or not found (success=false)

    Raises:
        400: No image, rejected upload, or no text detected
        500: Vision not configured or processing failed
    """
    logger.info(f"Received {len(images)} file(s)")

    outcome = await service.process(images)
    logger.debug(f"Pipeline outcome: {outcome.kind.value}")

    return outcome_to_response(outcome)
