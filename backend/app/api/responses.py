"""
Outcome → HTTP response mapping.

The only place where pipeline outcomes become status codes and JSON bodies.
"""
from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from app.models.chassis import (
    ChassisNotFoundResponse,
    ChassisSuccessResponse,
    ErrorResponse,
    OutcomeKind,
    PipelineOutcome,
)

NO_IMAGE_MESSAGE = "No image uploaded"
NOT_CONFIGURED_MESSAGE = "Vision API not configured"
NO_TEXT_MESSAGE = "No text detected in image"
FAILED_PREFIX = "Failed to process image: "


def _json(status_code: int, body: BaseModel) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))


def outcome_to_response(outcome: PipelineOutcome) -> JSONResponse:
    """
    Build the JSON response for a pipeline outcome.

    SUCCESS → 200, NO_MATCH → 200 (success=false), NO_TEXT / CALLER_ERROR → 400,
    CONFIG_ERROR / INTERNAL_ERROR → 500.
    """
    if outcome.kind is OutcomeKind.SUCCESS:
        return _json(status.HTTP_200_OK, ChassisSuccessResponse(
            chassis_number=outcome.chassis_number,
            image_name=outcome.image_name
        ))

    if outcome.kind is OutcomeKind.NO_MATCH:
        return _json(status.HTTP_200_OK, ChassisNotFoundResponse(
            extracted_text=outcome.extracted_text or ""
        ))

    if outcome.kind is OutcomeKind.NO_TEXT:
        return _json(status.HTTP_400_BAD_REQUEST, ErrorResponse(error=NO_TEXT_MESSAGE))

    if outcome.kind is OutcomeKind.CALLER_ERROR:
        return _json(status.HTTP_400_BAD_REQUEST, ErrorResponse(error=outcome.detail or NO_IMAGE_MESSAGE))

    if outcome.kind is OutcomeKind.CONFIG_ERROR:
        return _json(status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorResponse(error=NOT_CONFIGURED_MESSAGE))

    return _json(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(error=FAILED_PREFIX + (outcome.detail or "unknown error"))
    )
