"""
Schemas for chassis extraction - the per-request data structures of the pipeline
and the JSON shapes returned by the API.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MatchTier(str, Enum):
    """
    Stage of the extraction cascade that produced an identifier.
    Ordered from highest to lowest confidence.
    """
    STRICT_VIN = "strict_vin"  # 17 chars, VIN alphabet
    SEGMENTED = "segmented"  # groups split by spaces/hyphens
    GENERAL = "general"  # any 8-17 alphanumeric run


class OutcomeKind(str, Enum):
    """
    Terminal states of the request pipeline - each maps to exactly one response shape.
    """
    SUCCESS = "success"
    NO_TEXT = "no_text"
    NO_MATCH = "no_match"
    CONFIG_ERROR = "config_error"
    CALLER_ERROR = "caller_error"
    INTERNAL_ERROR = "internal_error"


# ==================== Pipeline Models ====================

@dataclass(frozen=True)
class UploadedImage:
    """A single uploaded file, held in memory for one request."""
    content: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class ExtractionResult:
    """
    Either a found identifier (with the tier that matched it) or nothing.
    """
    identifier: Optional[str] = None
    tier: Optional[MatchTier] = None

    @property
    def found(self) -> bool:
        return self.identifier is not None

    @classmethod
    def not_found(cls) -> "ExtractionResult":
        return cls()


@dataclass(frozen=True)
class PersistedImage:
    filename: str
    path: Path


@dataclass(frozen=True)
class PipelineOutcome:
    """
    Result of processing one upload request.

    Only the fields relevant to `kind` are set; the API layer turns this into
    the response in a single place.
    """
    kind: OutcomeKind
    chassis_number: Optional[str] = None
    image_name: Optional[str] = None
    extracted_text: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def success(cls, chassis_number: str, image_name: str) -> "PipelineOutcome":
        return cls(OutcomeKind.SUCCESS, chassis_number=chassis_number, image_name=image_name)

    @classmethod
    def no_text(cls) -> "PipelineOutcome":
        return cls(OutcomeKind.NO_TEXT)

    @classmethod
    def no_match(cls, extracted_text: str) -> "PipelineOutcome":
        return cls(OutcomeKind.NO_MATCH, extracted_text=extracted_text)

    @classmethod
    def config_error(cls) -> "PipelineOutcome":
        return cls(OutcomeKind.CONFIG_ERROR)

    @classmethod
    def caller_error(cls, detail: str) -> "PipelineOutcome":
        return cls(OutcomeKind.CALLER_ERROR, detail=detail)

    @classmethod
    def internal_error(cls, detail: str) -> "PipelineOutcome":
        return cls(OutcomeKind.INTERNAL_ERROR, detail=detail)


# ==================== API Response Models ====================

class CamelModel(BaseModel):
    """Serializes snake_case fields as camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChassisSuccessResponse(CamelModel):
    success: bool = True
    chassis_number: str = Field(..., description="Normalized chassis/VIN identifier")
    image_name: str = Field(..., description="Filename the uploaded image was saved under")
    message: str = "Chassis number extracted successfully and image saved"


class ChassisNotFoundResponse(CamelModel):
    success: bool = False
    message: str = "Chassis number not found"
    extracted_text: str = Field(..., description="Leading part of the OCR text, for manual review")


class ErrorResponse(CamelModel):
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    status: str = "OK"
