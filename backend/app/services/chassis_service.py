"""
Chassis Service - request pipeline for chassis extraction.

Process:
1. Pick the first uploaded image (others are ignored)
2. Check the OCR service is configured
3. Run OCR
4. Extract the chassis number
5. Save the image - only when a chassis number was found

Every failure is turned into a PipelineOutcome; nothing escapes to the caller.
"""
from typing import Optional, Sequence

from fastapi.concurrency import run_in_threadpool

from app.models.chassis import PipelineOutcome, UploadedImage
from app.services.chassis_extractor import DEFAULT_RULES, ExtractionRules, extract_chassis_number
from app.services.ocr_service import TextDetector
from app.services.storage import ImageStorage
from app.utils.logger import get_logger

logger = get_logger(__name__)


class ChassisService:
    """Runs one uploaded image through OCR, extraction and storage."""

    def __init__(
            self,
            text_detector: Optional[TextDetector],
            storage: ImageStorage,
            rules: ExtractionRules = DEFAULT_RULES,
            preview_length: int = 400,
            log_preview_length: int = 150
    ):
        self.text_detector = text_detector
        self.storage = storage
        self.rules = rules
        self.preview_length = preview_length
        self.log_preview_length = log_preview_length

    async def process(self, images: Sequence[UploadedImage]) -> PipelineOutcome:
        """
        Process an upload request.

        Args:
            images: Uploaded files in arrival order

        Returns:
            PipelineOutcome describing the terminal state
        """
        try:
            if not images:
                return PipelineOutcome.caller_error("No image uploaded")

            image = images[0]
            if len(images) > 1:
                logger.debug(f"Ignoring {len(images) - 1} extra uploaded file(s)")

            if self.text_detector is None:
                logger.error("OCR requested but Vision client is not configured")
                return PipelineOutcome.config_error()

            logger.info(f"Running OCR on {image.filename} ({image.size} bytes)...")
            text = await run_in_threadpool(self.text_detector.detect_text, image.content)

            if not text:
                logger.info("No text detected")
                return PipelineOutcome.no_text()

            logger.info(f"OCR text: {text[:self.log_preview_length]} ...")

            result = extract_chassis_number(text, self.rules)

            if not result.found:
                logger.info("Chassis number not found")
                return PipelineOutcome.no_match(text[:self.preview_length])

            logger.info(f"Chassis number found ({result.tier.value}): {result.identifier}")

            persisted = await run_in_threadpool(self.storage.save, image.content, image.filename)
            return PipelineOutcome.success(result.identifier, persisted.filename)

        except Exception as e:
            logger.error(f"Processing error: {e}", exc_info=True)
            return PipelineOutcome.internal_error(str(e))
