# docextract/services/extraction_service.py
"""
extraction_service.py
- Purpose: Orchestrates "uploaded document -> validated text" for the API.
- Owns: upload validation, the single awaited read, time budget, batch pool,
  and the hand-off rules for content generation.
- Design: Thick service; routers remain thin and easy to reason about.
"""

import asyncio
import logging
from typing import Sequence

from fastapi import UploadFile

from docextract.core.errors import extraction_failed, extraction_timeout
from docextract.core.config import settings
from docextract.core.request_context import set_context
from docextract.extraction.integrity import check_integrity
from docextract.extraction.pipeline import ExtractionPipeline
from docextract.extraction.pool import BatchItem, ExtractionWorkerPool
from docextract.extraction.quality import validate
from docextract.extraction.thresholds import QualityThresholds, ValidationContext
from docextract.extraction.types import (
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    RawDocument,
)
from docextract.schemas.extraction import failure_details
from docextract.validations.file_validators import read_upload_bytes, validate_upload
from docextract.validations.generation_validators import validate_generation_input

logger = logging.getLogger("docextract.extraction_service")


class ExtractionService:
    def __init__(
        self,
        *,
        thresholds: QualityThresholds | None = None,
        timeout_seconds: float | None = None,
        max_workers: int | None = None,
        executor: str | None = None,
    ):
        self.thresholds = thresholds or QualityThresholds.from_settings()
        self.timeout_seconds = settings.EXTRACTION_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        self.max_workers = max_workers or settings.EXTRACTION_MAX_WORKERS
        self.executor = executor or settings.EXTRACTION_EXECUTOR

    def pipeline(self, context: ValidationContext = ValidationContext.EXTRACTION) -> ExtractionPipeline:
        return ExtractionPipeline(thresholds=self.thresholds, context=context)

    async def read_document(self, upload: UploadFile | None) -> RawDocument:
        validate_upload(upload)
        data = await read_upload_bytes(upload)
        return RawDocument(
            data=data,
            file_name=upload.filename,
            declared_media_type=upload.content_type or "",
        )

    async def extract(
        self,
        document: RawDocument,
        *,
        context: ValidationContext = ValidationContext.EXTRACTION,
    ) -> ExtractionResult:
        set_context(document=document.file_name)
        logger.info(
            "extraction.start",
            extra={
                "byte_size": document.byte_size,
                "media_type": document.declared_media_type,
                "context": context.value,
            },
        )
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.pipeline(context).run, document),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise extraction_timeout(document.file_name, self.timeout_seconds) from e

    async def extract_upload(
        self,
        upload: UploadFile | None,
        *,
        context: ValidationContext = ValidationContext.EXTRACTION,
    ) -> tuple[RawDocument, ExtractionResult]:
        document = await self.read_document(upload)
        return document, await self.extract(document, context=context)

    def extract_batch(
        self,
        documents: Sequence[RawDocument],
        *,
        context: ValidationContext = ValidationContext.EXTRACTION,
    ) -> list[BatchItem]:
        with ExtractionWorkerPool(
            self.max_workers,
            executor=self.executor,
            thresholds=self.thresholds,
            context=context,
        ) as pool:
            return pool.extract_many(documents, budget_seconds=self.timeout_seconds)

    def grounding_text(self, result: ExtractionResult) -> str:
        """Text safe to hand to content generation, or an AppError explaining why not."""
        if isinstance(result, ExtractionFailure):
            raise extraction_failed(failure_details(result))
        return validate_generation_input(result.text)

    def accept_enhancement(
        self,
        result: ExtractionSuccess,
        enhanced_text: str,
        *,
        context: ValidationContext = ValidationContext.GENERATION,
    ) -> ExtractionSuccess:
        """Swap in rewritten text only if it is faithful and still passes the gate."""
        integrity = check_integrity(result.text, enhanced_text)
        if not integrity.ok:
            logger.info("enhancement.rejected", extra={"notes": integrity.notes})
            return result

        report = validate(enhanced_text, context=context, thresholds=self.thresholds)
        if not report.accepted:
            logger.info(
                "enhancement.rejected",
                extra={"reasons": sorted(r.value for r in report.reject_reasons)},
            )
            return result

        return ExtractionSuccess(text=enhanced_text, strategy_used=result.strategy_used, report=report)
