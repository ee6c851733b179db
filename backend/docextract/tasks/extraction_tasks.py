from __future__ import annotations

import base64
import binascii
import logging

from docextract.celery_app import celery_app
from docextract.core.request_context import clear_context, set_context
from docextract.extraction.pipeline import ExtractionPipeline
from docextract.extraction.thresholds import ValidationContext
from docextract.extraction.types import RawDocument
from docextract.schemas.extraction import ExtractionResponse

logger = logging.getLogger("docextract.tasks.extraction")


@celery_app.task(
    name="docextract.tasks.extraction_tasks.extract_document_task",
    bind=True,
    max_retries=0,
)
def extract_document_task(
    self,
    payload_b64: str,
    file_name: str,
    media_type: str,
    context: str = ValidationContext.EXTRACTION.value,
):
    """
    Background extraction for one document.
    Returns the same JSON shape as POST /api/extractions. Extraction failure
    is a normal result, not a task error; a bad payload is the only error.
    """
    set_context(task_id=getattr(self.request, "id", None), document=file_name)
    try:
        logger.info("task.start", extra={"task": "extract_document_task"})
        try:
            data = base64.b64decode(payload_b64, validate=True)
        except (binascii.Error, ValueError):
            logger.warning("task.bad_payload", extra={"task": "extract_document_task"})
            return {"ok": False, "file_name": file_name, "error": "Payload is not valid base64"}

        document = RawDocument(data=data, file_name=file_name, declared_media_type=media_type)
        result = ExtractionPipeline(context=ValidationContext(context)).run(document)
        response = ExtractionResponse.from_result(result, file_name=file_name, byte_size=document.byte_size)

        logger.info("task.done", extra={"task": "extract_document_task", "outcome": response.outcome})
        return {"ok": True, **response.model_dump(mode="json")}
    finally:
        clear_context()
