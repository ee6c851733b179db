"""
extractions.py
- Purpose: API routes for extracting validated text from uploaded documents.
- Design: Keep router thin. Delegate business logic to services.
"""

import asyncio
import base64

from fastapi import APIRouter, Depends, File, Form, UploadFile

from docextract.api.deps import get_extraction_service
from docextract.extraction.thresholds import ValidationContext
from docextract.schemas.extraction import (
    BatchExtractionResponse,
    BatchItemOut,
    ExtractionResponse,
    GroundingResponse,
    JobAcceptedResponse,
    JobStatusResponse,
)
from docextract.services.extraction_service import ExtractionService

router = APIRouter(prefix="/api/extractions", tags=["Extractions"])


@router.post("", response_model=ExtractionResponse)
async def extract_document(
    file: UploadFile = File(...),
    context: ValidationContext = Form(ValidationContext.EXTRACTION),
    svc: ExtractionService = Depends(get_extraction_service),
):
    document, result = await svc.extract_upload(file, context=context)
    return ExtractionResponse.from_result(result, file_name=document.file_name, byte_size=document.byte_size)


@router.post("/batch", response_model=BatchExtractionResponse)
async def extract_batch(
    files: list[UploadFile] = File(...),
    context: ValidationContext = Form(ValidationContext.EXTRACTION),
    svc: ExtractionService = Depends(get_extraction_service),
):
    documents = [await svc.read_document(f) for f in files]
    items = await asyncio.to_thread(svc.extract_batch, documents, context=context)
    return BatchExtractionResponse(
        items=[BatchItemOut.from_item(item, byte_size=doc.byte_size) for doc, item in zip(documents, items)]
    )


@router.post("/grounding", response_model=GroundingResponse)
async def grounding_text(
    file: UploadFile = File(...),
    svc: ExtractionService = Depends(get_extraction_service),
):
    """Text ready for content generation, or a 422 carrying the attempt trail."""
    document, result = await svc.extract_upload(file, context=ValidationContext.GENERATION)
    text = svc.grounding_text(result)
    return GroundingResponse(
        file_name=document.file_name,
        text=text,
        strategy_used=result.strategy_used,
        length=len(text),
    )


@router.post("/jobs", response_model=JobAcceptedResponse, status_code=202)
async def enqueue_extraction(
    file: UploadFile = File(...),
    context: ValidationContext = Form(ValidationContext.EXTRACTION),
    svc: ExtractionService = Depends(get_extraction_service),
):
    from docextract.tasks.extraction_tasks import extract_document_task  # noqa

    document = await svc.read_document(file)
    job = extract_document_task.delay(
        base64.b64encode(document.data).decode("ascii"),
        document.file_name,
        document.declared_media_type,
        context.value,
    )
    return JobAcceptedResponse(job_id=job.id, status_url=f"/api/extractions/jobs/{job.id}")


@router.get("/jobs/{job_id}", response_model=JobStatusResponse)
def get_job_status(job_id: str):
    from docextract.celery_app import celery_app  # noqa

    res = celery_app.AsyncResult(job_id)
    out = JobStatusResponse(job_id=job_id, state=str(res.state))
    if res.successful():
        payload = res.result or {}
        if payload.get("ok"):
            out.result = ExtractionResponse.model_validate(payload)
        else:
            out.error = payload.get("error")
    elif res.failed():
        out.error = str(res.result)
    return out
