from fastapi import APIRouter

from docextract.extraction.thresholds import QualityThresholds

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "thresholds_version": QualityThresholds.from_settings().version}
