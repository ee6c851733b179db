from docextract.services.extraction_service import ExtractionService


def get_extraction_service() -> ExtractionService:
    """
    Service dependency for extraction flows.
    Using Depends(get_extraction_service) allows overriding thresholds,
    time budget or executor kind in tests.
    """
    return ExtractionService()
