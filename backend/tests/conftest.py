import pytest
from fastapi.testclient import TestClient

from docextract.api.deps import get_extraction_service
from docextract.extraction.thresholds import QualityThresholds
from docextract.main import app
from docextract.services.extraction_service import ExtractionService

from samples import PROSE_SENTENCES, build_container, show_text


@pytest.fixture
def thresholds():
    # defaults, independent of whatever .env the machine has
    return QualityThresholds()


@pytest.fixture
def prose_container():
    return build_container(show_text(*PROSE_SENTENCES))


@pytest.fixture
def client():
    # threads instead of processes keep the API tests fast and monkeypatchable
    app.dependency_overrides[get_extraction_service] = lambda: ExtractionService(
        thresholds=QualityThresholds(), executor="thread"
    )
    yield TestClient(app)
    app.dependency_overrides.clear()
