import json
import logging

import pytest

from docextract.core.config import Settings
from docextract.core.logging_config import MAX_EXTRA_CHARS, JsonFormatter, build_logging_config
from docextract.core.request_context import clear_context, set_context
from docextract.middleware.request_logging import resolve_request_id


def format_record(**fields):
    record = logging.makeLogRecord(
        {"name": "docextract.extraction", "levelno": logging.INFO, "levelname": "INFO", "msg": "extraction.attempt", **fields}
    )
    return json.loads(JsonFormatter().format(record))


def test_document_text_is_reduced_to_its_size():
    line = format_record(text="secret words " * 50, raw=b"%PDF-1.4 body")
    assert line["text"] == "<650 chars>"
    assert line["raw"] == "<13 bytes>"


def test_long_extras_are_cut_and_objects_stringified():
    line = format_record(notes="n" * 1000, reasons=["LOW_READABILITY"], kind=object())
    assert line["notes"] == "n" * MAX_EXTRA_CHARS + "..."
    assert line["reasons"] == ["LOW_READABILITY"]
    assert line["kind"].startswith("<object object")


def test_context_is_merged_into_every_line():
    set_context(request_id="req-9", document="report.pdf")
    try:
        line = format_record(strategy="OPERATOR_EXTRACTION")
    finally:
        clear_context()
    assert line["request_id"] == "req-9"
    assert line["document"] == "report.pdf"
    assert line["strategy"] == "OPERATOR_EXTRACTION"
    assert "levelno" not in line


def test_extraction_logger_has_its_own_level():
    config = build_logging_config(Settings(LOG_LEVEL="info", EXTRACTION_LOG_LEVEL="warning"))
    assert config["root"]["level"] == "INFO"
    assert config["loggers"]["docextract.extraction"]["level"] == "WARNING"

    config = build_logging_config(Settings(LOG_LEVEL="debug"))
    assert config["loggers"]["docextract.extraction"]["level"] == "DEBUG"


@pytest.mark.parametrize(
    "header, kept",
    [("req-1", True), ("a" * 64, True), ("a" * 65, False), ("bad id\n{}", False), ("", False), (None, False)],
)
def test_resolve_request_id(header, kept):
    rid = resolve_request_id(header)
    assert (rid == header) is kept
    assert rid


def http_records(caplog, path):
    return [r for r in caplog.records if r.name == "docextract.http" and r.path == path]


def test_health_probes_log_at_debug(client, caplog):
    caplog.set_level(logging.DEBUG, logger="docextract.http")
    client.get("/api/health")
    client.get("/api/")

    assert {r.levelno for r in http_records(caplog, "/api/health")} == {logging.DEBUG}
    assert {r.levelno for r in http_records(caplog, "/api/")} == {logging.INFO}


def test_upload_media_type_is_logged_without_boundary(client, caplog, prose_container):
    caplog.set_level(logging.INFO, logger="docextract.http")
    client.post("/api/extractions", files={"file": ("doc.pdf", prose_container, "application/pdf")})

    request_line = next(r for r in http_records(caplog, "/api/extractions") if r.msg == "http.request")
    assert request_line.content_type == "multipart/form-data"
    assert int(request_line.content_length) > len(prose_container)


def test_unsafe_request_id_is_replaced(client):
    resp = client.get("/api/", headers={"x-request-id": "x" * 200})
    assert resp.headers["x-request-id"] != "x" * 200
    assert len(resp.headers["x-request-id"]) == 36
