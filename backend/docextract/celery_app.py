# docextract/celery_app.py
from celery import Celery
from dotenv import load_dotenv

from docextract.core.config import settings
from docextract.core.logging_config import configure_logging

load_dotenv()

# Ensure logging is configured in worker processes as early as possible.
configure_logging()

celery_app = Celery(
    "docextract",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["docextract.tasks.extraction_tasks"],
)

# reliability defaults (important for at-least-once)
celery_app.conf.task_acks_late = True
celery_app.conf.worker_prefetch_multiplier = 1
celery_app.conf.task_reject_on_worker_lost = True

# prevent Celery from overriding our root logger
celery_app.conf.worker_hijack_root_logger = False

celery_app.conf.task_routes = {
    "docextract.tasks.extraction_tasks.extract_document_task": {"queue": "extract_q"},
}
