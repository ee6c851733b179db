"""docextract/extraction/pool.py

Batch extraction on an explicitly owned executor.

The pool is acquired for one batch with `with ExtractionWorkerPool(...) as
pool:` and shut down on every exit path. Documents are independent, so
results come back in input order with no cross-document state.
"""

import logging
import math
import time
from concurrent.futures import (
    FIRST_COMPLETED,
    Executor,
    Future,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    wait,
)
from dataclasses import dataclass
from typing import Sequence

from docextract.core import AppError
from docextract.core.errors import extraction_crashed, extraction_timeout
from docextract.extraction.pipeline import ExtractionPipeline
from docextract.extraction.thresholds import QualityThresholds, ValidationContext
from docextract.extraction.types import ExtractionResult, RawDocument

logger = logging.getLogger("docextract.extraction.pool")

EXECUTOR_KINDS = ("process", "thread")
_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class BatchItem:
    file_name: str
    result: ExtractionResult | None = None
    error: AppError | None = None


def _extract_one(
    document: RawDocument,
    thresholds: QualityThresholds,
    context: ValidationContext,
) -> ExtractionResult:
    # module-level so process executors can pickle it
    return ExtractionPipeline(thresholds=thresholds, context=context).run(document)


class ExtractionWorkerPool:
    def __init__(
        self,
        max_workers: int = 4,
        *,
        executor: str = "process",
        thresholds: QualityThresholds | None = None,
        context: ValidationContext = ValidationContext.EXTRACTION,
    ):
        if executor not in EXECUTOR_KINDS:
            raise ValueError(f"executor must be one of {EXECUTOR_KINDS}, got {executor!r}")
        self.max_workers = max(1, max_workers)
        self.executor_kind = executor
        self.thresholds = thresholds or QualityThresholds.from_settings()
        self.context = ValidationContext(context)
        self._executor: Executor | None = None

    def __enter__(self) -> "ExtractionWorkerPool":
        if self.executor_kind == "process":
            self._executor = ProcessPoolExecutor(max_workers=self.max_workers)
        else:
            self._executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="extract")
        logger.info("pool.open", extra={"executor": self.executor_kind, "max_workers": self.max_workers})
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._executor is None:
            return
        # never block on a document that blew its budget
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._executor = None
        logger.info("pool.closed", extra={"executor": self.executor_kind})

    def extract_many(
        self,
        documents: Sequence[RawDocument],
        *,
        budget_seconds: float | None = None,
    ) -> list[BatchItem]:
        """Extract every document; one BatchItem per document, input order.

        `budget_seconds` is per file and counts from the moment a worker
        picks the file up. Files still queued when the batch ceiling (one
        budget per wave of `max_workers` files) passes time out as well, so
        a worker stuck past its budget cannot hold the batch forever.
        A document that raises becomes an error item; the others carry on.
        """
        if self._executor is None:
            raise RuntimeError("ExtractionWorkerPool used outside its `with` block")
        if not documents:
            return []

        futures = {
            self._executor.submit(_extract_one, doc, self.thresholds, self.context): idx
            for idx, doc in enumerate(documents)
        }

        ceiling = None
        if budget_seconds is not None:
            waves = math.ceil(len(documents) / self.max_workers)
            ceiling = time.monotonic() + budget_seconds * waves

        items: dict[int, BatchItem] = {}
        started: dict[Future, float] = {}
        pending = set(futures)
        while pending:
            if budget_seconds is not None:
                now = time.monotonic()
                for future in list(pending):
                    if future not in started and future.running():
                        started[future] = now
                    begun = started.get(future)
                    expired = now - begun >= budget_seconds if begun is not None else now >= ceiling
                    if expired and not future.done():
                        future.cancel()
                        pending.discard(future)
                        items[futures[future]] = self._timed_out(documents[futures[future]], budget_seconds)
                if not pending:
                    break

            done, pending = wait(
                pending,
                timeout=None if budget_seconds is None else _POLL_SECONDS,
                return_when=FIRST_COMPLETED,
            )
            for future in done:
                items[futures[future]] = self._collect(documents[futures[future]], future)

        return [items[idx] for idx in range(len(documents))]

    @staticmethod
    def _timed_out(document: RawDocument, budget_seconds: float) -> BatchItem:
        logger.warning(
            "pool.timeout",
            extra={"file_name": document.file_name, "budget_seconds": budget_seconds},
        )
        return BatchItem(file_name=document.file_name, error=extraction_timeout(document.file_name, budget_seconds))

    @staticmethod
    def _collect(document: RawDocument, future: Future) -> BatchItem:
        try:
            result = future.result()
        except Exception as exc:
            logger.exception(
                "pool.error",
                extra={"file_name": document.file_name, "error": type(exc).__name__},
            )
            return BatchItem(file_name=document.file_name, error=extraction_crashed(document.file_name, exc))
        return BatchItem(file_name=document.file_name, result=result)
