from __future__ import annotations
import asyncio
import logging
import threading
from typing import Callable, Iterable, Optional

from opentelemetry import trace

from csvchat.models.schemas import (
    CandidateFile,
    Notification,
    Table,
    UploadAccepted,
    UploadOutcome,
    UploadRejected,
)
from csvchat.models.settings import UploadLimits
from csvchat.services.errors import SecurityValidationError, UploadError
from csvchat.services.intake import check_intake
from csvchat.services.parser import parse_csv
from csvchat.services.security import (
    DEFAULT_DETECTORS,
    Detector,
    build_preview,
    sanitize_table,
    validate_table,
)

logger = logging.getLogger("upload")
tracer = trace.get_tracer("csvchat.upload")

Parser = Callable[[bytes], Table]


class AttemptTracker:
    """
    Hands out increasing attempt ids. Only the newest attempt may settle;
    results for older ids are dropped.
    """

    def __init__(self):
        self._current = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._current

    def begin(self) -> int:
        with self._lock:
            self._current += 1
            return self._current

    def is_current(self, attempt_id: int) -> bool:
        return attempt_id == self._current

    def settle(self, attempt_id: int, outcome: Optional[UploadOutcome]) -> Optional[UploadOutcome]:
        if not self.is_current(attempt_id):
            logger.info("dropping stale upload attempt=%s current=%s", attempt_id, self._current)
            return None
        return outcome


class UploadPipeline:
    def __init__(
        self,
        limits: Optional[UploadLimits] = None,
        detectors: Iterable[Detector] = DEFAULT_DETECTORS,
        parser: Parser = parse_csv,
        tracker: Optional[AttemptTracker] = None,
    ):
        self.limits = limits or UploadLimits()
        self.detectors = list(detectors)
        self.parser = parser
        self.tracker = tracker or AttemptTracker()

    def run(self, file: CandidateFile) -> UploadOutcome:
        """Guard, parse, validate and sanitize one file. Always returns an outcome."""
        attempt_id = self.tracker.begin()
        with tracer.start_as_current_span("csv_upload") as span:
            try:
                check_intake(file, self.limits)
                outcome = self._accept(attempt_id, file, self._parse(file))
            except UploadError as ex:
                outcome = self._reject(attempt_id, file, ex)
            span.set_attribute("upload.outcome", self._outcome_label(outcome))
        return outcome

    async def run_async(self, file: CandidateFile) -> Optional[UploadOutcome]:
        """
        Same stages, but parsing runs in a worker thread. Returns None when a
        newer attempt started while this one was parsing.
        """
        attempt_id = self.tracker.begin()
        with tracer.start_as_current_span("csv_upload") as span:
            try:
                check_intake(file, self.limits)
                rows = await asyncio.to_thread(self._parse, file)
                if not self.tracker.is_current(attempt_id):
                    span.set_attribute("upload.outcome", "superseded")
                    return self.tracker.settle(attempt_id, None)
                outcome = self._accept(attempt_id, file, rows)
            except UploadError as ex:
                outcome = self._reject(attempt_id, file, ex)
            span.set_attribute("upload.outcome", self._outcome_label(outcome))
        return self.tracker.settle(attempt_id, outcome)

    def _parse(self, file: CandidateFile) -> Table:
        with tracer.start_as_current_span("csv_parse") as span:
            rows = self.parser(file.content)
            span.set_attribute("csv.rows", len(rows))
        return rows

    def _accept(self, attempt_id: int, file: CandidateFile, rows: Table) -> UploadAccepted:
        report = validate_table(rows, self.limits, self.detectors)
        if not report.is_valid:
            raise SecurityValidationError(report.violations)
        preview = build_preview(sanitize_table(rows), self.limits.preview_rows)
        logger.info("upload accepted attempt=%s name=%s size=%s rows=%s",
                    attempt_id, file.name, file.size_bytes, len(rows))
        return UploadAccepted(
            attempt_id=attempt_id,
            file_name=file.name,
            size_bytes=file.size_bytes,
            preview=preview,
            total_rows=len(rows),
            notification=Notification(title="File validated", description="CSV file passed security checks"),
        )

    def _reject(self, attempt_id: int, file: CandidateFile, ex: UploadError) -> UploadRejected:
        violations = list(getattr(ex, "violations", [ex.message]))
        logger.warning("upload rejected attempt=%s name=%s size=%s kind=%s violations=%s",
                       attempt_id, file.name, file.size_bytes, ex.kind.value, len(violations))
        return UploadRejected(
            attempt_id=attempt_id,
            kind=ex.kind,
            message=ex.message,
            violations=violations,
            notification=Notification(title=ex.title, description=ex.message, variant="destructive"),
        )

    @staticmethod
    def _outcome_label(outcome: UploadOutcome) -> str:
        if isinstance(outcome, UploadRejected):
            return outcome.kind.value
        return "accepted"
