"""Batch job that materializes due recurring transactions."""

import logging
from datetime import date
from typing import Optional

from checkbook.database.base import Database
from checkbook.domain.clock import Clock, SystemClock
from checkbook.domain.entities import ProcessingError, ProcessingResults
from checkbook.domain.recurrence import RecurrenceService
from checkbook.utils.date_parser import parse_iso_date

logger = logging.getLogger(__name__)


class RecurringJob:
    """Fires every due recurring template once per run."""

    def __init__(self, db: Database, clock: Optional[Clock] = None):
        """Initialize the job.

        Args:
            db: Database instance
            clock: Source of the processing date
        """
        self.clock = clock or SystemClock()
        self.recurrence = RecurrenceService(db, self.clock)

    def process_due(self, as_of: date | str | None = None) -> ProcessingResults:
        """Materialize all templates due on or before ``as_of``.

        Each due template fires once, dated ``as_of``. A failure on one
        template is logged and recorded, and the run moves on to the next.

        Args:
            as_of: Processing date; defaults to today

        Returns:
            ProcessingResults with processed/failed counts and error details

        Raises:
            StorageError: If the due templates cannot be listed
        """
        target = self.clock.today() if as_of is None else parse_iso_date(as_of)
        due = self.recurrence.find_due(target)
        logger.info("Found %d due recurring transactions for %s", len(due), target)

        processed = 0
        errors: list[ProcessingError] = []
        for template in due:
            try:
                self.recurrence.fire(template, target)
                processed += 1
            except Exception as e:
                logger.exception("Failed to process recurring transaction %s", template.id)
                errors.append(ProcessingError(template_id=template.id, error=str(e)))

        return ProcessingResults(
            as_of=target,
            processed=processed,
            failed=len(errors),
            errors=tuple(errors),
        )

    def run(self) -> ProcessingResults:
        """Run one processing pass for today."""
        logger.info("Starting recurring transaction processing")
        results = self.process_due()
        logger.info(
            "Recurring transaction processing finished: %d processed, %d failed",
            results.processed,
            results.failed,
        )
        return results
