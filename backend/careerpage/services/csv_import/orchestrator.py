"""
Staged CSV import: idle -> uploading -> parsing -> validating -> saving -> complete.

Any failed stage lands in `error`, which is left only through retry(). Nothing is
written to the store until confirm() is called on a `complete` import; confirm()
inserts the whole mapped batch in one call.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from careerpage.core.config import settings
from careerpage.core.exceptions import (
    CareerPageError,
    InputRejected,
    ParseFailure,
    PersistenceFailure,
    ValidationFailure,
)
from careerpage.services.csv_import.parser import ParseResult, parse_csv
from careerpage.services.csv_import.rows import (
    DescriptionTemplate,
    map_csv_row_to_job,
    missing_required_fields,
    validate_csv_rows,
    validate_field_lengths,
)
from careerpage.services.gateway import TableGateway
from careerpage.services.notifier import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)


class ImportStage(str, enum.Enum):
    idle = "idle"
    uploading = "uploading"
    parsing = "parsing"
    validating = "validating"
    saving = "saving"
    complete = "complete"
    error = "error"


class ValidationMode(str, enum.Enum):
    all = "all"
    # Legacy behaviour: only the first row's required fields are checked.
    first_row = "first_row"


TRANSITIONS: dict[ImportStage, set[ImportStage]] = {
    ImportStage.idle: {ImportStage.uploading, ImportStage.error},
    ImportStage.uploading: {ImportStage.parsing},
    ImportStage.parsing: {ImportStage.validating, ImportStage.error},
    ImportStage.validating: {ImportStage.saving, ImportStage.error},
    ImportStage.saving: {ImportStage.complete, ImportStage.error},
    ImportStage.complete: {ImportStage.idle},
    ImportStage.error: {ImportStage.idle},
}

STAGE_PROGRESS = {
    ImportStage.idle: 0,
    ImportStage.uploading: 10,
    ImportStage.parsing: 30,
    ImportStage.validating: 70,
    ImportStage.saving: 90,
    ImportStage.complete: 100,
}
PARSED_PROGRESS = 50


class InvalidTransition(CareerPageError):
    def __init__(self, current: ImportStage, target: ImportStage):
        super().__init__(
            f"Cannot move import from '{current.value}' to '{target.value}'", "INVALID_TRANSITION", 409
        )
        self.current = current
        self.target = target


@dataclass
class UploadedFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class ImportOrchestrator:
    def __init__(
        self,
        company_id: str,
        *,
        notifier: Optional[Notifier] = None,
        description_template: Optional[str] = None,
        validation_mode: Optional[str] = None,
        max_upload_bytes: Optional[int] = None,
        parser: Callable[[bytes], ParseResult] = parse_csv,
    ):
        self.company_id = company_id
        self.notifier = notifier or LoggingNotifier()
        self.description_template = DescriptionTemplate(
            description_template or settings.IMPORT_DESCRIPTION_TEMPLATE
        )
        self.validation_mode = ValidationMode(validation_mode or settings.IMPORT_VALIDATION_MODE)
        self.max_upload_bytes = max_upload_bytes or settings.MAX_UPLOAD_BYTES
        self.parser = parser

        self.stage = ImportStage.idle
        self.progress = 0
        self.history: list[tuple[ImportStage, int]] = [(ImportStage.idle, 0)]
        self._clear()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def _clear(self) -> None:
        self.file_name: Optional[str] = None
        self.rows: list[dict[str, Any]] = []
        self.batch: list[dict[str, Any]] = []
        self.error_message: Optional[str] = None
        self.failure: Optional[CareerPageError] = None

    def _advance(self, target: ImportStage) -> None:
        if target not in TRANSITIONS[self.stage]:
            raise InvalidTransition(self.stage, target)
        self.stage = target
        self.progress = STAGE_PROGRESS.get(target, self.progress)
        self.history.append((target, self.progress))

    def _set_progress(self, progress: int) -> None:
        self.progress = progress
        self.history.append((self.stage, progress))

    def _fail(self, exc: CareerPageError) -> None:
        logger.warning("CSV import for company %s failed during %s: %s", self.company_id, self.stage.value, exc.message)
        self.failure = exc
        self.error_message = exc.message
        self._advance(ImportStage.error)
        self.notifier.show(exc.message, "error")

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _check_input(self, upload: UploadedFile) -> None:
        name = (upload.filename or "").lower()
        content_type = (upload.content_type or "").lower()
        if "csv" not in content_type and not name.endswith(".csv"):
            raise InputRejected("Please select a valid CSV file")
        if upload.size > self.max_upload_bytes:
            limit_mb = self.max_upload_bytes // (1024 * 1024)
            raise InputRejected(f"File size must be less than {limit_mb}MB")

    def _parse(self, data: bytes) -> list[dict[str, Any]]:
        result = self.parser(data)
        if result.errors:
            raise ParseFailure(f"CSV parsing errors: {', '.join(result.errors)}")
        if not result.rows:
            raise ParseFailure("No data found in CSV file")
        return result.rows

    def _validate(self, rows: list[dict[str, Any]]) -> None:
        if self.validation_mode is ValidationMode.first_row:
            missing = missing_required_fields(rows[0])
            if missing:
                raise ValidationFailure(f"Missing required fields: {', '.join(missing)}", [])
            # Column widths are checked on every row in both modes.
            errors = validate_field_lengths(rows)
            if errors:
                raise ValidationFailure("; ".join(errors), errors)
            return
        errors = validate_csv_rows(rows)
        if errors:
            raise ValidationFailure("; ".join(errors), errors)

    def select_file(self, upload: UploadedFile) -> ImportStage:
        """Run a freshly selected file through every stage up to `complete` or `error`."""
        if self.stage is not ImportStage.idle:
            raise InvalidTransition(self.stage, ImportStage.uploading)
        self.file_name = upload.filename

        try:
            self._check_input(upload)
            self._advance(ImportStage.uploading)

            self._advance(ImportStage.parsing)
            rows = self._parse(upload.data)
            self.rows = rows
            self._set_progress(PARSED_PROGRESS)

            self._advance(ImportStage.validating)
            self._validate(rows)

            self._advance(ImportStage.saving)
            self.batch = [
                map_csv_row_to_job(row, self.company_id, self.description_template) for row in rows
            ]
            self._advance(ImportStage.complete)
        except (InputRejected, ParseFailure, ValidationFailure) as exc:
            self._fail(exc)
            return self.stage

        self.notifier.show(f"{len(self.batch)} jobs ready to import", "success")
        return self.stage

    def confirm(self, jobs_table: TableGateway) -> list[dict[str, Any]]:
        """Bulk insert the mapped batch. On store error the batch is kept and PersistenceFailure raised."""
        if self.stage is not ImportStage.complete:
            raise InvalidTransition(self.stage, ImportStage.idle)

        result = jobs_table.insert(list(self.batch))
        if result.error:
            self.notifier.show(f"Failed to import jobs: {result.error}", "error")
            raise PersistenceFailure(result.error)

        inserted = result.data
        self._advance(ImportStage.idle)
        self._clear()
        self.notifier.show(f"Imported {len(inserted)} jobs", "success")
        return inserted

    def discard(self) -> None:
        if self.stage is not ImportStage.complete:
            raise InvalidTransition(self.stage, ImportStage.idle)
        self._advance(ImportStage.idle)
        self._clear()

    def retry(self) -> None:
        if self.stage is not ImportStage.error:
            raise InvalidTransition(self.stage, ImportStage.idle)
        self._advance(ImportStage.idle)
        self._clear()

    def snapshot(self) -> dict[str, Any]:
        return {
            "stage": self.stage.value,
            "progress": self.progress,
            "file_name": self.file_name,
            "error": self.error_message,
            "history": [{"stage": s.value, "progress": p} for s, p in self.history],
            "count": len(self.batch),
            "jobs": self.batch,
        }
