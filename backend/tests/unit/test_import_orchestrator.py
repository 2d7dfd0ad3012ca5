"""Unit tests for the staged CSV import (no DB; the jobs table is faked)."""
import pytest

from careerpage.core.exceptions import InputRejected, ParseFailure, PersistenceFailure, ValidationFailure
from careerpage.services.csv_import.orchestrator import (
    ImportOrchestrator,
    ImportStage,
    InvalidTransition,
    UploadedFile,
)
from careerpage.services.gateway import GatewayResult
from careerpage.services.notifier import CollectingNotifier

HEADER = "title,work_policy,location,department,employment_type,experience_level,salary_range\n"
GOOD_CSV = HEADER + (
    "Engineer,Remote,Remote,Platform,Full time,Senior,\n"
    "Designer,Hybrid,Berlin,,Part time,Mid,€50k\n"
)


class FakeJobsTable:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def insert(self, records):
        self.calls.append(records)
        if self.error:
            return GatewayResult(None, self.error)
        return GatewayResult([{**r, "id": str(i)} for i, r in enumerate(records)], None)


def csv_file(text: str, name: str = "jobs.csv", content_type: str = "text/csv") -> UploadedFile:
    return UploadedFile(filename=name, content_type=content_type, data=text.encode("utf-8"))


@pytest.fixture
def notifier():
    return CollectingNotifier()


@pytest.fixture
def orchestrator(notifier):
    return ImportOrchestrator("company-1", notifier=notifier, description_template="short", validation_mode="all")


def stages(orch):
    return [stage for stage, _ in orch.history]


class TestHappyPath:
    def test_runs_every_stage_in_order(self, orchestrator):
        assert orchestrator.select_file(csv_file(GOOD_CSV)) is ImportStage.complete
        assert stages(orchestrator) == [
            ImportStage.idle,
            ImportStage.uploading,
            ImportStage.parsing,
            ImportStage.parsing,
            ImportStage.validating,
            ImportStage.saving,
            ImportStage.complete,
        ]
        assert [p for _, p in orchestrator.history] == [0, 10, 30, 50, 70, 90, 100]
        assert orchestrator.progress == 100

    def test_batch_is_mapped_but_not_saved(self, orchestrator):
        orchestrator.select_file(csv_file(GOOD_CSV))
        assert len(orchestrator.batch) == 2
        first, second = orchestrator.batch
        assert first["company_id"] == "company-1"
        assert first["job_type"] == "full-time"
        assert first["department"] == "Platform"
        assert "salary_range" not in first
        assert second["job_type"] == "part-time"
        assert second["salary_range"] == "€50k"
        assert "department" not in second

    def test_confirm_inserts_whole_batch_once(self, orchestrator, notifier):
        orchestrator.select_file(csv_file(GOOD_CSV))
        table = FakeJobsTable()
        inserted = orchestrator.confirm(table)
        assert len(table.calls) == 1
        assert len(table.calls[0]) == 2
        assert len(inserted) == 2
        assert orchestrator.stage is ImportStage.idle
        assert orchestrator.batch == []
        assert notifier.messages[-1] == {"level": "success", "message": "Imported 2 jobs"}

    def test_discard_returns_to_idle(self, orchestrator):
        orchestrator.select_file(csv_file(GOOD_CSV))
        orchestrator.discard()
        assert orchestrator.stage is ImportStage.idle
        assert orchestrator.batch == []
        assert orchestrator.rows == []

    def test_content_type_alone_is_enough(self, orchestrator):
        upload = csv_file(GOOD_CSV, name="export.txt", content_type="application/csv")
        assert orchestrator.select_file(upload) is ImportStage.complete

    def test_extension_alone_is_enough(self, orchestrator):
        upload = csv_file(GOOD_CSV, name="JOBS.CSV", content_type="application/octet-stream")
        assert orchestrator.select_file(upload) is ImportStage.complete


class TestInputChecks:
    def test_wrong_type_never_enters_uploading(self, orchestrator):
        upload = csv_file(GOOD_CSV, name="jobs.xlsx", content_type="application/vnd.ms-excel.sheet")
        assert orchestrator.select_file(upload) is ImportStage.error
        assert stages(orchestrator) == [ImportStage.idle, ImportStage.error]
        assert isinstance(orchestrator.failure, InputRejected)
        assert orchestrator.error_message == "Please select a valid CSV file"

    def test_six_mib_file_rejected_before_parse(self, notifier):
        def parser(_data):
            raise AssertionError("parser must not run")

        orch = ImportOrchestrator("company-1", notifier=notifier, parser=parser)
        upload = UploadedFile("big.csv", "text/csv", b"x" * (6 * 1024 * 1024))
        assert orch.select_file(upload) is ImportStage.error
        assert stages(orch) == [ImportStage.idle, ImportStage.error]
        assert orch.error_message == "File size must be less than 5MB"

    def test_exactly_five_mib_is_allowed(self, orchestrator):
        padding = " " * (5 * 1024 * 1024 - len(GOOD_CSV.encode()))
        upload = UploadedFile("jobs.csv", "text/csv", (GOOD_CSV + padding).encode())
        assert upload.size == 5 * 1024 * 1024
        assert orchestrator.select_file(upload) is not ImportStage.uploading
        assert not isinstance(orchestrator.failure, InputRejected)


class TestFailures:
    @pytest.mark.parametrize("text", ["", HEADER])
    def test_empty_or_header_only_fails_in_parsing(self, orchestrator, text):
        assert orchestrator.select_file(csv_file(text)) is ImportStage.error
        assert isinstance(orchestrator.failure, ParseFailure)
        assert orchestrator.error_message == "No data found in CSV file"
        assert ImportStage.saving not in stages(orchestrator)

    def test_parse_errors_are_joined(self, orchestrator):
        text = "title,location,employment_type\nA,B,C,D\nE,F\n"
        orchestrator.select_file(csv_file(text))
        assert orchestrator.stage is ImportStage.error
        assert orchestrator.error_message == (
            "CSV parsing errors: Row 1: Too many fields: expected 3 fields but parsed 4, "
            "Row 2: Too few fields: expected 3 fields but parsed 2"
        )

    def test_every_row_is_validated(self, orchestrator, notifier):
        text = "title,location,employment_type\nA,Remote,Contract\n,Remote,\n"
        orchestrator.select_file(csv_file(text))
        assert orchestrator.stage is ImportStage.error
        assert isinstance(orchestrator.failure, ValidationFailure)
        assert orchestrator.failure.errors == ["Row 2: missing title,employment_type"]
        assert notifier.messages[-1]["level"] == "error"

    def test_first_row_mode_only_checks_first_row(self, notifier):
        orch = ImportOrchestrator("c1", notifier=notifier, validation_mode="first_row")
        text = "title,location,employment_type\nA,Remote,Contract\n,Remote,\n"
        assert orch.select_file(csv_file(text)) is ImportStage.complete
        assert orch.batch[1]["title"] == "Untitled Position"

    def test_first_row_mode_reports_missing_fields(self, notifier):
        orch = ImportOrchestrator("c1", notifier=notifier, validation_mode="first_row")
        orch.select_file(csv_file("title,location\nA,Remote\n"))
        assert orch.error_message == "Missing required fields: employment_type"

    @pytest.mark.parametrize("mode", ["all", "first_row"])
    def test_value_wider_than_its_column_never_reaches_saving(self, notifier, mode):
        orch = ImportOrchestrator("c1", notifier=notifier, validation_mode=mode)
        text = (
            "title,location,employment_type\n"
            "A,Remote,Contract\n"
            "B,Remote,Fixed term contract with option to convert to permanent after probation\n"
        )
        assert orch.select_file(csv_file(text)) is ImportStage.error
        assert ImportStage.saving not in stages(orch)
        assert orch.failure.errors == ["Row 2: job_type exceeds 50 characters"]
        assert orch.batch == []

    def test_retry_resets_everything(self, orchestrator):
        orchestrator.select_file(csv_file(""))
        orchestrator.retry()
        assert orchestrator.stage is ImportStage.idle
        assert orchestrator.error_message is None
        assert orchestrator.failure is None
        assert orchestrator.select_file(csv_file(GOOD_CSV)) is ImportStage.complete

    def test_failed_confirm_keeps_batch(self, orchestrator, notifier):
        orchestrator.select_file(csv_file(GOOD_CSV))
        with pytest.raises(PersistenceFailure, match="duplicate key"):
            orchestrator.confirm(FakeJobsTable(error="duplicate key"))
        assert orchestrator.stage is ImportStage.complete
        assert len(orchestrator.batch) == 2
        assert notifier.messages[-1]["level"] == "error"


class TestTransitionGuards:
    def test_cannot_select_while_complete(self, orchestrator):
        orchestrator.select_file(csv_file(GOOD_CSV))
        with pytest.raises(InvalidTransition):
            orchestrator.select_file(csv_file(GOOD_CSV))

    def test_cannot_select_from_error_without_retry(self, orchestrator):
        orchestrator.select_file(csv_file(""))
        with pytest.raises(InvalidTransition):
            orchestrator.select_file(csv_file(GOOD_CSV))

    def test_confirm_requires_complete(self, orchestrator):
        with pytest.raises(InvalidTransition):
            orchestrator.confirm(FakeJobsTable())

    def test_retry_requires_error(self, orchestrator):
        with pytest.raises(InvalidTransition):
            orchestrator.retry()

    def test_discard_requires_complete(self, orchestrator):
        orchestrator.select_file(csv_file(""))
        with pytest.raises(InvalidTransition):
            orchestrator.discard()

    def test_snapshot(self, orchestrator):
        orchestrator.select_file(csv_file(GOOD_CSV, name="roles.csv"))
        snap = orchestrator.snapshot()
        assert snap["stage"] == "complete"
        assert snap["file_name"] == "roles.csv"
        assert snap["count"] == 2
        assert snap["error"] is None
        assert snap["history"][-1] == {"stage": "complete", "progress": 100}
