from __future__ import annotations

import logging

from flask import Blueprint, g, jsonify, request

from careerpage.api.v1.common import BadRequest, parse_company_id
from careerpage.core.config import settings
from careerpage.core.database import get_db
from careerpage.core.exceptions import ValidationFailure
from careerpage.models.job import Job
from careerpage.services.auth import login_required
from careerpage.services.companies import require_owned_company
from careerpage.services.csv_import.orchestrator import ImportOrchestrator, ImportStage, UploadedFile
from careerpage.services.csv_import.rows import map_csv_row_to_job, validate_csv_rows
from careerpage.services.gateway import TableGateway
from careerpage.services.notifier import CollectingNotifier

logger = logging.getLogger(__name__)

bp = Blueprint("imports", __name__)


def _truthy(value) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


@bp.post("/companies/<uuid:company_id>/jobs/import")
@login_required
def import_jobs_file(company_id):
    """Upload a CSV and get the mapped batch back; with confirm=true the batch is also inserted."""
    storage = request.files.get("file")
    if storage is None:
        raise BadRequest("A CSV file is required in the 'file' form field")

    # Reading one byte past the limit is enough to reject oversized files.
    upload = UploadedFile(
        filename=storage.filename or "",
        content_type=storage.mimetype or storage.content_type or "",
        data=storage.stream.read(settings.MAX_UPLOAD_BYTES + 1),
    )

    with get_db() as db:
        company = require_owned_company(db, company_id, g.current_user)
        notifier = CollectingNotifier()
        orchestrator = ImportOrchestrator(company["id"], notifier=notifier)
        stage = orchestrator.select_file(upload)

        if stage is ImportStage.error:
            payload = orchestrator.snapshot()
            payload.update(orchestrator.failure.to_dict())
            payload["messages"] = notifier.messages
            return jsonify(payload), orchestrator.failure.status_code

        if not _truthy(request.form.get("confirm")):
            payload = orchestrator.snapshot()
            payload["messages"] = notifier.messages
            return jsonify(payload)

        inserted = orchestrator.confirm(TableGateway(db, Job))
        logger.info("Imported %d jobs for company %s from %s", len(inserted), company["id"], upload.filename)
        return jsonify({
            "stage": orchestrator.stage.value,
            "imported": len(inserted),
            "jobs": inserted,
            "messages": notifier.messages,
        }), 201


@bp.post("/csv-import")
@login_required
def csv_import():
    """Validate, map and bulk insert already-parsed CSV rows: {companyId, jobs: [row, ...]}."""
    message = "companyId and jobs[] are required"
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest(message)
    company_id = parse_company_id(data.get("companyId"), message)
    rows = data.get("jobs")
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise BadRequest(message)

    with get_db() as db:
        company = require_owned_company(db, company_id, g.current_user)

        errors = validate_csv_rows(rows)
        if errors:
            raise ValidationFailure(f"{len(errors)} row(s) failed validation", errors)

        mapped = [
            map_csv_row_to_job(row, company["id"], settings.IMPORT_DESCRIPTION_TEMPLATE) for row in rows
        ]
        if mapped:
            TableGateway(db, Job).insert(mapped).unwrap()

    logger.info("Accepted %d jobs for company %s via csv-import", len(mapped), company["id"])
    return jsonify({"accepted": len(mapped)}), 202
