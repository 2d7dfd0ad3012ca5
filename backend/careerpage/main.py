from __future__ import annotations

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from careerpage.api.v1 import auth as v1_auth
from careerpage.api.v1 import companies as v1_companies
from careerpage.api.v1 import imports as v1_imports
from careerpage.api.v1 import jobs as v1_jobs
from careerpage.api.v1 import public as v1_public
from careerpage.api.v1 import sections as v1_sections
from careerpage.core.config import settings
from careerpage.core.exceptions import CareerPageError
from careerpage.core.logger import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = Flask(__name__)

CORS(app, origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")])

app.register_blueprint(v1_auth.bp, url_prefix="/api/v1")
app.register_blueprint(v1_companies.bp, url_prefix="/api/v1")
app.register_blueprint(v1_sections.bp, url_prefix="/api/v1")
app.register_blueprint(v1_jobs.bp, url_prefix="/api/v1")
app.register_blueprint(v1_imports.bp, url_prefix="/api/v1")
app.register_blueprint(v1_public.bp, url_prefix="/api/v1")


@app.errorhandler(CareerPageError)
def handle_careerpage_error(exc: CareerPageError):
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", exc.code, request.path, exc.message)
    return jsonify(exc.to_dict()), exc.status_code


@app.errorhandler(ValidationError)
def handle_validation_error(exc: ValidationError):
    errors = [
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" if err["loc"] else err["msg"]
        for err in exc.errors()
    ]
    return jsonify({"detail": "Invalid request body", "error": "VALIDATION_ERROR", "errors": errors}), 422


@app.errorhandler(HTTPException)
def handle_http_error(exc: HTTPException):
    return jsonify({"detail": exc.description, "error": exc.name.upper().replace(" ", "_")}), exc.code


@app.errorhandler(Exception)
def handle_unexpected_error(exc: Exception):
    logger.exception("Unexpected error on %s", request.path)
    return jsonify({"detail": f"{type(exc).__name__}: {exc}", "error": "INTERNAL_ERROR"}), 500


@app.get("/health")
def health():
    return {"status": "healthy"}


if __name__ == "__main__":
    app.run(host=settings.API_HOST, port=settings.API_PORT, debug=settings.DEBUG)
