from __future__ import annotations

import uuid
from typing import Any, TypeVar

from flask import request
from pydantic import BaseModel

from careerpage.core.exceptions import CareerPageError

M = TypeVar("M", bound=BaseModel)


class BadRequest(CareerPageError):
    def __init__(self, message: str):
        super().__init__(message, "BAD_REQUEST", 400)


def parse_body(model: type[M]) -> M:
    """Validate the JSON body against `model`; pydantic errors surface as 422."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return model.model_validate(data)


def parse_company_id(value: Any, message: str) -> str:
    """Accept only a UUID string; anything else is a malformed body."""
    if not isinstance(value, str):
        raise BadRequest(message)
    try:
        return str(uuid.UUID(value))
    except ValueError:
        raise BadRequest(message)
