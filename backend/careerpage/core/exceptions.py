"""Error taxonomy shared by the import pipeline and the HTTP layer."""
from __future__ import annotations


class CareerPageError(Exception):
    """Base exception; carries a machine code and the HTTP status it maps to."""

    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict:
        return {"detail": self.message, "error": self.code}


class InputRejected(CareerPageError):
    """Uploaded file has the wrong type or size; raised before any parse attempt."""

    def __init__(self, message: str):
        super().__init__(message, "INPUT_REJECTED", 400)


class ParseFailure(CareerPageError):
    """CSV syntax errors, or a file with no data rows."""

    def __init__(self, message: str):
        super().__init__(message, "PARSE_FAILURE", 422)


class ValidationFailure(CareerPageError):
    """Required fields missing from one or more rows."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message, "VALIDATION_FAILURE", 422)
        self.errors = list(errors or [])

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class PersistenceFailure(CareerPageError):
    """The data store rejected an insert, update, delete or select."""

    def __init__(self, message: str):
        super().__init__(message, "PERSISTENCE_FAILURE", 500)


class Unauthenticated(CareerPageError):
    def __init__(self, message: str = "unauthenticated"):
        super().__init__(message, "UNAUTHENTICATED", 401)


class Forbidden(CareerPageError):
    def __init__(self, message: str):
        super().__init__(message, "FORBIDDEN", 403)


class NotFound(CareerPageError):
    def __init__(self, message: str):
        super().__init__(message, "NOT_FOUND", 404)


class Conflict(CareerPageError):
    def __init__(self, message: str):
        super().__init__(message, "CONFLICT", 409)
