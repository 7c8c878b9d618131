# workforce_api/common/errors.py
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from workforce_api.common.http import fail


class APIError(Exception):
    """Custom API Error class."""
    def __init__(self, code, message, status_code=400, payload=None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.payload = payload


class NotFound(APIError):
    def __init__(self, message="Not found", payload=None):
        super().__init__("NOT_FOUND", message, 404, payload)


class Conflict(APIError):
    def __init__(self, message="Conflict", payload=None):
        super().__init__("CONFLICT", message, 409, payload)


class ValidationFailed(APIError):
    def __init__(self, message="Validation failed", payload=None):
        super().__init__("VALIDATION_ERROR", message, 422, payload)


# attendance engine domain errors
class CompanyNotFound(APIError):
    def __init__(self, company_id=None):
        super().__init__(
            "COMPANY_NOT_FOUND",
            "Company not found",
            404,
            {"company_id": company_id} if company_id is not None else None,
        )


class InvalidDate(APIError):
    def __init__(self, message="Invalid date, expected YYYY-MM-DD", payload=None):
        super().__init__("INVALID_DATE", message, 400, payload)


def register_error_handlers(app):
    @app.errorhandler(APIError)
    def _api_error(e: APIError):
        return fail(message=e.message, status=e.status_code, code=e.code, detail=e.payload)

    @app.errorhandler(HTTPException)
    def _http(e: HTTPException):
        return fail(e.description or e.name, status=e.code or 500)

    @app.errorhandler(IntegrityError)
    def _integrity(e: IntegrityError):
        from workforce_api.extensions import db
        db.session.rollback()
        return fail("Duplicate or FK constraint failed", status=409, code="CONSTRAINT_ERROR")

    @app.errorhandler(Exception)
    def _500(e: Exception):
        app.logger.exception(e)
        return fail("Internal server error", status=500)
