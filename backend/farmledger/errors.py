"""Domain errors raised by the engine and services, mapped to 4xx at the API boundary."""


class FarmLedgerError(Exception):
    """Base error carrying an HTTP status and, where relevant, the offending field."""

    status_code = 400
    kind = "error"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self) -> dict:
        return {"detail": self.message, "field": self.field, "error": self.kind}


class ValidationError(FarmLedgerError):
    """Caller-correctable bad input."""

    status_code = 422
    kind = "validation_error"


class NotFoundError(FarmLedgerError):
    """Requested record is not configured yet."""

    status_code = 404
    kind = "not_found"


class ComputationError(FarmLedgerError):
    """Numeric overflow or a non-finite value produced during a projection."""

    status_code = 422
    kind = "computation_error"
