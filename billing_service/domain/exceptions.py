"""Domain-specific exceptions"""

from enum import Enum


class ErrorKind(str, Enum):
    """Stable machine-readable error codes exposed to clients"""

    SERVER_ERROR = "SERVER_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNPROCESSABLE_CONTENT_ERROR = "UNPROCESSABLE_CONTENT_ERROR"
    INVALID_UUID = "INVALID_UUID"
    LOAN_NOT_FOUND = "LOAN_NOT_FOUND"
    PAYMENT_AMOUNT_MISMATCH = "PAYMENT_AMOUNT_MISMATCH"


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BillingError(DomainException):
    """
    Error envelope carrying {kind, message, status_code}.

    The API layer maps on `kind`; subclasses only fix the defaults.
    """

    kind: ErrorKind = ErrorKind.SERVER_ERROR
    default_message: str = "Something went wrong, please try again later."
    status_code: int = 500

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error_code": self.kind.value, "message": self.message}


class ServerError(BillingError):
    """Unexpected failure"""

    pass


class ValidationError(BillingError):
    """Malformed or missing input"""

    kind = ErrorKind.VALIDATION_ERROR
    default_message = "Invalid request"
    status_code = 400


class UnprocessableContentError(BillingError):
    """Request payload could not be parsed"""

    kind = ErrorKind.UNPROCESSABLE_CONTENT_ERROR
    default_message = "Invalid json."
    status_code = 422


class InvalidIdentifierError(BillingError):
    """Identifier is not a well-formed UUID"""

    kind = ErrorKind.INVALID_UUID
    default_message = "UUID provided is invalid"
    status_code = 400


class LoanNotFoundError(BillingError):
    """No loan exists for the given id"""

    kind = ErrorKind.LOAN_NOT_FOUND
    default_message = "Loan not found"
    status_code = 400


class PaymentAmountMismatchError(BillingError):
    """Payment does not exactly match the pending total"""

    kind = ErrorKind.PAYMENT_AMOUNT_MISMATCH
    default_message = "Payment amount is not equal to pending amount"
    status_code = 400
