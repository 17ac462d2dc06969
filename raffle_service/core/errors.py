# raffle_service/core/errors.py
"""Error taxonomy for the purchase and ticket allocation core."""

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Stable error codes returned to API clients."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_REFERRAL = "INVALID_REFERRAL"
    DUPLICATE_OPERATION_NUMBER = "DUPLICATE_OPERATION_NUMBER"
    INSUFFICIENT_INVENTORY = "INSUFFICIENT_INVENTORY"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    TRANSACTION_CONFLICT = "TRANSACTION_CONFLICT"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    INVALID_TRANSITION = "INVALID_TRANSITION"


class RaffleServiceError(Exception):
    """Base error with code, user-safe message and the offending field."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        field: Optional[str] = None,
        retryable: bool = False,
    ):
        self.code = code
        self.message = message
        self.field = field
        self.retryable = retryable
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        return {"error": self.code.value, "message": self.message, "field": self.field}


class NotFoundError(RaffleServiceError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(code=ErrorCode.NOT_FOUND, message=message)


class RaffleNotFoundError(NotFoundError):
    """Raised when a raffle does not exist."""

    def __init__(self, raffle_id: str):
        super().__init__(message="Raffle not found")
        self.raffle_id = raffle_id


class PurchaseNotFoundError(NotFoundError):
    """Raised when a purchase (or a purchase search) yields nothing."""

    def __init__(self, purchase_id: Optional[str] = None):
        super().__init__(
            message="Purchase not found" if purchase_id else "No purchases matched the search"
        )
        self.purchase_id = purchase_id


class InvalidReferralError(RaffleServiceError):
    """Referral code is unknown, not active yet, or expired."""

    reason = "invalid"

    def __init__(self, code: str, message: str):
        super().__init__(
            code=ErrorCode.INVALID_REFERRAL, message=message, field="referral_code"
        )
        self.referral_code = code


class ReferralNotFoundError(InvalidReferralError):
    reason = "not_found"

    def __init__(self, code: str):
        super().__init__(code, "Invalid referral code")


class ReferralNotYetActiveError(InvalidReferralError):
    reason = "not_yet_active"

    def __init__(self, code: str):
        super().__init__(code, "Referral code is not active yet")


class ReferralExpiredError(InvalidReferralError):
    reason = "expired"

    def __init__(self, code: str):
        super().__init__(code, "Referral code has expired")


class DuplicateOperationNumberError(RaffleServiceError):
    """The payment reference was already used by another purchase."""

    def __init__(self, operation_number: str):
        super().__init__(
            code=ErrorCode.DUPLICATE_OPERATION_NUMBER,
            message="Operation number already registered",
            field="operation_number",
        )
        self.operation_number = operation_number


class InsufficientInventoryError(RaffleServiceError):
    def __init__(self, requested: int, available: int):
        super().__init__(
            code=ErrorCode.INSUFFICIENT_INVENTORY,
            message=f"Not enough tickets available: requested {requested}, available {available}",
            field="quantity",
        )
        self.requested = requested
        self.available = available


class ValidationFailedError(RaffleServiceError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message, field=field)


class InvalidTransitionError(RaffleServiceError):
    """A purchase status change that the lifecycle does not allow."""

    def __init__(self, current: str, target: str):
        super().__init__(
            code=ErrorCode.INVALID_TRANSITION,
            message=f"Purchase cannot move from {current} to {target}",
            field="status",
        )
        self.current = current
        self.target = target


class TransactionConflictError(RaffleServiceError):
    """Concurrent write conflict or timeout; the caller may try again."""

    def __init__(self, message: str = "The request conflicted with another one, please try again"):
        super().__init__(
            code=ErrorCode.TRANSACTION_CONFLICT, message=message, retryable=True
        )


class PersistenceFailureError(RaffleServiceError):
    def __init__(self, message: str = "Unexpected storage error"):
        super().__init__(code=ErrorCode.PERSISTENCE_FAILURE, message=message)
