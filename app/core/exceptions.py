from decimal import Decimal
from typing import Any

from fastapi import HTTPException, status


# ------------------ Credential Errors ------------------ #

class TokenExpiredException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired.",
            headers={"WWW-Authenticate": "Bearer"},
        )


class TokenInvalidException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token is invalid.",
            headers={"WWW-Authenticate": "Bearer"},
        )


class AdminRequiredException(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required.",
        )


# ------------------ Card Domain Errors ------------------ #

class CardServiceError(Exception):
    """Base for every failure the card core reports to its callers.

    `context` holds structured details (offending field, available balance)
    that callers can render without parsing the message.
    """

    code = "card_error"
    http_status = status.HTTP_400_BAD_REQUEST
    retryable = False

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "retryable": self.retryable,
                "details": {k: _jsonable(v) for k, v in self.context.items()},
            }
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if hasattr(value, "isoformat"):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    return value


class BusinessRuleViolation(CardServiceError):
    code = "business_rule_violation"


class CardNotFound(BusinessRuleViolation):
    code = "card_not_found"
    http_status = status.HTTP_404_NOT_FOUND


class OwnerNotFound(BusinessRuleViolation):
    code = "owner_not_found"
    http_status = status.HTTP_404_NOT_FOUND


class DuplicateCardNumber(BusinessRuleViolation):
    code = "duplicate_card_number"
    http_status = status.HTTP_409_CONFLICT


class InvalidCardNumber(BusinessRuleViolation):
    code = "invalid_card_number"


class InvalidExpiry(BusinessRuleViolation):
    code = "invalid_expiry"


class InvalidBalance(BusinessRuleViolation):
    code = "invalid_balance"


class InvalidStatus(BusinessRuleViolation):
    code = "invalid_status"


class InvalidStateTransition(BusinessRuleViolation):
    code = "invalid_state_transition"
    http_status = status.HTTP_409_CONFLICT


class SameCardTransfer(BusinessRuleViolation):
    code = "same_card_transfer"


class InvalidAmount(BusinessRuleViolation):
    code = "invalid_amount"


class AmountTooLarge(BusinessRuleViolation):
    code = "amount_too_large"


class SourceNotActive(BusinessRuleViolation):
    code = "source_not_active"


class DestinationNotActive(BusinessRuleViolation):
    code = "destination_not_active"


class CardExpired(BusinessRuleViolation):
    code = "card_expired"


class InsufficientFunds(BusinessRuleViolation):
    code = "insufficient_funds"


# ------------------ Storage Errors ------------------ #

class StorageError(CardServiceError):
    code = "storage_error"
    http_status = status.HTTP_503_SERVICE_UNAVAILABLE


class ConcurrentModification(StorageError):
    """The storage layer aborted the call because of a competing writer.

    Nothing was applied; the caller may re-fetch and retry.
    """

    code = "concurrent_modification"
    http_status = status.HTTP_409_CONFLICT
    retryable = True


class StorageUnavailable(StorageError):
    code = "storage_unavailable"
