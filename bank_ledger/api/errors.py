"""
Mapping of ledger errors onto HTTP responses
"""

from fastapi import HTTPException, status

from ..errors import (
    AccountNotFound, DuplicateAccount, InsufficientFunds, InvalidAmount,
    InvalidInput, InvariantViolation, LedgerError, OverdraftLimitExceeded
)


STATUS_CODES = [
    (AccountNotFound, status.HTTP_404_NOT_FOUND),
    (DuplicateAccount, status.HTTP_409_CONFLICT),
    (InvalidInput, status.HTTP_400_BAD_REQUEST),
    (InvalidAmount, status.HTTP_400_BAD_REQUEST),
    (InvariantViolation, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (OverdraftLimitExceeded, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (InsufficientFunds, status.HTTP_422_UNPROCESSABLE_ENTITY),
]


def http_error(error: LedgerError) -> HTTPException:
    """Build the HTTPException for a ledger error"""
    for error_type, status_code in STATUS_CODES:
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=error.to_dict())
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.to_dict())
