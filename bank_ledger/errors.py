"""
Ledger Error Taxonomy

Every failed ledger operation raises one of these. All of them are
recoverable, caller-visible outcomes and carry only the context needed to
build a message: the account number and, where relevant, the amount.
"""

from decimal import Decimal
from typing import Any, Dict, Optional


class LedgerError(ValueError):
    """Base exception for all ledger errors"""

    code = "ledger_error"

    def __init__(
        self,
        message: str,
        account_number: Optional[str] = None,
        amount: Optional[Decimal] = None
    ):
        super().__init__(message)
        self.message = message
        self.account_number = account_number
        self.amount = amount

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses"""
        result = {"code": self.code, "message": self.message}
        if self.account_number is not None:
            result["account_number"] = self.account_number
        if self.amount is not None:
            result["amount"] = str(self.amount)
        return result


class InvalidInput(LedgerError):
    """Raised when a required field is missing or malformed"""

    code = "invalid_input"


class DuplicateAccount(LedgerError):
    """Raised when an account number has already been used, open or closed"""

    code = "duplicate_account"


class InvariantViolation(LedgerError):
    """Raised when an opening balance breaks the kind's balance rule"""

    code = "invariant_violation"


class AccountNotFound(LedgerError):
    """Raised when an account does not exist or can no longer be accessed"""

    code = "account_not_found"


class AccountClosed(AccountNotFound):
    """
    Raised when a deposit or withdrawal targets a closed account.

    Closed accounts can no longer be accessed, so this is also an
    AccountNotFound for callers that only care about that.
    """

    code = "account_closed"


class InvalidAmount(LedgerError):
    """Raised when a transaction amount is unparsable or not strictly positive"""

    code = "invalid_amount"


class OverdraftLimitExceeded(LedgerError):
    """Raised when a chequing withdrawal would go past the overdraft limit"""

    code = "overdraft_limit_exceeded"


class InsufficientFunds(LedgerError):
    """Raised when a savings withdrawal would take the balance below zero"""

    code = "insufficient_funds"
