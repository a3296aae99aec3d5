"""
Account Model Module

Defines the two account kinds (chequing, savings), the per-kind balance
rules, and the read-only views handed back to callers. Chequing accounts may
go below zero down to their overdraft limit; savings accounts may not go
below zero and carry a stored interest rate that nothing accrues.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, Optional, Type

from .errors import InsufficientFunds, LedgerError, OverdraftLimitExceeded
from .money import (
    DISPLAY_PRECISION, format_money, format_percentage, rate_to_percentage,
    round_for_display
)
from .storage import StorageRecord


class AccountKind(Enum):
    """Account kinds"""
    CHEQUING = "chequing"
    SAVINGS = "savings"

    @property
    def label(self) -> str:
        """Capitalized name for messages, e.g. 'Chequing'"""
        return self.value.capitalize()


@dataclass(frozen=True)
class BalanceRule:
    """
    Kind-specific balance rule

    floor: lowest balance the account may hold
    error: raised when a withdrawal would cross the floor
    parameter: name of the kind-specific opening parameter
    """
    floor: Callable[['Account'], Decimal]
    error: Type[LedgerError]
    rejection_message: str
    parameter: str


BALANCE_RULES: Dict[AccountKind, BalanceRule] = {
    AccountKind.CHEQUING: BalanceRule(
        floor=lambda account: account.overdraft_limit.copy_negate(),
        error=OverdraftLimitExceeded,
        rejection_message="Overdraft limit exceeded",
        parameter="overdraft_limit",
    ),
    AccountKind.SAVINGS: BalanceRule(
        floor=lambda account: Decimal('0'),
        error=InsufficientFunds,
        rejection_message="Insufficient funds.",
        parameter="interest_rate",
    ),
}


@dataclass
class Account(StorageRecord):
    """
    Ledger account. Only the Ledger mutates balance and closed state.
    """
    number: str
    holder_name: str
    kind: AccountKind
    balance: Decimal
    overdraft_limit: Optional[Decimal] = None  # chequing only
    interest_rate: Optional[Decimal] = None    # savings only, as a fraction
    closed: bool = False
    closed_at: Optional[datetime] = None

    def __post_init__(self):
        if self.kind == AccountKind.CHEQUING:
            if self.overdraft_limit is None:
                raise ValueError("Chequing account requires an overdraft limit")
            if self.interest_rate is not None:
                raise ValueError("Chequing account cannot carry an interest rate")
        else:
            if self.interest_rate is None:
                raise ValueError("Savings account requires an interest rate")
            if self.overdraft_limit is not None:
                raise ValueError("Savings account cannot carry an overdraft limit")

    @property
    def rule(self) -> BalanceRule:
        return BALANCE_RULES[self.kind]

    @property
    def balance_floor(self) -> Decimal:
        """Lowest balance this account may hold"""
        return self.rule.floor(self)

    def allows_balance(self, balance: Decimal) -> bool:
        """Check whether a balance satisfies this account's invariant"""
        return balance >= self.balance_floor

    def to_dict(self) -> Dict[str, Any]:
        """Convert Account to dictionary for storage"""
        result = super().to_dict()
        result['kind'] = self.kind.value
        result['closed_at'] = self.closed_at.isoformat() if self.closed_at else None
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Account':
        """Convert dictionary to Account"""
        overdraft_limit = data.get('overdraft_limit')
        interest_rate = data.get('interest_rate')
        closed_at = data.get('closed_at')

        return cls(
            created_at=datetime.fromisoformat(data['created_at']),
            updated_at=datetime.fromisoformat(data['updated_at']),
            number=data['number'],
            holder_name=data['holder_name'],
            kind=AccountKind(data['kind']),
            balance=Decimal(data['balance']),
            overdraft_limit=Decimal(overdraft_limit) if overdraft_limit is not None else None,
            interest_rate=Decimal(interest_rate) if interest_rate is not None else None,
            closed=bool(data.get('closed', False)),
            closed_at=datetime.fromisoformat(closed_at) if closed_at else None
        )


@dataclass(frozen=True)
class AccountSnapshot:
    """Read-only display view of an account, rounded for display"""
    number: str
    holder_name: str
    kind: AccountKind
    balance: Decimal
    overdraft_limit: Optional[Decimal] = None
    interest_rate_percent: Optional[Decimal] = None
    precision: int = DISPLAY_PRECISION

    @classmethod
    def from_account(cls, account: Account, precision: int = DISPLAY_PRECISION) -> 'AccountSnapshot':
        return cls(
            number=account.number,
            holder_name=account.holder_name,
            kind=account.kind,
            balance=round_for_display(account.balance, precision),
            overdraft_limit=(
                round_for_display(account.overdraft_limit, precision)
                if account.overdraft_limit is not None else None
            ),
            interest_rate_percent=(
                rate_to_percentage(account.interest_rate, precision)
                if account.interest_rate is not None else None
            ),
            precision=precision
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "number": self.number,
            "name": self.holder_name,
            "type": self.kind.value,
            "balance": format_money(self.balance, self.precision),
        }
        if self.overdraft_limit is not None:
            result["overdraft_limit"] = format_money(self.overdraft_limit, self.precision)
        if self.interest_rate_percent is not None:
            result["interest_rate"] = f"{self.interest_rate_percent:.{self.precision}f}%"
        return result

    def display_text(self) -> str:
        """Render the account information block shown to customers"""
        lines = [
            f"Account Information: {self.number}",
            f"Name: {self.holder_name}",
            f"Balance: ${format_money(self.balance, self.precision)}",
        ]
        if self.overdraft_limit is not None:
            lines.append(f"Overdraft Limit: ${format_money(self.overdraft_limit, self.precision)}")
        else:
            lines.append(f"Interest Rate: {self.interest_rate_percent:.{self.precision}f}%")
        return "\n".join(lines)


@dataclass(frozen=True)
class CloseConfirmation:
    """Result of closing an account"""
    number: str
    kind: AccountKind
    final_balance: Decimal
    closed_at: datetime
    precision: int = DISPLAY_PRECISION

    @property
    def message(self) -> str:
        return (
            f"{self.kind.label} account {self.number} has been closed "
            f"and can no longer be accessed."
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "type": self.kind.value,
            "final_balance": format_money(self.final_balance, self.precision),
            "closed_at": self.closed_at.isoformat(),
        }


def account_to_response(account: Account, precision: int = DISPLAY_PRECISION) -> Dict[str, Any]:
    """Serialize an account for API responses"""
    result = {
        "number": account.number,
        "name": account.holder_name,
        "type": account.kind.value,
        "balance": format_money(account.balance, precision),
    }
    if account.overdraft_limit is not None:
        result["overdraft_limit"] = format_money(account.overdraft_limit, precision)
    if account.interest_rate is not None:
        result["interest_rate"] = str(account.interest_rate)
        result["interest_rate_display"] = format_percentage(account.interest_rate, precision)
    return result
