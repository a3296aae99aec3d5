"""
Ledger Module

The single source of truth for all accounts and the only component that
mutates balances. Every mutation validates, checks the kind's balance rule,
and writes under one ledger-wide lock, so a check can never be separated from
the write it guards. A failed operation leaves the ledger unchanged.
"""

import threading
from datetime import datetime, timezone
from decimal import Decimal, DecimalException
from typing import List, Optional, Tuple

from .accounts import (
    Account, AccountKind, AccountSnapshot, BALANCE_RULES, CloseConfirmation
)
from .audit import AuditEventType, AuditTrail
from .errors import (
    AccountClosed, AccountNotFound, DuplicateAccount, InvalidAmount,
    InvalidInput, InvariantViolation
)
from .logging_config import get_logger, log_action
from .money import (
    AmountLike, DISPLAY_PRECISION, add_exact, format_money, parse_decimal, subtract_exact
)
from .storage import StorageInterface


logger = get_logger("bank_ledger.ledger")


class Ledger:
    """
    Owns chequing and savings accounts and enforces their balance rules
    """

    def __init__(
        self,
        storage: StorageInterface,
        audit_trail: Optional[AuditTrail] = None,
        display_precision: int = DISPLAY_PRECISION
    ):
        self.storage = storage
        self.audit_trail = audit_trail
        self.display_precision = display_precision
        self.accounts_table = "accounts"
        self._lock = threading.RLock()

    def open_account(
        self,
        number: str,
        holder_name: str,
        initial_balance: AmountLike,
        kind: AccountKind,
        overdraft_limit_or_interest_rate: Optional[AmountLike]
    ) -> Account:
        """
        Open a new chequing or savings account

        Args:
            number: Caller-assigned account number, unique forever
            holder_name: Account holder's display name
            initial_balance: Opening balance
            kind: AccountKind.CHEQUING or AccountKind.SAVINGS
            overdraft_limit_or_interest_rate: Overdraft limit for chequing,
                fractional interest rate for savings

        Returns:
            The newly opened Account

        Raises:
            InvalidInput: Missing or malformed fields
            DuplicateAccount: Number already used by an open or closed account
            InvariantViolation: Opening balance breaks the kind's balance rule
        """
        number = self._require_text(number, "Account number")
        holder_name = self._require_text(holder_name, "Holder name")

        if not isinstance(kind, AccountKind):
            raise InvalidInput(f"Unknown account kind {kind!r}", account_number=number)

        rule = BALANCE_RULES[kind]
        parameter_label = rule.parameter.replace('_', ' ').capitalize()
        balance = self._parse_field(initial_balance, "Balance", number)
        parameter = self._parse_field(overdraft_limit_or_interest_rate, parameter_label, number)
        if parameter < 0:
            raise InvalidInput(f"{parameter_label} must not be negative", account_number=number)

        now = datetime.now(timezone.utc)
        account = Account(
            created_at=now,
            updated_at=now,
            number=number,
            holder_name=holder_name,
            kind=kind,
            balance=balance,
            overdraft_limit=parameter if kind == AccountKind.CHEQUING else None,
            interest_rate=parameter if kind == AccountKind.SAVINGS else None
        )

        with self._lock:
            if self.storage.exists(self.accounts_table, number):
                self._reject("open_account", number, balance, "duplicate account number")
                raise DuplicateAccount(
                    f"Account {number} already exists",
                    account_number=number
                )

            if not account.allows_balance(balance):
                self._reject("open_account", number, balance, "initial balance below floor")
                raise InvariantViolation(
                    f"Initial balance {format_money(balance)} is below the "
                    f"{kind.value} minimum of {format_money(account.balance_floor)}",
                    account_number=number,
                    amount=balance
                )

            with self.storage.atomic():
                self._save_account(account)
                self._audit(AuditEventType.ACCOUNT_OPENED, account, {
                    "kind": kind.value,
                    "holder_name": holder_name,
                    "initial_balance": balance,
                    rule.parameter: parameter
                })

        log_action(logger, "info", f"{kind.label} account opened",
                   action="open_account", account_number=number,
                   extra={"balance": str(balance)})
        return account

    def deposit(self, number: str, amount: AmountLike,
                kind: Optional[AccountKind] = None) -> Account:
        """
        Deposit into an open account

        Args:
            number: Account number
            amount: Strictly positive amount
            kind: If given, the account must be of this kind

        Returns:
            The updated Account

        Raises:
            AccountNotFound, AccountClosed, InvalidAmount
        """
        value = self._parse_amount(amount, number)

        with self._lock:
            account = self._get_open_account(number, kind)

            account.balance = self._apply(add_exact, account.balance, value, number)
            account.updated_at = datetime.now(timezone.utc)

            with self.storage.atomic():
                self._save_account(account)
                self._audit(AuditEventType.FUNDS_DEPOSITED, account, {
                    "amount": value,
                    "balance": account.balance
                })

        log_action(logger, "info", "Deposit posted",
                   action="deposit", account_number=number,
                   extra={"amount": str(value), "balance": str(account.balance)})
        return account

    def withdraw(self, number: str, amount: AmountLike,
                 kind: Optional[AccountKind] = None) -> Account:
        """
        Withdraw from an open account if its balance rule still holds after

        Args:
            number: Account number
            amount: Strictly positive amount
            kind: If given, the account must be of this kind

        Returns:
            The updated Account

        Raises:
            AccountNotFound, AccountClosed, InvalidAmount,
            OverdraftLimitExceeded (chequing), InsufficientFunds (savings)
        """
        value = self._parse_amount(amount, number)

        with self._lock:
            account = self._get_open_account(number, kind)
            new_balance = self._apply(subtract_exact, account.balance, value, number)

            if not account.allows_balance(new_balance):
                rule = account.rule
                self._reject("withdraw", number, value, rule.error.code, account)
                raise rule.error(
                    rule.rejection_message,
                    account_number=number,
                    amount=value
                )

            account.balance = new_balance
            account.updated_at = datetime.now(timezone.utc)

            with self.storage.atomic():
                self._save_account(account)
                self._audit(AuditEventType.FUNDS_WITHDRAWN, account, {
                    "amount": value,
                    "balance": account.balance
                })

        log_action(logger, "info", "Withdrawal posted",
                   action="withdraw", account_number=number,
                   extra={"amount": str(value), "balance": str(account.balance)})
        return account

    def get_account_info(self, number: str) -> AccountSnapshot:
        """
        Get a display snapshot of an open account

        Raises:
            AccountNotFound: Account never existed or has been closed
        """
        with self._lock:
            account = self._load_account(number)
        if account is None or account.closed:
            raise AccountNotFound("Account does not exist.", account_number=number)
        return AccountSnapshot.from_account(account, self.display_precision)

    def get_account(self, number: str) -> Optional[Account]:
        """Get an account by number, including closed accounts"""
        with self._lock:
            return self._load_account(number)

    def close_account(self, number: str) -> CloseConfirmation:
        """
        Close an open account; its balance is frozen and its number retired

        Raises:
            AccountNotFound: Account never existed or is already closed
        """
        with self._lock:
            account = self._load_account(number)
            if account is None or account.closed:
                self._reject("close_account", number, None, "account not found")
                raise AccountNotFound("Account does not exist.", account_number=number)

            now = datetime.now(timezone.utc)
            account.closed = True
            account.closed_at = now
            account.updated_at = now

            with self.storage.atomic():
                self._save_account(account)
                self._audit(AuditEventType.ACCOUNT_CLOSED, account, {
                    "final_balance": account.balance
                })

        log_action(logger, "info", f"{account.kind.label} account closed",
                   action="close_account", account_number=number,
                   extra={"final_balance": str(account.balance)})
        return CloseConfirmation(
            number=account.number,
            kind=account.kind,
            final_balance=account.balance,
            closed_at=now,
            precision=self.display_precision
        )

    def list_accounts(self) -> Tuple[List[Account], List[Account]]:
        """
        List open accounts partitioned by kind, in opening order

        Returns:
            (chequing accounts, savings accounts)
        """
        with self._lock:
            records = self.storage.find(self.accounts_table, {"closed": False})
        accounts = [Account.from_dict(data) for data in records]
        chequing = [a for a in accounts if a.kind == AccountKind.CHEQUING]
        savings = [a for a in accounts if a.kind == AccountKind.SAVINGS]
        return chequing, savings

    def _get_open_account(self, number: str, kind: Optional[AccountKind]) -> Account:
        account = self._load_account(number)
        if account is None or (kind is not None and account.kind != kind):
            raise AccountNotFound("Account not found.", account_number=number)
        if account.closed:
            raise AccountClosed(
                f"Account {number} is closed and can no longer be accessed.",
                account_number=number
            )
        return account

    def _load_account(self, number: str) -> Optional[Account]:
        if not isinstance(number, str):
            return None
        data = self.storage.load(self.accounts_table, number.strip())
        if data:
            return Account.from_dict(data)
        return None

    def _save_account(self, account: Account) -> None:
        self.storage.save(self.accounts_table, account.number, account.to_dict())

    def _audit(self, event_type: AuditEventType, account: Account, metadata: dict) -> None:
        if self.audit_trail is not None:
            self.audit_trail.log_event(
                event_type=event_type,
                entity_type="account",
                entity_id=account.number,
                metadata=metadata
            )

    def _reject(self, operation: str, number: str, amount: Optional[Decimal],
                reason: str, account: Optional[Account] = None) -> None:
        log_action(logger, "warning", f"{operation} rejected: {reason}",
                   action=operation, account_number=number,
                   extra={"amount": str(amount) if amount is not None else None})
        # Rejected withdrawals are the only rejections tied to a live account
        if account is not None and self.audit_trail is not None:
            self.audit_trail.log_event(
                event_type=AuditEventType.OPERATION_REJECTED,
                entity_type="account",
                entity_id=account.number,
                metadata={
                    "operation": operation,
                    "reason": reason,
                    "amount": amount,
                    "balance": account.balance
                }
            )

    @staticmethod
    def _require_text(value: Optional[str], label: str) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidInput(f"{label} is required")
        return value.strip()

    @staticmethod
    def _parse_field(value: Optional[AmountLike], label: str, number: str) -> Decimal:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise InvalidInput(f"{label} is required", account_number=number)
        try:
            return parse_decimal(value)
        except ValueError as e:
            raise InvalidInput(f"{label} is not a valid amount: {e}", account_number=number)

    @staticmethod
    def _parse_amount(amount: AmountLike, number: str) -> Decimal:
        try:
            value = parse_decimal(amount)
        except ValueError:
            raise InvalidAmount(f"Invalid amount {amount!r}", account_number=number)
        if value <= 0:
            raise InvalidAmount(
                "Amount must be greater than zero",
                account_number=number,
                amount=value
            )
        return value

    @staticmethod
    def _apply(operation, balance: Decimal, value: Decimal, number: str) -> Decimal:
        try:
            return operation(balance, value)
        except DecimalException as e:
            raise InvalidAmount(
                f"Amount cannot be applied exactly: {type(e).__name__}",
                account_number=number,
                amount=value
            )
