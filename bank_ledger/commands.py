"""
Command Dispatch Module

Translates the banking command vocabulary (create_chequing, deposit_savings,
close_account, ...) into Ledger operations and shapes the outcome as a
response dictionary: a success flag plus the resulting account or listing,
or an error message with its error code.
"""

from typing import Any, Callable, Dict, List, Optional

from .accounts import AccountKind, account_to_response
from .errors import AccountClosed, InvalidInput, LedgerError
from .ledger import Ledger
from .logging_config import get_logger, log_action
from .money import format_money, parse_decimal


logger = get_logger("bank_ledger.commands")

REQUIRED_FIELDS: Dict[str, List[str]] = {
    "create_chequing": ["number", "name", "balance", "overdraft_limit"],
    "create_savings": ["number", "name", "balance", "interest_rate"],
    "deposit_chequing": ["number", "amount"],
    "deposit_savings": ["number", "amount"],
    "withdraw_chequing": ["number", "amount"],
    "withdraw_savings": ["number", "amount"],
    "close_account": ["number"],
    "get_account_info": ["number"],
    "get_all_accounts": [],
}

# Withdrawal confirmations differ by kind
WITHDRAWAL_MESSAGES = {
    AccountKind.CHEQUING: "Withdrawal successful",
    AccountKind.SAVINGS: "Withdrawal successful.",
}

# Customer-facing wording that replaces the ledger's own message
ERROR_MESSAGES = {
    AccountClosed: "Account not found.",
}


class CommandDispatcher:
    """
    Executes named banking commands against a Ledger
    """

    def __init__(self, ledger: Ledger):
        self.ledger = ledger
        self._handlers: Dict[str, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
            "create_chequing": lambda data: self._create(data, AccountKind.CHEQUING),
            "create_savings": lambda data: self._create(data, AccountKind.SAVINGS),
            "deposit_chequing": lambda data: self._deposit(data, AccountKind.CHEQUING),
            "deposit_savings": lambda data: self._deposit(data, AccountKind.SAVINGS),
            "withdraw_chequing": lambda data: self._withdraw(data, AccountKind.CHEQUING),
            "withdraw_savings": lambda data: self._withdraw(data, AccountKind.SAVINGS),
            "close_account": self._close,
            "get_account_info": self._account_info,
            "get_all_accounts": self._all_accounts,
        }

    @property
    def actions(self) -> List[str]:
        """Names of supported commands"""
        return list(self._handlers)

    def execute(self, action: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a command

        Args:
            action: Command name, e.g. "withdraw_chequing"
            data: Command payload

        Returns:
            {"success": True, ...} or {"success": False, "error": ..., "code": ...}
        """
        handler = self._handlers.get(action)
        if handler is None:
            return {
                "success": False,
                "error": f"Unknown action '{action}'",
                "code": "unknown_action",
            }

        try:
            payload = self._validate_payload(action, data)
            return handler(payload)
        except LedgerError as e:
            log_action(logger, "info", f"Command {action} failed: {e.message}",
                       action=action, account_number=e.account_number,
                       extra={"code": e.code})
            message = ERROR_MESSAGES.get(type(e), e.message)
            return {"success": False, "error": message, "code": e.code}

    def _validate_payload(self, action: str, data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise InvalidInput("Command data must be an object")

        for field in REQUIRED_FIELDS[action]:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise InvalidInput("Please fill in all fields")
        return data

    def _create(self, data: Dict[str, Any], kind: AccountKind) -> Dict[str, Any]:
        parameter = data["overdraft_limit"] if kind == AccountKind.CHEQUING else data["interest_rate"]
        account = self.ledger.open_account(
            number=str(data["number"]),
            holder_name=data["name"],
            initial_balance=data["balance"],
            kind=kind,
            overdraft_limit_or_interest_rate=parameter
        )
        return {
            "success": True,
            "message": f"{kind.label} account created successfully.",
            "account": account_to_response(account, self.ledger.display_precision),
        }

    def _deposit(self, data: Dict[str, Any], kind: AccountKind) -> Dict[str, Any]:
        account = self.ledger.deposit(str(data["number"]), data["amount"], kind=kind)
        amount = parse_decimal(data["amount"])
        return {
            "success": True,
            "message": f"You have deposited ${format_money(amount, self.ledger.display_precision)}",
            "account": account_to_response(account, self.ledger.display_precision),
        }

    def _withdraw(self, data: Dict[str, Any], kind: AccountKind) -> Dict[str, Any]:
        account = self.ledger.withdraw(str(data["number"]), data["amount"], kind=kind)
        return {
            "success": True,
            "message": WITHDRAWAL_MESSAGES[kind],
            "account": account_to_response(account, self.ledger.display_precision),
        }

    def _close(self, data: Dict[str, Any]) -> Dict[str, Any]:
        confirmation = self.ledger.close_account(str(data["number"]))
        return {
            "success": True,
            "message": confirmation.message,
            "closed": confirmation.to_dict(),
        }

    def _account_info(self, data: Dict[str, Any]) -> Dict[str, Any]:
        snapshot = self.ledger.get_account_info(str(data["number"]))
        return {
            "success": True,
            "message": snapshot.display_text(),
            "account": snapshot.to_dict(),
        }

    def _all_accounts(self, data: Dict[str, Any]) -> Dict[str, Any]:
        chequing, savings = self.ledger.list_accounts()
        precision = self.ledger.display_precision
        return {
            "success": True,
            "chequing": [account_to_response(a, precision) for a in chequing],
            "savings": [account_to_response(a, precision) for a in savings],
        }
