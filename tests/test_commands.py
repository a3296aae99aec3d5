"""
Test suite for command dispatch

Tests the banking command vocabulary end to end against an in-memory ledger,
including the customer-facing wording of each outcome.
"""

import pytest

from bank_ledger.storage import InMemoryStorage
from bank_ledger.audit import AuditTrail
from bank_ledger.ledger import Ledger
from bank_ledger.commands import CommandDispatcher, REQUIRED_FIELDS


@pytest.fixture
def dispatcher():
    storage = InMemoryStorage()
    return CommandDispatcher(Ledger(storage, AuditTrail(storage)))


def create_chequing(dispatcher, number="1001", balance="100.00", limit="50.00"):
    return dispatcher.execute("create_chequing", {
        "number": number, "name": "A. Lee", "balance": balance, "overdraft_limit": limit
    })


def create_savings(dispatcher, number="2002", balance="0.00", rate="0.02"):
    return dispatcher.execute("create_savings", {
        "number": number, "name": "B. Roy", "balance": balance, "interest_rate": rate
    })


class TestCreateCommands:
    """Test create_chequing / create_savings"""

    def test_create_chequing(self, dispatcher):
        result = create_chequing(dispatcher)

        assert result["success"]
        assert result["message"] == "Chequing account created successfully."
        assert result["account"]["balance"] == "100.00"
        assert result["account"]["overdraft_limit"] == "50.00"

    def test_create_savings(self, dispatcher):
        result = create_savings(dispatcher, rate="0.035")

        assert result["success"]
        assert result["message"] == "Savings account created successfully."
        assert result["account"]["interest_rate_display"] == "3.50%"

    def test_missing_field(self, dispatcher):
        """Test every required field is checked"""
        result = dispatcher.execute("create_chequing", {
            "number": "1001", "name": "A. Lee", "balance": "10"
        })

        assert not result["success"]
        assert result["error"] == "Please fill in all fields"
        assert result["code"] == "invalid_input"

    def test_duplicate(self, dispatcher):
        create_chequing(dispatcher)

        result = create_savings(dispatcher, number="1001")

        assert not result["success"]
        assert result["code"] == "duplicate_account"
        assert result["error"] == "Account 1001 already exists"

    def test_numeric_account_number_accepted(self, dispatcher):
        """Test JSON numbers used as account numbers are treated as text"""
        result = create_chequing(dispatcher, number=1001)

        assert result["success"]
        assert result["account"]["number"] == "1001"


class TestTransactionCommands:
    """Test deposit_* / withdraw_*"""

    def test_deposit_message(self, dispatcher):
        create_savings(dispatcher)

        result = dispatcher.execute("deposit_savings", {"number": "2002", "amount": "50"})

        assert result["success"]
        assert result["message"] == "You have deposited $50.00"
        assert result["account"]["balance"] == "50.00"

    def test_deposit_into_wrong_kind(self, dispatcher):
        """Test kind-specific commands only address their own kind"""
        create_savings(dispatcher)

        result = dispatcher.execute("deposit_chequing", {"number": "2002", "amount": "50"})

        assert not result["success"]
        assert result["code"] == "account_not_found"
        assert result["error"] == "Account not found."

    def test_withdraw_messages_differ_by_kind(self, dispatcher):
        create_chequing(dispatcher)
        create_savings(dispatcher, balance="10")

        chequing = dispatcher.execute("withdraw_chequing", {"number": "1001", "amount": "1"})
        savings = dispatcher.execute("withdraw_savings", {"number": "2002", "amount": "1"})

        assert chequing["message"] == "Withdrawal successful"
        assert savings["message"] == "Withdrawal successful."

    def test_withdraw_refusals_differ_by_kind(self, dispatcher):
        create_chequing(dispatcher, balance="0", limit="0")
        create_savings(dispatcher, balance="0")

        chequing = dispatcher.execute("withdraw_chequing", {"number": "1001", "amount": "1"})
        savings = dispatcher.execute("withdraw_savings", {"number": "2002", "amount": "1"})

        assert chequing == {
            "success": False, "error": "Overdraft limit exceeded", "code": "overdraft_limit_exceeded"
        }
        assert savings == {
            "success": False, "error": "Insufficient funds.", "code": "insufficient_funds"
        }

    def test_invalid_amount(self, dispatcher):
        create_chequing(dispatcher)

        result = dispatcher.execute("deposit_chequing", {"number": "1001", "amount": "-5"})

        assert not result["success"]
        assert result["code"] == "invalid_amount"


class TestAccountCommands:
    """Test close_account, get_account_info and get_all_accounts"""

    def test_close_account(self, dispatcher):
        create_savings(dispatcher)

        result = dispatcher.execute("close_account", {"number": "2002"})

        assert result["success"]
        assert result["message"] == (
            "Savings account 2002 has been closed and can no longer be accessed."
        )

        again = dispatcher.execute("close_account", {"number": "2002"})
        assert again == {
            "success": False, "error": "Account does not exist.", "code": "account_not_found"
        }

    def test_operations_on_closed_account(self, dispatcher):
        create_chequing(dispatcher)
        dispatcher.execute("close_account", {"number": "1001"})

        result = dispatcher.execute("withdraw_chequing", {"number": "1001", "amount": "1"})

        assert not result["success"]
        assert result["code"] == "account_closed"
        assert result["error"] == "Account not found."

        deposit = dispatcher.execute("deposit_chequing", {"number": "1001", "amount": "1"})
        assert deposit == {
            "success": False, "error": "Account not found.", "code": "account_closed"
        }

    def test_account_info(self, dispatcher):
        create_chequing(dispatcher)

        result = dispatcher.execute("get_account_info", {"number": "1001"})

        assert result["success"]
        assert result["message"] == (
            "Account Information: 1001\n"
            "Name: A. Lee\n"
            "Balance: $100.00\n"
            "Overdraft Limit: $50.00"
        )

    def test_get_all_accounts(self, dispatcher):
        create_chequing(dispatcher)
        create_savings(dispatcher)
        create_savings(dispatcher, number="2003")
        dispatcher.execute("close_account", {"number": "2003"})

        result = dispatcher.execute("get_all_accounts", {})

        assert result["success"]
        assert [a["number"] for a in result["chequing"]] == ["1001"]
        assert [a["number"] for a in result["savings"]] == ["2002"]

    def test_get_all_accounts_without_data(self, dispatcher):
        assert dispatcher.execute("get_all_accounts") == {
            "success": True, "chequing": [], "savings": []
        }


class TestDispatch:
    """Test dispatcher plumbing"""

    def test_unknown_action(self, dispatcher):
        result = dispatcher.execute("transfer", {})

        assert result == {
            "success": False, "error": "Unknown action 'transfer'", "code": "unknown_action"
        }

    def test_non_object_payload(self, dispatcher):
        result = dispatcher.execute("close_account", ["1001"])

        assert not result["success"]
        assert result["code"] == "invalid_input"

    def test_actions_match_required_fields(self, dispatcher):
        assert set(dispatcher.actions) == set(REQUIRED_FIELDS)


class TestLargeAmountCommands:
    """Test commands with balances wider than the global decimal context"""

    def test_create_and_inspect_large_balance(self, dispatcher):
        """Test a 10^27 balance is created, shown and listed without errors"""
        created = create_chequing(dispatcher, balance="1000000000000000000000000000", limit="0")

        assert created["success"]
        assert created["account"]["balance"] == "1000000000000000000000000000.00"

        info = dispatcher.execute("get_account_info", {"number": "1001"})
        assert info["success"]
        assert "Balance: $1000000000000000000000000000.00" in info["message"]

        listing = dispatcher.execute("get_all_accounts")
        assert listing["chequing"][0]["balance"] == "1000000000000000000000000000.00"

    def test_overwide_amount_reported(self, dispatcher):
        """Test an amount past the digit bound fails cleanly"""
        create_savings(dispatcher)

        result = dispatcher.execute("deposit_savings", {"number": "2002", "amount": "9" * 61})

        assert not result["success"]
        assert result["code"] == "invalid_amount"
