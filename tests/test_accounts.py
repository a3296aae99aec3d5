"""
Test suite for accounts module

Tests the account model, the per-kind balance rule table, storage
round-trips and the display views.
"""

import pytest
from decimal import Decimal
from datetime import datetime, timezone

from bank_ledger.accounts import (
    Account, AccountKind, AccountSnapshot, BALANCE_RULES, CloseConfirmation,
    account_to_response
)
from bank_ledger.errors import InsufficientFunds, OverdraftLimitExceeded


def make_account(kind=AccountKind.CHEQUING, balance="0", **kwargs):
    now = datetime.now(timezone.utc)
    if kind == AccountKind.CHEQUING:
        kwargs.setdefault("overdraft_limit", Decimal('50'))
    else:
        kwargs.setdefault("interest_rate", Decimal('0.02'))
    return Account(
        created_at=now,
        updated_at=now,
        number=kwargs.pop("number", "1001"),
        holder_name=kwargs.pop("holder_name", "A. Lee"),
        kind=kind,
        balance=Decimal(balance),
        **kwargs
    )


class TestAccount:
    """Test Account class functionality"""

    def test_chequing_floor_is_negative_limit(self):
        """Test chequing floor follows the overdraft limit"""
        account = make_account(AccountKind.CHEQUING, overdraft_limit=Decimal('75.50'))

        assert account.balance_floor == Decimal('-75.50')
        assert account.allows_balance(Decimal('-75.50'))
        assert not account.allows_balance(Decimal('-75.51'))

    def test_wide_overdraft_floor_is_exact(self):
        """Test the floor keeps every digit of a wide overdraft limit"""
        limit = Decimal('12345678901234567890123456789.01')
        account = make_account(AccountKind.CHEQUING, overdraft_limit=limit)

        assert account.balance_floor == Decimal('-12345678901234567890123456789.01')
        assert account.balance_floor.as_tuple().digits == limit.as_tuple().digits

    def test_savings_floor_is_zero(self):
        """Test savings floor is zero"""
        account = make_account(AccountKind.SAVINGS)

        assert account.balance_floor == Decimal('0')
        assert account.allows_balance(Decimal('0'))
        assert not account.allows_balance(Decimal('-0.01'))

    def test_kind_fields_are_mutually_exclusive(self):
        """Test chequing and savings fields cannot be mixed"""
        with pytest.raises(ValueError, match="cannot carry an interest rate"):
            make_account(AccountKind.CHEQUING, interest_rate=Decimal('0.01'))

        with pytest.raises(ValueError, match="cannot carry an overdraft limit"):
            make_account(AccountKind.SAVINGS, overdraft_limit=Decimal('10'))

    def test_kind_field_required(self):
        """Test the kind-specific field must be present"""
        with pytest.raises(ValueError, match="requires an overdraft limit"):
            make_account(AccountKind.CHEQUING, overdraft_limit=None)

        with pytest.raises(ValueError, match="requires an interest rate"):
            make_account(AccountKind.SAVINGS, interest_rate=None)

    def test_storage_round_trip(self):
        """Test to_dict/from_dict keeps exact decimals and state"""
        closed_at = datetime.now(timezone.utc)
        account = make_account(
            AccountKind.SAVINGS, balance="12.345",
            interest_rate=Decimal('0.035'), closed=True, closed_at=closed_at
        )

        data = account.to_dict()
        assert data["kind"] == "savings"
        assert data["balance"] == "12.345"
        assert data["interest_rate"] == "0.035"
        assert data["overdraft_limit"] is None

        restored = Account.from_dict(data)
        assert restored == account


class TestBalanceRules:
    """Test the kind rule table"""

    def test_rules_cover_every_kind(self):
        """Test each kind has a rule"""
        assert set(BALANCE_RULES) == set(AccountKind)

    def test_kind_specific_errors(self):
        """Test chequing and savings report different errors"""
        assert BALANCE_RULES[AccountKind.CHEQUING].error is OverdraftLimitExceeded
        assert BALANCE_RULES[AccountKind.SAVINGS].error is InsufficientFunds
        assert BALANCE_RULES[AccountKind.CHEQUING].rejection_message == "Overdraft limit exceeded"
        assert BALANCE_RULES[AccountKind.SAVINGS].rejection_message == "Insufficient funds."

    def test_parameters(self):
        """Test each kind names its opening parameter"""
        assert BALANCE_RULES[AccountKind.CHEQUING].parameter == "overdraft_limit"
        assert BALANCE_RULES[AccountKind.SAVINGS].parameter == "interest_rate"


class TestViews:
    """Test snapshot, confirmation and response views"""

    def test_snapshot_from_savings(self):
        """Test savings snapshot fields"""
        snapshot = AccountSnapshot.from_account(
            make_account(AccountKind.SAVINGS, balance="1234.5", interest_rate=Decimal('0.0125'))
        )

        assert snapshot.balance == Decimal('1234.50')
        assert snapshot.overdraft_limit is None
        assert snapshot.to_dict() == {
            "number": "1001",
            "name": "A. Lee",
            "type": "savings",
            "balance": "1234.50",
            "interest_rate": "1.25%",
        }

    def test_close_confirmation_message(self):
        """Test close confirmation wording per kind"""
        confirmation = CloseConfirmation(
            number="2002",
            kind=AccountKind.SAVINGS,
            final_balance=Decimal('0'),
            closed_at=datetime.now(timezone.utc)
        )

        assert confirmation.message == (
            "Savings account 2002 has been closed and can no longer be accessed."
        )
        assert confirmation.to_dict()["final_balance"] == "0.00"

        wider = CloseConfirmation(
            number="2002",
            kind=AccountKind.SAVINGS,
            final_balance=Decimal('0.5'),
            closed_at=confirmation.closed_at,
            precision=3
        )
        assert wider.to_dict()["final_balance"] == "0.500"

    def test_account_response(self):
        """Test API response formatting"""
        chequing = account_to_response(make_account(balance="-30"))
        assert chequing == {
            "number": "1001",
            "name": "A. Lee",
            "type": "chequing",
            "balance": "-30.00",
            "overdraft_limit": "50.00",
        }

        savings = account_to_response(make_account(AccountKind.SAVINGS, interest_rate=Decimal('0.035')))
        assert savings["interest_rate"] == "0.035"
        assert savings["interest_rate_display"] == "3.50%"
        assert "overdraft_limit" not in savings

    def test_kind_labels(self):
        """Test kind labels used in messages"""
        assert AccountKind.CHEQUING.label == "Chequing"
        assert AccountKind.SAVINGS.label == "Savings"
