"""
Account endpoints
"""

from fastapi import APIRouter, Depends, status

from .errors import http_error
from .schemas import AmountRequest, OpenChequingRequest, OpenSavingsRequest
from .system import LedgerSystem, get_ledger_system
from ..accounts import AccountKind, account_to_response
from ..errors import LedgerError


router = APIRouter()


@router.get("")
async def list_accounts(system: LedgerSystem = Depends(get_ledger_system)):
    """List open accounts grouped by kind"""
    chequing, savings = system.ledger.list_accounts()
    precision = system.ledger.display_precision
    return {
        "chequing": [account_to_response(a, precision) for a in chequing],
        "savings": [account_to_response(a, precision) for a in savings],
    }


@router.post("/chequing", status_code=status.HTTP_201_CREATED)
async def open_chequing(
    request: OpenChequingRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Open a chequing account"""
    try:
        account = system.ledger.open_account(
            number=request.number,
            holder_name=request.name,
            initial_balance=request.balance,
            kind=AccountKind.CHEQUING,
            overdraft_limit_or_interest_rate=request.overdraft_limit
        )
    except LedgerError as e:
        raise http_error(e)
    return account_to_response(account, system.ledger.display_precision)


@router.post("/savings", status_code=status.HTTP_201_CREATED)
async def open_savings(
    request: OpenSavingsRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Open a savings account"""
    try:
        account = system.ledger.open_account(
            number=request.number,
            holder_name=request.name,
            initial_balance=request.balance,
            kind=AccountKind.SAVINGS,
            overdraft_limit_or_interest_rate=request.interest_rate
        )
    except LedgerError as e:
        raise http_error(e)
    return account_to_response(account, system.ledger.display_precision)


@router.get("/{number}")
async def get_account_info(
    number: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Get display information for an open account"""
    try:
        snapshot = system.ledger.get_account_info(number)
    except LedgerError as e:
        raise http_error(e)
    return snapshot.to_dict()


@router.post("/{number}/deposit")
async def deposit(
    number: str,
    request: AmountRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Deposit into an account"""
    try:
        account = system.ledger.deposit(number, request.amount)
    except LedgerError as e:
        raise http_error(e)
    return account_to_response(account, system.ledger.display_precision)


@router.post("/{number}/withdraw")
async def withdraw(
    number: str,
    request: AmountRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Withdraw from an account"""
    try:
        account = system.ledger.withdraw(number, request.amount)
    except LedgerError as e:
        raise http_error(e)
    return account_to_response(account, system.ledger.display_precision)


@router.delete("/{number}")
async def close_account(
    number: str,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Close an account"""
    try:
        confirmation = system.ledger.close_account(number)
    except LedgerError as e:
        raise http_error(e)
    return {**confirmation.to_dict(), "message": confirmation.message}
