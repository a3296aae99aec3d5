"""
Command endpoint: one POST accepting {action, data}
"""

from fastapi import APIRouter, Depends

from .schemas import BankingCommandRequest
from .system import LedgerSystem, get_ledger_system


router = APIRouter()


@router.post("/banking")
async def run_command(
    request: BankingCommandRequest,
    system: LedgerSystem = Depends(get_ledger_system)
):
    """Execute a banking command; failures are reported in the body, not the status"""
    return system.dispatcher.execute(request.action, request.data)
