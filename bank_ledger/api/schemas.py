"""
Pydantic schemas for API requests
"""

from typing import Any, Dict

from pydantic import BaseModel, Field


class BankingCommandRequest(BaseModel):
    action: str = Field(..., description="Command name, e.g. create_chequing or withdraw_savings")
    data: Dict[str, Any] = Field(default_factory=dict)


class OpenChequingRequest(BaseModel):
    number: str
    name: str
    balance: str = Field(..., description="Decimal amount as string")
    overdraft_limit: str = Field(..., description="Decimal amount as string")


class OpenSavingsRequest(BaseModel):
    number: str
    name: str
    balance: str = Field(..., description="Decimal amount as string")
    interest_rate: str = Field(..., description="Fractional rate as string, e.g. 0.035")


class AmountRequest(BaseModel):
    amount: str = Field(..., description="Decimal amount as string")
