from decimal import Decimal
from pydantic import BaseModel
from typing import Dict, List

from splito.schemas.member import Member

class Payment(BaseModel):
    from_member_id: str
    to_member_id: str
    amount: Decimal

    class Config:
        from_attributes = True

class Transaction(BaseModel):
    from_id: str
    to_id: str
    amount: Decimal

class SimplifyRequest(BaseModel):
    balances: Dict[str, Decimal]
    members: List[Member] = []
