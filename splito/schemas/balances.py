from decimal import Decimal
from pydantic import BaseModel
from typing import List

from splito.schemas.expense import Charge
from splito.schemas.member import Member
from splito.schemas.settlements import Payment, Transaction

class LedgerSnapshot(BaseModel):
    members: List[Member]
    charges: List[Charge] = []
    payments: List[Payment] = []

class BalanceSummary(BaseModel):
    total_owed: Decimal
    total_owing: Decimal

class GroupBalanceOut(BaseModel):
    net: dict[str, Decimal]
    settlements: list[Transaction]
    total_owed: Decimal
    total_owing: Decimal
    is_settled: bool
