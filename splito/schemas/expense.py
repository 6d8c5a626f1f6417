from decimal import Decimal
from pydantic import BaseModel
from typing import Dict, List, Optional

class SplitRow(BaseModel):
    member_id: str
    amount: Decimal

class Charge(BaseModel):
    paid_by: str
    amount: Decimal
    splits: List[SplitRow] = []

    class Config:
        from_attributes = True

class SplitData(BaseModel):
    # only the field matching the split method is read
    member_ids: Optional[List[str]] = None
    amounts: Optional[Dict[str, Decimal]] = None
    percents: Optional[Dict[str, Decimal]] = None
    shares: Optional[Dict[str, Decimal]] = None

class SplitRequest(SplitData):
    method: str
    amount: Decimal
    strategy: Optional[str] = None

class ValidationResult(BaseModel):
    is_valid: bool
    error: Optional[str] = None

class SplitMethodOut(BaseModel):
    method: str
    label: str
    description: str
