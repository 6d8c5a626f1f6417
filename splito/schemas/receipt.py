from decimal import Decimal
from pydantic import BaseModel
from typing import List, Literal, Optional

from splito.schemas.member import Member

ClaimSource = Literal["app", "web", "imessage", "assigned"]

class ItemClaim(BaseModel):
    receipt_item_id: str
    member_id: str
    share_fraction: Decimal
    split_count: int = 1
    claim_type: Literal["full", "split"] = "full"
    claimed_via: ClaimSource = "app"
    member_name: Optional[str] = None

    class Config:
        from_attributes = True

class ReceiptItem(BaseModel):
    id: str
    description: str = ""
    total_price: Decimal
    quantity: int = 1

    is_tax: bool = False
    is_tip: bool = False
    is_discount: bool = False
    is_subtotal: bool = False
    is_total: bool = False
    is_service_charge: bool = False
    is_modifier: bool = False

    # modifier -> main item, expanded unit -> original multi-quantity row
    parent_item_id: Optional[str] = None
    expanded_from_id: Optional[str] = None

    claims: List[ItemClaim] = []

    class Config:
        from_attributes = True

class ReceiptAggregate(BaseModel):
    id: str = ""
    merchant_name: Optional[str] = None
    subtotal: Optional[Decimal] = None
    tax_amount: Decimal = Decimal("0")
    tip_amount: Decimal = Decimal("0")
    service_charge_amount: Decimal = Decimal("0")
    # stored negative
    discount_amount: Decimal = Decimal("0")
    total_amount: Optional[Decimal] = None

    class Config:
        from_attributes = True

class ClaimedItem(BaseModel):
    item_id: str
    description: str
    amount: Decimal
    share_fraction: Decimal

class MemberReceiptTotal(BaseModel):
    member_id: str
    member_name: str
    items_subtotal: Decimal
    tax_share: Decimal
    tip_share: Decimal
    service_charge_share: Decimal
    discount_share: Decimal
    tax_plus_service_share: Decimal
    grand_total: Decimal
    claimed_items: List[ClaimedItem] = []

class ReceiptSummary(BaseModel):
    receipt_id: str
    merchant_name: Optional[str] = None
    item_count: int
    claimed_item_count: int
    unclaimed_item_count: int
    subtotal: Decimal
    tax: Decimal
    tip: Decimal
    service_charge: Decimal
    discount: Decimal
    total: Decimal
    member_totals: List[MemberReceiptTotal]

class ClaimCheck(BaseModel):
    can_claim: bool
    reason: Optional[str] = None
    remaining_fraction: Optional[Decimal] = None

class ReceiptSnapshot(BaseModel):
    receipt: ReceiptAggregate
    items: List[ReceiptItem]
    claims: List[ItemClaim] = []
    members: List[Member] = []

class CanClaimRequest(BaseModel):
    item: ReceiptItem
    member_id: str
