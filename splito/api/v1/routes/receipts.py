from fastapi import APIRouter
from splito.schemas.receipt import (
    ReceiptSnapshot,
    MemberReceiptTotal,
    ReceiptSummary,
    CanClaimRequest,
    ClaimCheck,
)
from splito.services.receipt_service import compute_member_totals, generate_summary, can_claim

router = APIRouter()

@router.post("/totals", response_model=list[MemberReceiptTotal])
async def member_totals(data: ReceiptSnapshot):
    return compute_member_totals(data.receipt, data.items, data.claims, data.members)

@router.post("/summary", response_model=ReceiptSummary)
async def summary(data: ReceiptSnapshot):
    return generate_summary(data.receipt, data.items, data.claims, data.members)

@router.post("/can-claim", response_model=ClaimCheck)
async def check_claim(data: CanClaimRequest):
    return can_claim(data.item, data.member_id)
