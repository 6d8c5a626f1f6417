from fastapi import APIRouter
from splito.schemas.balances import LedgerSnapshot, GroupBalanceOut
from splito.schemas.settlements import SimplifyRequest, Transaction
from splito.services.balance_service import (
    compute_balances_with_payments,
    summarize_balances,
    is_group_settled,
)
from splito.services.settlement_service import simplify_debts

router = APIRouter()

@router.post("", response_model=GroupBalanceOut)
async def group_balances(data: LedgerSnapshot):
    net = compute_balances_with_payments(data.charges, data.payments, data.members)
    summary = summarize_balances(net)

    return GroupBalanceOut(
        net=net,
        settlements=simplify_debts(net, data.members),
        total_owed=summary.total_owed,
        total_owing=summary.total_owing,
        is_settled=is_group_settled(net),
    )

@router.post("/simplify", response_model=list[Transaction])
async def simplify(data: SimplifyRequest):
    return simplify_debts(data.balances, data.members)
