import logging
from collections import deque
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from splito.core.utils import qround, to_decimal, DUST, ZERO
from splito.schemas.member import Member
from splito.schemas.settlements import Transaction

logger = logging.getLogger(__name__)


def _ordered_ids(balances: Dict[str, Decimal], members: Optional[List[Member]]) -> List[str]:
    ids = [m.id for m in members or []]
    seen = set(ids)
    ids.extend(member_id for member_id in balances if member_id not in seen)
    return ids


def simplify_debts(balances: Dict[str, Decimal], members: Optional[List[Member]] = None) -> List[Transaction]:
    """
    Greedy matching of the largest debtor against the largest creditor.

    Not a minimum-transaction solver, but it zeroes every balance and never
    emits more than (debtors + creditors - 1) transactions. Balances within
    one cent of zero are treated as settled.
    """
    creditors = []
    debtors = []

    for member_id in _ordered_ids(balances, members):
        bal = to_decimal(balances.get(member_id, ZERO))
        if bal > DUST:
            creditors.append([member_id, bal])
        elif bal < -DUST:
            debtors.append([member_id, -bal])

    # stable sort: equal amounts keep member order
    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    creditors = deque(creditors)
    debtors = deque(debtors)

    transfers: List[Transaction] = []

    while creditors and debtors:
        cred_id, cred_amt = creditors[0]
        debt_id, debt_amt = debtors[0]

        settled = min(cred_amt, debt_amt)
        pay_amt = qround(settled)

        if pay_amt >= DUST:
            transfers.append(Transaction(from_id=debt_id, to_id=cred_id, amount=pay_amt))

        new_cred = cred_amt - settled
        new_debt = debt_amt - settled

        creditors.popleft()
        debtors.popleft()

        if new_cred >= DUST:
            creditors.appendleft([cred_id, new_cred])
        if new_debt >= DUST:
            debtors.appendleft([debt_id, new_debt])

    logger.debug("Simplified %d balances into %d transfers", len(balances), len(transfers))
    return transfers


def apply_transactions(balances: Dict[str, Decimal], transactions: Iterable[Transaction]) -> Dict[str, Decimal]:
    result = {member_id: to_decimal(amount) for member_id, amount in balances.items()}

    for t in transactions:
        result[t.from_id] = qround(result.get(t.from_id, ZERO) + t.amount)
        result[t.to_id] = qround(result.get(t.to_id, ZERO) - t.amount)

    return result


def debts_for_member(transactions: Iterable[Transaction], member_id: str) -> Dict[str, Decimal]:
    # positive: they owe you, negative: you owe them
    view: Dict[str, Decimal] = {}

    for t in transactions:
        if t.to_id == member_id:
            view[t.from_id] = view.get(t.from_id, ZERO) + t.amount
        elif t.from_id == member_id:
            view[t.to_id] = view.get(t.to_id, ZERO) - t.amount

    return {other: qround(amount) for other, amount in view.items()}
