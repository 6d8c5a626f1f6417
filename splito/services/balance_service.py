import logging
from decimal import Decimal
from typing import Dict, Iterable, List

from splito.core.utils import qround, to_decimal, DUST, ZERO
from splito.schemas.balances import BalanceSummary
from splito.schemas.expense import Charge
from splito.schemas.member import Member
from splito.schemas.settlements import Payment

logger = logging.getLogger(__name__)


def compute_balances(charges: Iterable[Charge], members: List[Member]) -> Dict[str, Decimal]:
    """
    Returns:
        {
            member_id: net_balance (Decimal)
        }

    net_balance = total_paid - total_owed
    Positive means the member is owed money, negative means they owe.
    """
    balances: Dict[str, Decimal] = {m.id: ZERO for m in members}

    for charge in charges:
        # payer is credited the full amount
        balances[charge.paid_by] = balances.get(charge.paid_by, ZERO) + to_decimal(charge.amount)

        # every split row is debited
        for s in charge.splits:
            balances[s.member_id] = balances.get(s.member_id, ZERO) - to_decimal(s.amount)

    return {member_id: qround(amount) for member_id, amount in balances.items()}


def compute_balances_with_payments(
    charges: Iterable[Charge],
    payments: Iterable[Payment],
    members: List[Member],
) -> Dict[str, Decimal]:
    balances = compute_balances(charges, members)

    # A paid B: A's debt shrinks, B's credit shrinks.
    # Paying more than owed flips the relationship, which is allowed.
    for p in payments:
        amount = to_decimal(p.amount)
        balances[p.from_member_id] = qround(balances.get(p.from_member_id, ZERO) + amount)
        balances[p.to_member_id] = qround(balances.get(p.to_member_id, ZERO) - amount)

    return balances


def summarize_balances(balances: Dict[str, Decimal]) -> BalanceSummary:
    total_owed = ZERO
    total_owing = ZERO

    for amount in balances.values():
        if amount > 0:
            total_owed += amount
        elif amount < 0:
            total_owing += -amount

    return BalanceSummary(total_owed=qround(total_owed), total_owing=qround(total_owing))


def is_group_settled(balances: Dict[str, Decimal], tolerance: Decimal = DUST) -> bool:
    """
    A group is settled if:
        abs(net_balance) <= tolerance
        for every member
    """
    for amount in balances.values():
        if abs(amount) > tolerance:
            return False

    return True
