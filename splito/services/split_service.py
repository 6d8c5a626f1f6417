import logging
from decimal import Decimal
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from splito.core.utils import qround, to_decimal, to_cents, from_cents, floor_div, CENTS, ZERO, HUNDRED
from splito.schemas.expense import SplitRow, SplitData, ValidationResult

logger = logging.getLogger(__name__)

SPLIT_METHODS = ("equal", "exact", "percent", "shares")
REMAINDER_STRATEGIES = ("last", "largest_remainder")

SPLIT_METHOD_LABELS = {
    "equal": ("Split Equally", "Everyone pays the same amount"),
    "exact": ("Exact Amounts", "Enter specific amounts for each person"),
    "percent": ("By Percentage", "Split by percentage (must total 100%)"),
    "shares": ("By Shares", "Split by shares (e.g., 1x, 2x)"),
}


def split_method_label(method: str) -> str:
    return SPLIT_METHOD_LABELS.get(method, ("Unknown", ""))[0]


def split_method_description(method: str) -> str:
    return SPLIT_METHOD_LABELS.get(method, ("Unknown", ""))[1]


def _positive_entries(values: Mapping[str, Decimal]) -> List[Tuple[str, Decimal]]:
    # dict order is the caller's order; the remainder rule depends on it
    entries = []
    for member_id, value in values.items():
        value = to_decimal(value)
        if value.is_finite() and value > 0:
            entries.append((member_id, value))
    return entries


def _absorb_remainder(splits: List[SplitRow], amount: Decimal) -> List[SplitRow]:
    if not splits:
        return splits

    total = sum((s.amount for s in splits), ZERO)
    diff = qround(amount - total)

    if diff != 0:
        splits[-1].amount = qround(splits[-1].amount + diff)
        logger.debug("Assigned rounding remainder %s to %s", diff, splits[-1].member_id)

    return splits


def allocate_largest_remainder(amount, weights: Sequence[Tuple[str, Decimal]]) -> List[SplitRow]:
    """
    Hamilton apportionment in whole cents.

    Each row gets the floor of its exact cent share, then the leftover cents
    go one at a time to the rows with the largest fractional remainder.
    Ties go to the earlier row, so the result only depends on input order
    when remainders are equal.
    """
    amount = to_decimal(amount)
    total_weight = sum((w for _, w in weights), ZERO)

    if not amount.is_finite() or not weights or total_weight <= 0:
        return []

    total_cents = to_cents(amount)
    sign = -1 if total_cents < 0 else 1
    total_cents = abs(total_cents)

    floors = []
    remainders = []
    for _, weight in weights:
        exact = Decimal(total_cents) * weight / total_weight
        floor = floor_div(Decimal(total_cents) * weight, total_weight)
        floors.append(floor)
        remainders.append(exact - floor)

    leftover = total_cents - sum(floors)
    leftover = max(0, min(leftover, len(weights)))

    order = sorted(range(len(weights)), key=lambda i: (-remainders[i], i))
    for i in order[:leftover]:
        floors[i] += 1

    return [
        SplitRow(member_id=member_id, amount=from_cents(sign * cents))
        for (member_id, _), cents in zip(weights, floors)
    ]


def _allocate(amount: Decimal, weights, divisor: Decimal, strategy: str) -> List[SplitRow]:
    if strategy == "largest_remainder":
        return allocate_largest_remainder(amount, weights)

    splits = [
        SplitRow(member_id=member_id, amount=qround(amount * weight / divisor))
        for member_id, weight in weights
    ]
    return _absorb_remainder(splits, amount)


def equal_split(amount, member_ids: Sequence[str], strategy: str = "last") -> List[SplitRow]:
    amount = to_decimal(amount)
    if not member_ids or not amount.is_finite():
        return []

    weights = [(member_id, Decimal(1)) for member_id in member_ids]

    return _allocate(amount, weights, Decimal(len(member_ids)), strategy)


def exact_split(amounts: Mapping[str, Decimal]) -> List[SplitRow]:
    # trusts the caller: no reconciliation against the charge total
    return [
        SplitRow(member_id=member_id, amount=qround(value))
        for member_id, value in _positive_entries(amounts)
    ]


def percent_split(amount, percents: Mapping[str, Decimal], strategy: str = "last") -> List[SplitRow]:
    amount = to_decimal(amount)
    if not amount.is_finite():
        return []

    entries = _positive_entries(percents)

    return _allocate(amount, entries, HUNDRED, strategy)


def shares_split(amount, shares: Mapping[str, Decimal], strategy: str = "last") -> List[SplitRow]:
    amount = to_decimal(amount)
    if not amount.is_finite():
        return []

    entries = _positive_entries(shares)
    total_shares = sum((w for _, w in entries), ZERO)

    if total_shares == 0:
        return []

    return _allocate(amount, entries, total_shares, strategy)


def calculate_splits(method: str, amount, data: SplitData, strategy: str = "last") -> List[SplitRow]:
    if method == "equal":
        return equal_split(amount, data.member_ids or [], strategy)
    if method == "exact":
        return exact_split(data.amounts or {})
    if method == "percent":
        return percent_split(amount, data.percents or {}, strategy)
    if method == "shares":
        return shares_split(amount, data.shares or {}, strategy)

    logger.debug("Unknown split method %r, returning no splits", method)
    return []


def _total(values: Optional[Dict[str, Decimal]]) -> Decimal:
    return sum((to_decimal(v) for v in values.values()), ZERO)


def _all_finite(data: SplitData) -> bool:
    for values in (data.amounts, data.percents, data.shares):
        if values and not all(to_decimal(v).is_finite() for v in values.values()):
            return False
    return True


def validate_split(method: str, amount, data: SplitData) -> ValidationResult:
    amount = to_decimal(amount)

    if not amount.is_finite() or not _all_finite(data):
        return ValidationResult(is_valid=False, error="Please enter a valid amount")

    if method == "equal":
        if not data.member_ids:
            return ValidationResult(is_valid=False, error="Please select at least one person to split with")
        return ValidationResult(is_valid=True)

    if method == "exact":
        if data.amounts is None:
            return ValidationResult(is_valid=False, error="Please enter amounts for each person")

        total = _total(data.amounts)
        if abs(qround(total) - qround(amount)) > CENTS:
            return ValidationResult(
                is_valid=False,
                error=f"Amounts must add up to {amount:.2f} (currently {total:.2f})",
            )
        return ValidationResult(is_valid=True)

    if method == "percent":
        if data.percents is None:
            return ValidationResult(is_valid=False, error="Please enter percentages for each person")

        total = _total(data.percents)
        if abs(total - HUNDRED) > CENTS:
            return ValidationResult(
                is_valid=False,
                error=f"Percentages must add up to 100% (currently {total:.1f}%)",
            )
        return ValidationResult(is_valid=True)

    if method == "shares":
        if data.shares is None:
            return ValidationResult(is_valid=False, error="Please enter shares for each person")

        if _total(data.shares) <= 0:
            return ValidationResult(is_valid=False, error="Please assign at least one share")
        return ValidationResult(is_valid=True)

    return ValidationResult(is_valid=False, error="Invalid split method")
