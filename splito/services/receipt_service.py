import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple

from splito.core.utils import (
    qround,
    to_decimal,
    ZERO,
    ONE,
    FULL_CLAIM_TOLERANCE,
    CLAIMED_THRESHOLD,
    RECONCILE_LIMIT,
)
from splito.schemas.member import Member
from splito.schemas.receipt import (
    ReceiptAggregate,
    ReceiptItem,
    ItemClaim,
    ClaimedItem,
    MemberReceiptTotal,
    ReceiptSummary,
    ClaimCheck,
    ClaimSource,
)

logger = logging.getLogger(__name__)


def _claimed_fraction(claims: List[ItemClaim]) -> Decimal:
    return sum((to_decimal(c.share_fraction) for c in claims), ZERO)


def is_special_item(item: ReceiptItem) -> bool:
    return (
        item.is_tax
        or item.is_tip
        or item.is_discount
        or item.is_subtotal
        or item.is_total
        or item.is_service_charge
        or item.is_modifier
    )


def is_claimable(item: ReceiptItem) -> bool:
    # quantity 0 marks a multi-quantity row that was expanded into units
    return not is_special_item(item) and item.quantity != 0


def claimed_amount(item: ReceiptItem, items: Optional[List[ReceiptItem]] = None) -> Decimal:
    """
    Price of the claimed part of an item.

    Pass the receipt's full item list to include the item's modifiers, the
    same rollup compute_member_totals and generate_summary use.
    """
    if not item.claims:
        return ZERO

    price = to_decimal(item.total_price)
    if items is not None:
        price += _modifier_totals(items).get(item.id, ZERO)

    return price * _claimed_fraction(item.claims)


def is_fully_claimed(item: ReceiptItem) -> bool:
    if not item.claims:
        return False

    return abs(_claimed_fraction(item.claims) - ONE) < FULL_CLAIM_TOLERANCE


def remaining_fraction(item: ReceiptItem) -> Decimal:
    if not item.claims:
        return ONE

    return max(ZERO, ONE - _claimed_fraction(item.claims))


def _modifier_totals(items: List[ReceiptItem]) -> Dict[str, Decimal]:
    items_by_id = {item.id: item for item in items}
    first_units: Dict[str, str] = {}
    for item in items:
        if item.expanded_from_id and item.expanded_from_id not in first_units:
            first_units[item.expanded_from_id] = item.id

    totals: Dict[str, Decimal] = {}

    for item in items:
        if not (item.is_modifier and item.parent_item_id):
            continue

        parent_id = item.parent_item_id
        parent = items_by_id.get(parent_id)
        # a modifier on an expanded row rides on its first unit
        if parent is not None and parent.quantity == 0:
            parent_id = first_units.get(parent_id, parent_id)
            parent = items_by_id[parent_id]

        if parent is None or not is_claimable(parent):
            logger.warning("Modifier %s has no claimable parent (%s), its price is left out", item.id, item.parent_item_id)
            continue

        totals[parent_id] = totals.get(parent_id, ZERO) + to_decimal(item.total_price)

    return totals


def compute_member_totals(
    receipt: ReceiptAggregate,
    items: List[ReceiptItem],
    claims: List[ItemClaim],
    members: List[Member],
) -> List[MemberReceiptTotal]:
    """
    Each claimant's item subtotal plus their proportional share of tax, tip,
    service charge and discount.

    Modifiers ("+ Extra Cheese") are not claimed directly: their price rides
    on the parent item, so a claim on the parent covers both.

    When the receipt declares a total and the rounded grand totals miss it by
    less than RECONCILE_LIMIT, the gap is added to the largest grand total so
    the rows add up to the receipt exactly.
    """
    items_by_id = {item.id: item for item in items}
    modifier_totals = _modifier_totals(items)
    names = {m.id: m.name for m in members}

    # member_id -> (subtotal, claimed items), in first-claim order
    member_items: Dict[str, Tuple[Decimal, List[ClaimedItem]]] = {}

    for claim in claims:
        item = items_by_id.get(claim.receipt_item_id)
        if item is None or not is_claimable(item):
            continue

        fraction = to_decimal(claim.share_fraction)
        price = to_decimal(item.total_price) + modifier_totals.get(item.id, ZERO)
        claim_amount = qround(price * fraction)

        subtotal, claimed = member_items.get(claim.member_id, (ZERO, []))
        claimed.append(ClaimedItem(
            item_id=item.id,
            description=item.description,
            amount=claim_amount,
            share_fraction=fraction,
        ))
        member_items[claim.member_id] = (subtotal + claim_amount, claimed)

    claimed_subtotal = sum((subtotal for subtotal, _ in member_items.values()), ZERO)

    tax_amount = to_decimal(receipt.tax_amount)
    tip_amount = to_decimal(receipt.tip_amount)
    service_amount = to_decimal(receipt.service_charge_amount)
    discount_amount = to_decimal(receipt.discount_amount)

    totals: List[MemberReceiptTotal] = []

    for member_id, (subtotal, claimed) in member_items.items():
        if member_id not in names:
            continue

        proportion = subtotal / claimed_subtotal if claimed_subtotal > 0 else ZERO

        tax_share = qround(tax_amount * proportion)
        tip_share = qround(tip_amount * proportion)
        service_share = qround(service_amount * proportion)
        # discount is negative, so this share lowers the total
        discount_share = qround(discount_amount * proportion)

        totals.append(MemberReceiptTotal(
            member_id=member_id,
            member_name=names[member_id],
            items_subtotal=qround(subtotal),
            tax_share=tax_share,
            tip_share=tip_share,
            service_charge_share=service_share,
            discount_share=discount_share,
            tax_plus_service_share=qround(tax_share + service_share),
            grand_total=qround(subtotal + tax_share + tip_share + service_share + discount_share),
            claimed_items=claimed,
        ))

    if totals and receipt.total_amount is not None:
        calculated_total = sum((t.grand_total for t in totals), ZERO)
        discrepancy = qround(to_decimal(receipt.total_amount) - calculated_total)

        if 0 < abs(discrepancy) < RECONCILE_LIMIT:
            totals.sort(key=lambda t: t.grand_total, reverse=True)
            totals[0].grand_total = qround(totals[0].grand_total + discrepancy)
            logger.debug("Reconciled receipt %s: %s added to %s", receipt.id, discrepancy, totals[0].member_id)

    return totals


def generate_summary(
    receipt: ReceiptAggregate,
    items: List[ReceiptItem],
    claims: List[ItemClaim],
    members: List[Member],
) -> ReceiptSummary:
    regular_items = [item for item in items if is_claimable(item)]

    fractions: Dict[str, Decimal] = {}
    for claim in claims:
        fractions[claim.receipt_item_id] = fractions.get(claim.receipt_item_id, ZERO) + to_decimal(claim.share_fraction)

    claimed_count = 0
    unclaimed_count = 0

    for item in regular_items:
        if fractions.get(item.id, ZERO) >= CLAIMED_THRESHOLD:
            claimed_count += 1
        else:
            unclaimed_count += 1

    modifier_totals = _modifier_totals(items)
    calculated_subtotal = sum(
        (to_decimal(item.total_price) + modifier_totals.get(item.id, ZERO) for item in regular_items),
        ZERO,
    )

    subtotal = receipt.subtotal if receipt.subtotal is not None else calculated_subtotal
    tax = to_decimal(receipt.tax_amount)
    tip = to_decimal(receipt.tip_amount)
    service_charge = to_decimal(receipt.service_charge_amount)
    discount = to_decimal(receipt.discount_amount)

    if receipt.total_amount is not None:
        total = to_decimal(receipt.total_amount)
    else:
        total = calculated_subtotal + tax + tip + service_charge + discount

    return ReceiptSummary(
        receipt_id=receipt.id,
        merchant_name=receipt.merchant_name,
        item_count=len(regular_items),
        claimed_item_count=claimed_count,
        unclaimed_item_count=unclaimed_count,
        subtotal=qround(to_decimal(subtotal)),
        tax=qround(tax),
        tip=qround(tip),
        service_charge=qround(service_charge),
        discount=qround(discount),
        total=qround(total),
        member_totals=compute_member_totals(receipt, items, claims, members),
    )


def can_claim(item: ReceiptItem, member_id: str) -> ClaimCheck:
    if not is_claimable(item):
        return ClaimCheck(can_claim=False, reason="This item cannot be claimed")

    # checked before the fully-claimed case so the member sees their own claim
    member_claim = next((c for c in item.claims if c.member_id == member_id), None)
    if member_claim and to_decimal(member_claim.share_fraction) >= ONE:
        return ClaimCheck(can_claim=False, reason="You already claimed this item")

    if is_fully_claimed(item):
        return ClaimCheck(can_claim=False, reason="Item is fully claimed")

    return ClaimCheck(can_claim=True, remaining_fraction=remaining_fraction(item))


def create_claim(
    item_id: str,
    member_id: str,
    split_count: int = 1,
    share_fraction=None,
    max_fraction=None,
    claimed_via: ClaimSource = "app",
) -> ItemClaim:
    split_count = split_count or 1

    if share_fraction is not None:
        fraction = to_decimal(share_fraction)
    else:
        fraction = ONE / Decimal(split_count)

    # cap to whatever is left so the item is not over-claimed
    if max_fraction is not None and fraction > to_decimal(max_fraction):
        fraction = to_decimal(max_fraction)

    return ItemClaim(
        receipt_item_id=item_id,
        member_id=member_id,
        share_fraction=fraction,
        split_count=split_count,
        claim_type="split" if fraction < ONE else "full",
        claimed_via=claimed_via,
    )


def validate_all_items_claimed(
    items: List[ReceiptItem],
    claims: List[ItemClaim],
) -> Tuple[bool, List[ReceiptItem]]:
    unclaimed_items = []

    for item in items:
        if not is_claimable(item):
            continue

        item_claims = [c for c in claims if c.receipt_item_id == item.id]
        if _claimed_fraction(item_claims) < CLAIMED_THRESHOLD:
            unclaimed_items.append(item)

    return len(unclaimed_items) == 0, unclaimed_items


def claim_status(item: ReceiptItem) -> str:
    if not item.claims:
        return "Unclaimed"

    total_fraction = _claimed_fraction(item.claims)

    if total_fraction >= CLAIMED_THRESHOLD:
        if len(item.claims) == 1:
            return f"Claimed by {item.claims[0].member_name or 'someone'}"
        return f"Split {len(item.claims)} ways"

    percentage = (total_fraction * 100).quantize(ONE, rounding=ROUND_HALF_UP)
    return f"{percentage}% claimed"


def format_claim_description(item: ReceiptItem, claim: ItemClaim) -> str:
    if to_decimal(claim.share_fraction) == ONE:
        return item.description

    if claim.split_count > 1:
        return f"{item.description} (1/{claim.split_count})"

    percentage = (to_decimal(claim.share_fraction) * 100).quantize(ONE, rounding=ROUND_HALF_UP)
    return f"{item.description} ({percentage}%)"
