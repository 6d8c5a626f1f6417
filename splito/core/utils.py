from decimal import Decimal, ROUND_HALF_UP, ROUND_FLOOR, getcontext
from typing import Any

getcontext().prec = 28
CENTS = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")

# balances within this of zero count as settled
DUST = Decimal("0.01")

# claim fractions summing within this of 1 are a full claim (thirds etc.)
FULL_CLAIM_TOLERANCE = Decimal("0.002")

# summary / settle screens count an item as claimed from here
CLAIMED_THRESHOLD = Decimal("0.99")

# receipt rounding gaps at or above this are left alone
RECONCILE_LIMIT = Decimal("0.10")


def qround(d: Decimal) -> Decimal:
    return d.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    # str() keeps 0.1 as 0.1 instead of its binary expansion
    return Decimal(str(value))


def to_cents(d: Decimal) -> int:
    return int(qround(d) * 100)


def from_cents(cents: int) -> Decimal:
    return qround(Decimal(cents) / 100)


def floor_div(numerator: Decimal, denominator: Decimal) -> int:
    return int((numerator / denominator).to_integral_value(rounding=ROUND_FLOOR))
