from decimal import Decimal, ROUND_HALF_UP

TWOPLACES = Decimal('0.01')
ZERO = Decimal('0.00')


def money(value) -> Decimal:
    """Coerce to a 2-place Decimal, treating None/'' as zero."""
    if value is None or value == '':
        return ZERO
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def percent_of(amount: Decimal, pct) -> Decimal:
    """``amount * pct / 100`` rounded to cents."""
    return money(money(amount) * Decimal(str(pct or 0)) / Decimal('100'))
