"""Dollar/cent conversion and display formatting."""

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    # str() first so floats like 10.1 don't drag binary noise into the Decimal
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_cents(amount: Decimal | float | int | str) -> int:
    """Convert a dollar amount to integer cents, rounding half up."""
    dollars = to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    return int(dollars * 100)


def cents_to_dollars(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def format_cents(cents: int) -> str:
    """Render cents for display: ``$80.00``, ``-$45.00``, ``$1,234.50``."""
    sign = "-" if cents < 0 else ""
    return f"{sign}${cents_to_dollars(abs(cents)):,.2f}"
