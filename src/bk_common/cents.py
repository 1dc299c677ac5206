"""Integer money utilities.

All prices and totals are int cents. Display and form parsing happen here.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

MAX_PRICE_CENTS = 100_000


def format_as_currency(cents: int) -> str:
    """Convert cents to display string: 1250 -> '$12.50', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def format_price(cents: int | None) -> str:
    """Form representation of a price, no grouping: 123456 -> '1234.56'."""
    if cents is None:
        return ""
    sign = "-" if cents < 0 else ""
    abs_cents = abs(cents)
    return f"{sign}{abs_cents // 100}.{abs_cents % 100:02d}"


def parse_price(text: str) -> int:
    """Parse a form price into cents: '12.5' -> 1250.

    Raises ValueError for anything that is not a decimal number.
    """
    try:
        value = Decimal(text.strip())
    except InvalidOperation:
        raise ValueError(f"Invalid value: {text!r}") from None
    if not value.is_finite():
        raise ValueError(f"Invalid value: {text!r}")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def validate_price(price: int) -> None:
    """Validate that price is in the range [0, MAX_PRICE_CENTS] cents."""
    if not (0 <= price <= MAX_PRICE_CENTS):
        raise ValueError(f"Price must be between 0 and {MAX_PRICE_CENTS} cents, got {price}")
