"""Amount parsing and formatting for two-decimal USD-style values"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENTS = Decimal("0.01")
ZERO = Decimal("0")


def parse_amount(raw: object) -> Decimal | None:
    """
    Parse user or persisted input into a Decimal.

    Strings are stripped and may carry a leading '$' and thousands commas.
    Booleans, empty strings, NaN and infinities are not amounts.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, Decimal):
        value = raw
    elif isinstance(raw, (int, float)):
        value = Decimal(str(raw))
    elif isinstance(raw, str):
        text = raw.strip().replace(",", "").lstrip("$")
        if not text:
            return None
        try:
            value = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if not value.is_finite():
        return None
    return value


def round_cents(value: Decimal) -> Decimal:
    """Round half up to two decimal places"""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal, symbol: str = "$") -> str:
    """Render an amount as '$1,234.50' (negative as '-$12.00')"""
    q = round_cents(value)
    sign = "-" if q < 0 else ""
    return f"{sign}{symbol}{abs(q):,.2f}"
