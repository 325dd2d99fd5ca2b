"""
Money parsing: dollar amounts typed by people into integer cents.

Examples:
    - "$1,000.54" → 100054
    - "10" → 1000
    - Decimal("2.5") → 250
    - None or "" → 0
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from supplybank.exceptions import ValidationError


def to_cents(value, field: str = 'amount') -> int:
    """
    Convert a dollar amount to cents.

    Args:
        value: str, int, Decimal or float dollar amount (None/'' = 0)
        field: Field name reported in the error

    Raises:
        ValidationError('INVALID_AMOUNT'): If value is not money or is negative
    """
    if value is None or value == '':
        return 0

    if isinstance(value, str):
        cleaned = value.strip().replace('$', '').replace(',', '')
    else:
        cleaned = str(value)

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValidationError('INVALID_AMOUNT', field=field, value=value) from None

    if not amount.is_finite() or amount < 0:
        raise ValidationError('INVALID_AMOUNT', field=field, value=value)

    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def format_cents(cents: int) -> str:
    """Format cents as dollars (ex: 100054 → "$1,000.54")."""
    return f"${Decimal(cents) / 100:,.2f}"
