"""Money helpers - every amount in the engine is a Decimal quantized to cents"""

import re
from decimal import Decimal, InvalidOperation, ROUND_DOWN, ROUND_HALF_UP, getcontext

getcontext().prec = 28

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

# "12,500.75" is accepted; "1250,50" (decimal comma) is not
_GROUPED_AMOUNT = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d+)?$")


def _parse_text(text: str) -> Decimal:
    text = text.strip()
    if "," in text:
        if not _GROUPED_AMOUNT.match(text):
            raise InvalidOperation(f"Ambiguous thousands separator in {text!r}")
        text = text.replace(",", "")
    return Decimal(text)


def to_money(value: object) -> Decimal:
    """
    Convert an int, str, float or Decimal into a Decimal amount.

    Floats go through ``str()`` so 0.1 becomes Decimal("0.1") rather than its
    binary expansion. Commas are only accepted as thousands separators.

    Raises:
        ValueError: If the value is not numeric (or is NaN/infinite)
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid numeric value: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = value if isinstance(value, Decimal) else _parse_text(str(value))
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Invalid numeric value: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid numeric value: {value!r}")
    return amount


def round_cents(amount: Decimal) -> Decimal:
    """Round half-up to whole cents"""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def floor_cents(amount: Decimal) -> Decimal:
    """Truncate to whole cents (never allocates more than is available)"""
    return amount.quantize(CENT, rounding=ROUND_DOWN)
