"""Display helpers shared by feedback messages and the Streamlit page."""

import re
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Union

Number = Union[Decimal, float, int]


def format_currency(amount: Optional[Number]) -> str:
    """Format an amount as US dollars, e.g. 1234.5 -> '$1,234.50'."""
    if amount is None:
        return "N/A"
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percentage(rate: Optional[float]) -> str:
    """Format a fractional rate, e.g. 0.085 -> '8.50%'. Missing rates show 'N/A'."""
    if rate is None:
        return "N/A"
    return f"{rate * 100:.2f}%"


def format_calc_key(key: str) -> str:
    """Turn a camelCase calculation label into Title Case words."""
    spaced = re.sub(r"([A-Z])", r" \1", key).strip()
    return spaced[:1].upper() + spaced[1:]
