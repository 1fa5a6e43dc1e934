"""
JSON formatting helpers for handler responses.
"""
from decimal import Decimal
from datetime import date, datetime, time
from typing import Union, Optional

from erplite.utils.number_format import CENTS


def money(value: Union[int, float, Decimal, None]) -> float:
    """
    Render a currency amount as a JSON number rounded to cents.

    Examples:
        money(Decimal('25.00')) -> 25.0
        money(None) -> 0.0
    """
    if value is None:
        return 0.0
    return float(Decimal(str(value)).quantize(CENTS))


def iso(value: Union[date, datetime, time, None]) -> Optional[str]:
    """ISO-8601 text for dates, datetimes and times; None passes through."""
    if value is None:
        return None
    return value.isoformat()
