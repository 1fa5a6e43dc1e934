"""Number parsing utilities for JSON request bodies."""
import math
from decimal import Decimal, InvalidOperation

CENTS = Decimal('0.01')


def parse_amount(value, places=None) -> Decimal:
    """
    Parse a monetary value from a JSON body to Decimal.

    Rules:
    - Accepts int, float or a numeric string ("10.50")
    - Booleans are not numbers here
    - No NaN/Infinity
    - No negatives
    - At most `places` decimal places when given (10.50 and 10.500 pass
      with places=2, 10.505 does not)

    Floats go through str() so 10.1 stays 10.1 and does not become
    10.0999999999999996447286321199499070644378662109375.

    Raises:
        ValueError: if the value is invalid or empty.
    """
    if value is None or isinstance(value, bool):
        raise ValueError('Invalid amount')

    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError('Invalid amount')

    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError('Invalid amount')

    try:
        decimal_value = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValueError('Invalid amount')

    if not decimal_value.is_finite():
        raise ValueError('Invalid amount')

    if decimal_value < 0:
        raise ValueError('Amount cannot be negative')

    if places is not None:
        try:
            rounded = decimal_value.quantize(Decimal(1).scaleb(-places))
        except InvalidOperation:
            raise ValueError('Invalid amount')
        if decimal_value != rounded:
            raise ValueError(f'Amount cannot have more than {places} decimal places')

    return decimal_value


def parse_quantity(value) -> int:
    """
    Parse a cart quantity: a positive whole number.

    2 and 2.0 (and "2") are accepted, 2.5 and 0 are not.

    Raises:
        ValueError: if the value is invalid, fractional or not positive.
    """
    decimal_value = parse_amount(value)

    if decimal_value != decimal_value.to_integral_value():
        raise ValueError('Quantity must be a whole number')

    if decimal_value <= 0:
        raise ValueError('Quantity must be greater than 0')

    return int(decimal_value)
