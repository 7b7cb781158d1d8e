"""
Number filters.

Provides numeric transformations:
- abs: absolute value
- round: round with a method (common, ceil, floor)
- number_format: format with decimals and separators
"""

import math
from decimal import Decimal, InvalidOperation, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP
from typing import Any, Dict, Union

from twigfilters.filters.base import BaseFilter
from twigfilters.values import coerce_int, coerce_number, coerce_string


_ROUNDING_METHODS = {
    'common': ROUND_HALF_UP,
    'ceil': ROUND_CEILING,
    'floor': ROUND_FLOOR,
}


def round_number(value: Union[int, float], precision: int = 0, method: str = 'common') -> float:
    """
    Round a number half away from zero (common), up (ceil) or down (floor).

    Works on the decimal representation so 2.675 rounds to 2.68.

    Raises:
        ValueError: If the method is unknown
    """
    if method not in _ROUNDING_METHODS:
        raise ValueError(f"Unknown rounding method '{method}'")

    exponent = Decimal(1).scaleb(-precision)
    rounded = Decimal(str(value)).quantize(exponent, rounding=_ROUNDING_METHODS[method])
    return float(rounded)


def format_number(
    value: Union[int, float],
    decimals: int = 0,
    dec_point: str = '.',
    thousands_sep: str = ','
) -> str:
    """Format a number with separators."""
    value = round_number(value, max(decimals, 0))

    if decimals > 0:
        formatted = f"{value:.{decimals}f}"
    else:
        formatted = str(int(value))

    if '.' in formatted:
        integer_part, decimal_part = formatted.split('.')
    else:
        integer_part = formatted
        decimal_part = None

    # Add thousand separators
    if thousands_sep:
        is_negative = integer_part.startswith('-')
        if is_negative:
            integer_part = integer_part[1:]

        # Add separators from right to left
        result_chars = []
        for i, char in enumerate(reversed(integer_part)):
            if i > 0 and i % 3 == 0:
                result_chars.append(thousands_sep)
            result_chars.append(char)
        integer_part = ''.join(reversed(result_chars))

        if is_negative:
            integer_part = '-' + integer_part

    if decimal_part is not None:
        return f"{integer_part}{dec_point}{decimal_part}"
    return integer_part


class AbsFilter(BaseFilter):
    """
    Absolute value of a number.

    Usage: {{ balance|abs }}
    """
    name = "abs"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        number = coerce_number(value)
        if number == 0:
            return number
        return abs(number)


class RoundFilter(BaseFilter):
    """
    Round a number.

    Usage: {{ 42.55|round }}             -> 43.0
           {{ 42.55|round(1, "floor") }} -> 42.5

    Params:
        - precision (int): Number of decimal places (default: 0)
        - method (str): "common", "ceil" or "floor" (default: "common")
    """
    name = "round"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        precision = coerce_int(args[0]) if args else 0
        method = coerce_string(args[1]) if len(args) > 1 else 'common'

        number = coerce_number(value)
        if isinstance(number, float) and not math.isfinite(number):
            return self.degrade("number is not finite", value)

        try:
            return round_number(number, precision, method)
        except (ValueError, InvalidOperation) as e:
            return self.degrade(str(e), value)


class NumberFormatFilter(BaseFilter):
    """
    Format a number with grouped thousands.

    Usage: {{ 9800.333|number_format }}              -> 9,800
           {{ 9800.333|number_format(2, ",", ".") }} -> 9.800,33

    Params:
        - decimals (int): Number of decimal places (default: 0)
        - dec_point (str): Decimal separator (default: ".")
        - thousands_sep (str): Thousands separator (default: ",")
    """
    name = "number_format"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        decimals = coerce_int(args[0]) if args else 0
        dec_point = coerce_string(args[1]) if len(args) > 1 else '.'
        thousands_sep = coerce_string(args[2]) if len(args) > 2 else ','

        number = coerce_number(value)
        if isinstance(number, float) and not math.isfinite(number):
            return self.degrade("number is not finite", value)

        try:
            return format_number(number, decimals, dec_point, thousands_sep)
        except InvalidOperation as e:
            return self.degrade(str(e), value)
