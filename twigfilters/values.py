"""
Value model for filter subjects and arguments.

Template values are dynamically typed. Every value falls into exactly one
kind of a closed set:

- NULL: None (the absent value)
- NUMBER: int, float, Decimal
- STRING: str
- SEQUENCE: list, tuple
- MAPPING: any Mapping (dict and friends)
- OTHER: everything else (bool, datetime, arbitrary objects)

Filters branch on `kind_of()` and return ABSENT for kinds they do not handle.
The coercion helpers follow the template engine's loose conversion rules so
that filters never have to guess at a value's shape themselves.
"""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Iterator, List, Optional, Tuple, Union

from twigfilters.config import get_config


# The designated "no value" result, rendered as empty output by the host
ABSENT = None


class ValueKind(Enum):
    NULL = 'null'
    NUMBER = 'number'
    STRING = 'string'
    SEQUENCE = 'sequence'
    MAPPING = 'mapping'
    OTHER = 'other'


# Leading numeric prefix, the way loose string-to-number coercion reads it
_NUMBER_PREFIX_RE = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')


def kind_of(value: Any) -> ValueKind:
    """Classify a value into its ValueKind."""
    if value is None:
        return ValueKind.NULL
    # bool is an int subclass, keep it out of NUMBER
    if isinstance(value, bool):
        return ValueKind.OTHER
    if isinstance(value, (int, float, Decimal)):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    return ValueKind.OTHER


def is_array(value: Any) -> bool:
    return kind_of(value) is ValueKind.SEQUENCE


def is_map(value: Any) -> bool:
    return kind_of(value) is ValueKind.MAPPING


def is_iterable(value: Any) -> bool:
    """Only sequences and mappings can be iterated; strings cannot."""
    return kind_of(value) in (ValueKind.SEQUENCE, ValueKind.MAPPING)


def coerce_number(value: Any) -> Union[int, float]:
    """
    Convert a value into a number.

    Handles:
    - int, float, Decimal (Decimal becomes float)
    - bool (1 or 0)
    - strings, using their leading numeric prefix ("12px" -> 12)

    Anything else, including unparseable strings, becomes 0.
    """
    if value is None:
        return 0

    if isinstance(value, bool):
        return int(value)

    if isinstance(value, (int, float)):
        return value

    if isinstance(value, Decimal):
        return float(value)

    if isinstance(value, str):
        match = _NUMBER_PREFIX_RE.match(value)
        if not match:
            return 0
        text = match.group(1)
        if any(c in text for c in '.eE'):
            return float(text)
        return int(text)

    return 0


def coerce_int(value: Any) -> int:
    """coerce_number truncated to an int; infinities and NaN become 0."""
    number = coerce_number(value)
    if isinstance(number, float) and not math.isfinite(number):
        return 0
    return int(number)


def coerce_string(value: Any) -> str:
    """
    Convert a value into its template string representation.

    None renders as "", booleans as "1"/"", integral floats without a
    trailing ".0", and collections as "Array".
    """
    if value is None:
        return ""

    if isinstance(value, bool):
        return "1" if value else ""

    if isinstance(value, float) and value.is_integer():
        return str(int(value))

    if isinstance(value, str):
        return value

    if is_iterable(value):
        return "Array"

    return str(value)


def length(value: Any) -> int:
    """Characters for strings, elements for collections, 0 otherwise."""
    kind = kind_of(value)

    if kind is ValueKind.STRING:
        return len(value)

    if kind in (ValueKind.SEQUENCE, ValueKind.MAPPING):
        return len(value)

    if kind is ValueKind.NUMBER:
        return len(coerce_string(value))

    return 0


@dataclass(frozen=True)
class Loop:
    """Position of the current element during iteration."""
    index0: int
    length: int

    @property
    def index(self) -> int:
        return self.index0 + 1

    @property
    def first(self) -> bool:
        return self.index0 == 0

    @property
    def last(self) -> bool:
        return self.index0 == self.length - 1


def items(value: Any) -> Iterator[Tuple[Any, Any]]:
    """
    Yield (key, element) pairs of an iterable value.

    Sequences yield their positions as keys. Mappings yield in insertion
    order, or sorted by key when `sort_mapping_keys` is configured.

    Raises:
        TypeError: If the value is not iterable
    """
    kind = kind_of(value)

    if kind is ValueKind.SEQUENCE:
        yield from enumerate(value)
        return

    if kind is ValueKind.MAPPING:
        keys = list(value.keys())
        if get_config().sort_mapping_keys:
            keys = sorted(keys, key=_sort_key)
        for key in keys:
            yield key, value[key]
        return

    raise TypeError(f"Cannot iterate over {kind.value} value")


def iterate(value: Any, visitor: Callable[[Any, Any, Loop], Optional[bool]]) -> int:
    """
    Call visitor(key, element, loop) for each element of an iterable value.

    A truthy return from the visitor stops the iteration early.

    Returns:
        The number of elements visited
    """
    pairs: List[Tuple[Any, Any]] = list(items(value))
    count = 0

    for index, (key, element) in enumerate(pairs):
        count += 1
        if visitor(key, element, Loop(index0=index, length=len(pairs))):
            break

    return count


def to_list(value: Any) -> List[Any]:
    """Elements of an iterable value, in enumeration order."""
    return [element for _, element in items(value)]


def _sort_key(key: Any) -> Tuple[int, Any]:
    # Mixed key types sort numbers first, then everything else as text
    if isinstance(key, (int, float)) and not isinstance(key, bool):
        return (0, key)
    return (1, str(key))
