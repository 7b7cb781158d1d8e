"""
Collection filters.

Provides filters over sequences and mappings:
- batch: split into fixed-size groups
- get: 1-based positional or keyed access
- merge: concatenate two collections
- first, last, keys, length, join, reverse, slice, sort
"""

import functools
from typing import Any, Dict, List

from twigfilters.filters.base import BaseFilter
from twigfilters.values import (
    ABSENT,
    ValueKind,
    coerce_int,
    coerce_string,
    is_iterable,
    items,
    iterate,
    kind_of,
    length,
    to_list,
)


def batch(value: Any, size: int, fill: Any = None) -> List[List[Any]]:
    """
    Split an iterable value into groups of `size` elements.

    The last group is shorter when the elements run out, unless `fill` is
    given, in which case it is padded with `fill` up to `size`.

    Raises:
        TypeError: If the value is not iterable
        ValueError: If size is not greater than 1
    """
    if not is_iterable(value):
        raise TypeError(f"Cannot batch a {kind_of(value).value} value")
    if size <= 1:
        raise ValueError(f"Batch size must be greater than 1, got {size}")

    groups: List[List[Any]] = []
    current: List[Any] = []

    def collect(key, element, loop):
        current.append(element)
        if len(current) == size:
            groups.append(current[:])
            current.clear()

    iterate(value, collect)

    if current:
        if fill is not None:
            current.extend([fill] * (size - len(current)))
        groups.append(current)

    return groups


class BatchFilter(BaseFilter):
    """
    Split a collection into groups.

    Usage: {{ products|batch(3) }}
           {{ products|batch(3, "-") }}

    Params:
        - size (int): Elements per group (default: 1, must be greater than 1)
        - fill: Value used to pad the last group (default: no padding)
    """
    name = "batch"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        size = 1
        fill = None
        if len(args) >= 1:
            size = coerce_int(args[0])
            if len(args) >= 2:
                fill = args[1]

        if not is_iterable(value):
            return self.degrade("value is not iterable", value)

        if size <= 1:
            return self.degrade(f"batch size {size} is not greater than 1", value)

        return batch(value, size, fill)


class GetFilter(BaseFilter):
    """
    Get an element by 1-based position or by key.

    Usage: {{ rows|get(1) }}       first element of a sequence
           {{ row|get("email") }}  value stored under a key
    """
    name = "get"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if len(args) != 1:
            return self.degrade("expected exactly one argument", value)

        key = args[0]
        key_kind = kind_of(key)
        value_kind = kind_of(value)

        if value_kind is ValueKind.SEQUENCE:
            if key_kind is not ValueKind.NUMBER or not (isinstance(key, int) or float(key).is_integer()):
                return self.degrade(f"position {key!r} is not an integer", value)
            position = int(key)
            if position < 1 or position > len(value):
                return self.degrade(f"position {position} is out of range", value)
            return value[position - 1]

        if value_kind is ValueKind.MAPPING:
            if key_kind is not ValueKind.STRING or key == "":
                return self.degrade(f"key {key!r} is not a non-empty string", value)
            if key not in value:
                return self.degrade(f"key {key!r} not found", value)
            return value[key]

        return self.degrade("value is neither a sequence nor a mapping", value)


class MergeFilter(BaseFilter):
    """
    Concatenate two collections into one sequence.

    Usage: {{ [1, 2]|merge([3, 4]) }}  -> [1, 2, 3, 4]

    Mapping keys are dropped; the result is always a plain sequence of the
    subject's elements followed by the argument's elements.

    A non-iterable argument contributes nothing.
    """
    name = "merge"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if not is_iterable(value):
            return self.degrade("value is not iterable", value)

        if len(args) != 1:
            return self.degrade("expected exactly one argument", value)

        if not is_iterable(args[0]):
            return to_list(value)

        return to_list(value) + to_list(args[0])


class FirstFilter(BaseFilter):
    """
    First element of a collection, or first character of a string.

    Usage: {{ items|first }}
    """
    name = "first"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if is_iterable(value):
            for _, element in items(value):
                return element
            return ABSENT

        text = coerce_string(value)
        if text:
            return text[0]

        return ABSENT


class LastFilter(BaseFilter):
    """
    Last element of a collection, or last character of a string.

    Usage: {{ items|last }}
    """
    name = "last"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if is_iterable(value):
            elements = to_list(value)
            return elements[-1] if elements else ABSENT

        text = coerce_string(value)
        if text:
            return text[-1]

        return ABSENT


class KeysFilter(BaseFilter):
    """
    Keys of a mapping, or positions (0-based) of a sequence.

    Usage: {{ row|keys|join(", ") }}
    """
    name = "keys"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if not is_iterable(value):
            return self.degrade("value is not iterable", value)
        return [key for key, _ in items(value)]


class LengthFilter(BaseFilter):
    """
    Number of characters in a string or elements in a collection.

    Numbers count the characters of their rendering (12.5 -> 4); anything
    else is 0.

    Usage: {{ items|length }}
    """
    name = "length"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> int:
        return length(value)


class JoinFilter(BaseFilter):
    """
    Join collection elements into a string.

    Usage: {{ tags|join }}
           {{ tags|join(", ") }}

    Params:
        - separator (str): Separator between elements (default: "")
    """
    name = "join"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if not is_iterable(value):
            return self.degrade("value is not iterable", value)

        separator = coerce_string(args[0]) if args else ""

        return separator.join(coerce_string(element) for element in to_list(value))


class ReverseFilter(BaseFilter):
    """
    Reverse a sequence, a mapping (as a new mapping) or a string.

    Usage: {{ items|reverse }}
    """
    name = "reverse"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        kind = kind_of(value)

        if kind is ValueKind.SEQUENCE:
            return list(reversed(value))

        if kind is ValueKind.MAPPING:
            return dict(reversed(list(items(value))))

        if kind in (ValueKind.STRING, ValueKind.NUMBER):
            return coerce_string(value)[::-1]

        return self.degrade("value cannot be reversed", value)


class SliceFilter(BaseFilter):
    """
    Extract a slice of a sequence or string.

    Usage: {{ items|slice(1, 2) }}
           {{ name|slice(-3) }}

    Params:
        - start (int): Start offset, negative counts from the end
        - length (int): Number of elements, negative stops that many from the end
          (default: up to the end)
    """
    name = "slice"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if not args:
            return self.degrade("missing start", value)

        start = coerce_int(args[0])
        size = None
        if len(args) >= 2 and args[1] is not None:
            size = coerce_int(args[1])

        kind = kind_of(value)
        if kind is ValueKind.MAPPING:
            pairs = list(items(value))
            return dict(_slice(pairs, start, size))

        if kind is ValueKind.SEQUENCE:
            return _slice(list(value), start, size)

        if kind in (ValueKind.STRING, ValueKind.NUMBER):
            return _slice(coerce_string(value), start, size)

        return self.degrade("value cannot be sliced", value)


def _slice(seq, start: int, size=None):
    if start < 0:
        start = max(len(seq) + start, 0)
    if size is None:
        return seq[start:]
    if size < 0:
        return seq[start:len(seq) + size]
    return seq[start:start + size]


def _compare(a: Any, b: Any) -> int:
    # Numbers compare numerically, everything else as text
    if kind_of(a) is ValueKind.NUMBER and kind_of(b) is ValueKind.NUMBER:
        return (a > b) - (a < b)
    a, b = coerce_string(a), coerce_string(b)
    return (a > b) - (a < b)


class SortFilter(BaseFilter):
    """
    Sort collection elements.

    Usage: {{ names|sort }}

    Sequences are sorted into a new list. Mappings are sorted by value and
    keep their keys.
    """
    name = "sort"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        kind = kind_of(value)
        key = functools.cmp_to_key(_compare)

        if kind is ValueKind.SEQUENCE:
            return sorted(value, key=key)

        if kind is ValueKind.MAPPING:
            pairs = sorted(items(value), key=lambda pair: key(pair[1]))
            return dict(pairs)

        return self.degrade("value is not iterable", value)
