"""
Twig-compatible template filters.

This package provides:
- Built-in filters callable as filter(ctx, value, *args): batch, get,
  merge, date, dateTime, time, ...
- A registry mapping filter names to implementations
- FilterProcessor, a small host helper applying filter chains:
  "batch(3)", "join(\", \")", ("date", ["dd/MM/yyyy"])

Usage:
    from twigfilters import FilterProcessor

    processor = FilterProcessor()
    result = processor.process([1, 2, 3, 4, 5], ['batch(2, 0)'])
    # -> [[1, 2], [3, 4], [5, 0]]
"""

import json
import logging
import re
from typing import Any, List, Sequence, Tuple, Union

from twigfilters.config import FilterConfig, get_config, set_config
from twigfilters.filters import (
    FilterError,
    FilterRegistry,
    create_default_registry,
    default_registry,
    twig_filters,
)
from twigfilters.values import ABSENT, ValueKind, coerce_string, kind_of

logger = logging.getLogger(__name__)

FilterSpec = Union[str, Tuple[str, Sequence[Any]]]

_FILTER_RE = re.compile(r'^(\w+)(?:\((.*)\))?$', re.DOTALL)


def parse_filter(spec: FilterSpec) -> Tuple[str, List[Any]]:
    """
    Split a filter spec into name and arguments.

    Accepts "upper", 'join(", ")', 'batch(3, "-")' (arguments are JSON
    literals) or an already split (name, args) pair.

    Raises:
        FilterError: If the spec cannot be parsed
    """
    if isinstance(spec, tuple):
        if len(spec) != 2:
            raise FilterError(repr(spec), "Expected a (name, args) pair")
        name, args = spec
        return name, list(args)

    if not isinstance(spec, str):
        raise FilterError(repr(spec), f"Unsupported filter spec type {type(spec).__name__}")

    m = _FILTER_RE.match(spec.strip())
    if not m:
        raise FilterError(spec, "Invalid filter expression")

    name, arg_text = m.group(1), m.group(2)
    if not arg_text or not arg_text.strip():
        return name, []

    try:
        return name, json.loads(f"[{arg_text}]")
    except ValueError as e:
        raise FilterError(name, f"Invalid arguments: {e}")


class FilterProcessor:
    """
    Applies chains of filters to values.

    A failing filter (unknown name, bad expression) is logged and skipped,
    keeping the value it received. Filters returning ABSENT pass None on to
    the next filter in the chain.
    """

    def __init__(self, context: dict = None, registry: FilterRegistry = None):
        """
        Initialize the processor.

        Args:
            context: Call context handed to every filter
            registry: Filter registry (default: the built-in filters)
        """
        self.context = context or {}
        self.registry = registry or default_registry
        self._stats = {
            'filters_applied': 0,
            'filters_failed': 0,
            'absent_results': 0,
        }

    def process(self, value: Any, chain: Sequence[FilterSpec]) -> Any:
        """
        Apply filters to a value in order.

        Args:
            value: The subject value
            chain: Filter specs, see parse_filter()

        Returns:
            The filtered value
        """
        for spec in chain:
            try:
                name, args = parse_filter(spec)
                result = self.registry.apply(name, self.context, value, *args)
            except FilterError as e:
                self._stats['filters_failed'] += 1
                logger.warning(f"Filter chain step {spec!r} failed: {e}")
                continue

            self._stats['filters_applied'] += 1
            if result is ABSENT and value is not ABSENT:
                self._stats['absent_results'] += 1
            value = result

        return value

    def render(self, value: Any, chain: Sequence[FilterSpec] = ()) -> str:
        """Apply filters and render the result the way the host prints it."""
        result = self.process(value, chain)
        if kind_of(result) in (ValueKind.SEQUENCE, ValueKind.MAPPING):
            return json.dumps(result, default=str)
        return coerce_string(result)

    def get_stats(self) -> dict:
        """Get processing statistics."""
        return self._stats.copy()


__all__ = [
    'ABSENT',
    'FilterConfig',
    'FilterError',
    'FilterProcessor',
    'FilterRegistry',
    'create_default_registry',
    'default_registry',
    'get_config',
    'parse_filter',
    'set_config',
    'twig_filters',
]
