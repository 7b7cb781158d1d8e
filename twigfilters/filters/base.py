"""
Base classes for filters.

Filters are named transformations applied to template values:
{{ value|filter(arg1, arg2) }}

Every filter is invoked with the host's call signature
`(ctx, value, *args)` and returns a new value. Filters never raise on bad
input; they degrade to ABSENT (None) so the host renders empty output.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from twigfilters.config import get_config
from twigfilters.values import ABSENT

logger = logging.getLogger(__name__)


class FilterError(Exception):
    """Error raised by the registry when a filter cannot be applied."""
    def __init__(self, filter_name: str, message: str, value: Any = None):
        self.filter_name = filter_name
        self.value = value
        super().__init__(f"Filter '{filter_name}' failed: {message}")


def degrade(filter_name: str, reason: str, value: Any = None) -> None:
    """
    Report a filter falling back to ABSENT.

    Logged at DEBUG by default; callers opt into WARNING level through the
    `diagnostics` config switch. The return value is always ABSENT so that
    filters can `return degrade(...)`.
    """
    level = logging.WARNING if get_config().diagnostics else logging.DEBUG
    logger.log(level, "Filter '%s' returned no value: %s (value=%r)", filter_name, reason, value)
    return ABSENT


class BaseFilter(ABC):
    """
    Base class for all filters.

    Subclasses must implement:
    - name: The registered filter name (e.g., 'batch', 'date')
    - filter(): The transformation logic
    """

    name: str = ""
    aliases: List[str] = []

    @abstractmethod
    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        """
        Apply the filter to a value.

        Args:
            ctx: Call context provided by the host
            value: The subject value
            *args: Evaluated filter arguments, in order

        Returns:
            The new value, or ABSENT
        """
        pass

    def __call__(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        return self.filter(ctx, value, *args)

    def degrade(self, reason: str, value: Any = None) -> None:
        return degrade(self.name, reason, value)

    def __repr__(self):
        return f"<Filter: {self.name}>"


class FilterRegistry:
    """
    Registry of available filters.

    Maps filter names to implementations. Names are case-sensitive since
    the host exposes mixed-case names such as 'dateTime'.
    """

    def __init__(self):
        self._filters: Dict[str, BaseFilter] = {}

    def register(self, filter_: BaseFilter, name: Optional[str] = None):
        """Register a filter under its own name (or an explicit one) and its aliases."""
        self._filters[name or filter_.name] = filter_

        for alias in getattr(filter_, 'aliases', []):
            self._filters[alias] = filter_

    def get(self, name: str) -> Optional[BaseFilter]:
        """Get a filter by name."""
        return self._filters.get(name)

    def has(self, name: str) -> bool:
        """Check if a filter exists."""
        return name in self._filters

    def list_filters(self) -> List[str]:
        """List all registered filter names."""
        return list(self._filters.keys())

    def as_dict(self) -> Dict[str, BaseFilter]:
        return dict(self._filters)

    def apply(self, name: str, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        """
        Apply a filter by name.

        Args:
            name: Filter name
            ctx: Call context
            value: Subject value
            *args: Filter arguments

        Returns:
            Filtered value

        Raises:
            FilterError: If the filter is not found or fails unexpectedly
        """
        filter_ = self.get(name)
        if not filter_:
            raise FilterError(name, f"Unknown filter: {name}")

        try:
            return filter_(ctx, value, *args)
        except FilterError:
            raise
        except Exception as e:
            raise FilterError(name, str(e), value)
