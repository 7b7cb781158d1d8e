"""
Filter Module

Provides the built-in filters, applied in templates with pipe syntax:
{{ value|filter(arg) }}
"""

from typing import Dict

from twigfilters.filters.base import BaseFilter, FilterError, FilterRegistry, degrade
from twigfilters.filters.collection import (
    BatchFilter,
    FirstFilter,
    GetFilter,
    JoinFilter,
    KeysFilter,
    LastFilter,
    LengthFilter,
    MergeFilter,
    ReverseFilter,
    SliceFilter,
    SortFilter,
)
from twigfilters.filters.date import (
    DateFilter,
    DateModifyFilter,
    DateTimeFilter,
    TimeFilter,
)
from twigfilters.filters.number import (
    AbsFilter,
    NumberFormatFilter,
    RoundFilter,
)
from twigfilters.filters.text import (
    CapitalizeFilter,
    ConvertEncodingFilter,
    DefaultFilter,
    FormatFilter,
    JsonEncodeFilter,
    LowerFilter,
    Nl2BrFilter,
    RawFilter,
    ReplaceFilter,
    SplitFilter,
    StripTagsFilter,
    TitleFilter,
    TrimFilter,
    UpperFilter,
    UrlEncodeFilter,
)


def twig_filters() -> Dict[str, BaseFilter]:
    """
    Map every built-in filter name to a fresh filter instance.

    Each value is callable as `filter(ctx, value, *args)`, so the mapping
    can be handed to any host registry as-is.
    """
    return {
        "abs": AbsFilter(),
        "default": DefaultFilter(),
        "batch": BatchFilter(),
        "capitalize": CapitalizeFilter(),
        "convert_encoding": ConvertEncodingFilter(),
        "date": DateFilter(),
        "date_modify": DateModifyFilter(),
        "first": FirstFilter(),
        "format": FormatFilter(),
        "join": JoinFilter(),
        "json_encode": JsonEncodeFilter(),
        "keys": KeysFilter(),
        "last": LastFilter(),
        "length": LengthFilter(),
        "lower": LowerFilter(),
        "merge": MergeFilter(),
        "nl2br": Nl2BrFilter(),
        "number_format": NumberFormatFilter(),
        "raw": RawFilter(),
        "replace": ReplaceFilter(),
        "reverse": ReverseFilter(),
        "round": RoundFilter(),
        "slice": SliceFilter(),
        "sort": SortFilter(),
        "split": SplitFilter(),
        "striptags": StripTagsFilter(),
        "title": TitleFilter(),
        "trim": TrimFilter(),
        "upper": UpperFilter(),
        "url_encode": UrlEncodeFilter(),

        # custom
        "get": GetFilter(),
        "dateTime": DateTimeFilter(),
        "time": TimeFilter(),
    }


def create_default_registry() -> FilterRegistry:
    """Create a registry with all built-in filters."""
    registry = FilterRegistry()

    for name, filter_ in twig_filters().items():
        registry.register(filter_, name)

    return registry


# Default registry instance
default_registry = create_default_registry()


__all__ = [
    'BaseFilter',
    'FilterError',
    'FilterRegistry',
    'degrade',
    'twig_filters',
    'default_registry',
    'create_default_registry',
    # Collection
    'BatchFilter',
    'FirstFilter',
    'GetFilter',
    'JoinFilter',
    'KeysFilter',
    'LastFilter',
    'LengthFilter',
    'MergeFilter',
    'ReverseFilter',
    'SliceFilter',
    'SortFilter',
    # Date
    'DateFilter',
    'DateModifyFilter',
    'DateTimeFilter',
    'TimeFilter',
    # Number
    'AbsFilter',
    'NumberFormatFilter',
    'RoundFilter',
    # Text
    'CapitalizeFilter',
    'ConvertEncodingFilter',
    'DefaultFilter',
    'FormatFilter',
    'JsonEncodeFilter',
    'LowerFilter',
    'Nl2BrFilter',
    'RawFilter',
    'ReplaceFilter',
    'SplitFilter',
    'StripTagsFilter',
    'TitleFilter',
    'TrimFilter',
    'UpperFilter',
    'UrlEncodeFilter',
]
