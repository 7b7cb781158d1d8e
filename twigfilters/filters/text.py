"""
Text filters.

Provides string manipulation filters:
- upper, lower, capitalize, title, trim
- url_encode, nl2br, striptags, raw
- replace, split, format
- convert_encoding, json_encode, default
"""

import json
import re
from typing import Any, Dict
from urllib.parse import quote, urlencode

from twigfilters.filters.base import BaseFilter
from twigfilters.values import (
    ValueKind,
    coerce_int,
    coerce_string,
    is_iterable,
    items,
    kind_of,
)


class UpperFilter(BaseFilter):
    """
    Convert value to uppercase.

    Usage: {{ name|upper }}
    """
    name = "upper"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> str:
        return coerce_string(value).upper()


class LowerFilter(BaseFilter):
    """
    Convert value to lowercase.

    Usage: {{ name|lower }}
    """
    name = "lower"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> str:
        return coerce_string(value).lower()


class CapitalizeFilter(BaseFilter):
    """
    Uppercase the first character, leave the rest untouched.

    Usage: {{ name|capitalize }}
    """
    name = "capitalize"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> str:
        text = coerce_string(value)
        return text[:1].upper() + text[1:]


_WORD_START_RE = re.compile(r"(?<![\w'])(\w)")


class TitleFilter(BaseFilter):
    """
    Uppercase the first letter of each word.

    Usage: {{ "my first car"|title }} -> My First Car
    """
    name = "title"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> str:
        return _WORD_START_RE.sub(lambda m: m.group(1).upper(), coerce_string(value))


class TrimFilter(BaseFilter):
    """
    Remove leading and trailing characters.

    Usage: {{ value|trim }}
           {{ value|trim(".") }}
           {{ value|trim(" ", "left") }}

    Params:
        - characters (str): Characters to strip (default: whitespace)
        - side (str): "both", "left" or "right" (default: "both")
    """
    name = "trim"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        text = coerce_string(value)
        characters = coerce_string(args[0]) if args and args[0] is not None else None
        side = coerce_string(args[1]) if len(args) > 1 else 'both'

        if side == 'both':
            return text.strip(characters)
        if side == 'left':
            return text.lstrip(characters)
        if side == 'right':
            return text.rstrip(characters)

        return self.degrade(f"unknown side '{side}'", value)


class UrlEncodeFilter(BaseFilter):
    """
    Percent-encode a value for use in a URL path segment.

    Usage: {{ "a b/c"|url_encode }}      -> a%20b%2Fc
           {{ {"q": "x y"}|url_encode }} -> q=x+y

    Mappings are encoded as a query string.
    """
    name = "url_encode"

    # Reserved characters allowed unescaped inside a path segment
    SAFE = "$&+:=@"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> str:
        if kind_of(value) is ValueKind.MAPPING:
            return urlencode([(coerce_string(k), coerce_string(v)) for k, v in items(value)])
        return quote(coerce_string(value), safe=self.SAFE)


_NEWLINE_RE = re.compile(r'(\r\n|\n\r|\n|\r)')


class Nl2BrFilter(BaseFilter):
    """
    Insert HTML line breaks before newlines.

    Usage: {{ "a\\nb"|nl2br }} -> a<br />\\nb
    """
    name = "nl2br"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> str:
        return _NEWLINE_RE.sub(r'<br />\1', coerce_string(value))


_TAG_RE = re.compile(r'</?([a-zA-Z][a-zA-Z0-9]*)\b[^>]*>|<!--.*?-->', re.DOTALL)


class StripTagsFilter(BaseFilter):
    """
    Strip HTML tags.

    Usage: {{ body|striptags }}
           {{ body|striptags("<br><p>") }}

    Params:
        - allowed (str): Tags to keep, written as "<a><b>"
    """
    name = "striptags"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> str:
        allowed = set()
        if args and args[0]:
            allowed = {tag.lower() for tag in re.findall(r'<\s*([a-zA-Z][a-zA-Z0-9]*)\s*/?>', coerce_string(args[0]))}

        def strip(match):
            tag = match.group(1)
            if tag and tag.lower() in allowed:
                return match.group(0)
            return ''

        return _TAG_RE.sub(strip, coerce_string(value))


class RawFilter(BaseFilter):
    """
    Mark a value as safe; returned unchanged.

    Usage: {{ html|raw }}
    """
    name = "raw"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        return value


class ReplaceFilter(BaseFilter):
    """
    Replace placeholders.

    Usage: {{ "I like %this%"|replace({"%this%": "apples"}) }}
           {{ "a-b"|replace("-", "+") }}

    Params:
        - pairs (mapping): search -> replacement
          or
        - search (str), replacement (str)

    Longer search strings win over shorter ones and replaced text is never
    searched again.
    """
    name = "replace"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        text = coerce_string(value)

        if len(args) == 1 and kind_of(args[0]) is ValueKind.MAPPING:
            pairs = {coerce_string(k): coerce_string(v) for k, v in items(args[0])}
        elif len(args) >= 2:
            pairs = {coerce_string(args[0]): coerce_string(args[1])}
        else:
            return self.degrade("expected a mapping or search and replacement", value)

        pairs = {k: v for k, v in pairs.items() if k}
        if not pairs:
            return text

        pattern = re.compile('|'.join(re.escape(k) for k in sorted(pairs, key=len, reverse=True)))
        return pattern.sub(lambda m: pairs[m.group(0)], text)


class SplitFilter(BaseFilter):
    """
    Split a string by a delimiter.

    Usage: {{ "one,two,three"|split(",") }}     -> ["one", "two", "three"]
           {{ "one,two,three"|split(",", 2) }}  -> ["one", "two,three"]
           {{ "one,two,three"|split(",", -1) }} -> ["one", "two"]
           {{ "abc"|split("") }}                -> ["a", "b", "c"]

    Params:
        - delimiter (str): Delimiter; empty splits into chunks of `limit` characters
        - limit (int): Positive keeps at most `limit` parts, negative drops
          that many from the end
    """
    name = "split"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if not args:
            return self.degrade("missing delimiter", value)

        text = coerce_string(value)
        delimiter = coerce_string(args[0])
        limit = None
        if len(args) > 1 and args[1] is not None:
            limit = coerce_int(args[1])

        if delimiter == "":
            chunk = limit if limit and limit > 0 else 1
            return [text[i:i + chunk] for i in range(0, len(text), chunk)]

        if limit is None:
            return text.split(delimiter)
        if limit > 0:
            return text.split(delimiter, limit - 1)
        if limit < 0:
            return text.split(delimiter)[:limit]
        return text.split(delimiter, 0)


class FormatFilter(BaseFilter):
    """
    Format a string with printf-style placeholders.

    Usage: {{ "I like %s and %s."|format(foo, "bar") }}
    """
    name = "format"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        try:
            return coerce_string(value) % tuple(args)
        except (TypeError, ValueError, OverflowError) as e:
            return self.degrade(str(e), value)


class ConvertEncodingFilter(BaseFilter):
    """
    Convert text between character sets.

    Usage: {{ data|convert_encoding("iso-8859-1", "utf-8") }}

    Params:
        - to (str): Target charset
        - from (str): Charset of byte input (default: "utf-8")

    Bytes are decoded with `from`. The text is then restricted to what `to`
    can represent, unknown characters becoming "?".
    """
    name = "convert_encoding"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if not args:
            return self.degrade("missing target charset", value)

        to_charset = coerce_string(args[0])
        from_charset = coerce_string(args[1]) if len(args) > 1 else 'utf-8'

        try:
            if isinstance(value, (bytes, bytearray)):
                text = bytes(value).decode(from_charset, errors='replace')
            else:
                text = coerce_string(value)
            return text.encode(to_charset, errors='replace').decode(to_charset)
        except (LookupError, UnicodeError) as e:
            return self.degrade(str(e), value)


class JsonEncodeFilter(BaseFilter):
    """
    Encode a value as compact JSON.

    Usage: {{ row|json_encode }}
    """
    name = "json_encode"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        try:
            return json.dumps(value, separators=(',', ':'), default=str)
        except (TypeError, ValueError) as e:
            return self.degrade(str(e), value)


class DefaultFilter(BaseFilter):
    """
    Provide a default value if the input is empty.

    Usage: {{ value|default("N/A") }}

    Params:
        - default_value: Value to use if input is empty (default: None)

    None, values rendering as "" and empty collections count as empty.
    """
    name = "default"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        default = args[0] if args else None

        if is_iterable(value):
            is_empty = len(value) == 0
        else:
            is_empty = coerce_string(value) == ""

        return default if is_empty else value
