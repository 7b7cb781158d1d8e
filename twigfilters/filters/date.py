"""
Date filters.

Provides date/time formatting for values stored in the database's fixed
representations:
- date: "YYYY-MM-DD"
- time: "HH:MM:SS"
- dateTime: "YYYY-MM-DD HH:MM:SS"
- date_modify: shift a date by a relative amount ("+1 day")

Output patterns use human-friendly tokens (yyyy, MM, dd, hh, mm, ss) that
are translated into strftime directives before formatting.
"""

import re
from datetime import date, datetime, time
from typing import Any, Callable, Dict, List, Optional, Tuple

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from twigfilters.filters.base import BaseFilter
from twigfilters.values import coerce_string


FILTER_DATE_DEFAULT_PATTERN = 'yyyy-MM-dd'
FILTER_DATETIME_DEFAULT_PATTERN = 'yyyy-MM-dd hh:mm:ss'
FILTER_TIME_DEFAULT_PATTERN = 'hh:mm:ss'

# Fixed external representations
DATE_FORMAT = '%Y-%m-%d'
TIME_FORMAT = '%H:%M:%S'
DATETIME_FORMAT = '%Y-%m-%d %H:%M:%S'

_DATE_RE = re.compile(r'\d{4}-\d{2}-\d{2}')
_TIME_RE = re.compile(r'\d{2}:\d{2}:\d{2}')
_DATETIME_RE = re.compile(r'\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}')

# Pattern tokens (our pattern -> strftime). Order matters: within each field
# the longest token comes first so "yyyy" is consumed before "yy" can match.
DATE_PATTERN_TOKENS: Tuple[Tuple[str, str], ...] = (
    # Year
    ('yyyy', '%Y'),   # 2023
    ('yyy', '0%y'),   # 023
    ('yy', '%y'),     # 23

    # Month
    ('MM', '%m'),     # 01-12
    ('M', '%-m'),     # 1-12

    # Day
    ('dd', '%d'),     # 01-31
    ('d', '%-d'),     # 1-31

    # Hour, 12h clock
    ('hh', '%I'),     # 01-12
    ('h', '%-I'),     # 1-12

    # Hour, 24h clock
    ('HH', '%H'),     # 00-23
    ('H', '%H'),      # 00-23, unpadded form not offered

    # Minute
    ('mm', '%M'),     # 00-59
    ('m', '%-M'),     # 0-59

    # Second
    ('ss', '%S'),     # 00-59
    ('s', '%-S'),     # 0-59
)

_DIRECTIVE_RE = re.compile(r'%(-?)(.)', re.DOTALL)


def translate_pattern(pattern: str) -> str:
    """
    Translate a date pattern into a strftime format string.

    Tokens are substituted in table order. Text produced by a substitution
    is sealed off, so a shorter token applied later never matches inside it
    (e.g. the "d" of "%d"). Unrecognized text passes through, with literal
    "%" escaped.

    Examples:
        translate_pattern("yyyy/MM/dd")  -> "%Y/%m/%d"
        translate_pattern("at hh:mm")    -> "at %I:%M"
    """
    # (text, translated) segments
    segments: List[Tuple[str, bool]] = [(pattern, False)]

    for token, directive in DATE_PATTERN_TOKENS:
        next_segments: List[Tuple[str, bool]] = []

        for text, translated in segments:
            if translated or token not in text:
                next_segments.append((text, translated))
                continue

            parts = text.split(token)
            for i, part in enumerate(parts):
                if i > 0:
                    next_segments.append((directive, True))
                if part:
                    next_segments.append((part, False))

        segments = next_segments

    return ''.join(
        text if translated else text.replace('%', '%%')
        for text, translated in segments
    )


def _render(dt: datetime, fmt: str) -> str:
    """strftime with portable support for unpadded ("%-x") directives."""
    def replace(match):
        unpadded, code = match.group(1), match.group(2)
        if code == '%':
            return '%%'
        if unpadded:
            return str(int(dt.strftime('%' + code)))
        if code == 'Y':
            # Some platforms drop the padding of years before 1000
            return f"{dt.year:04d}"
        return match.group(0)

    return dt.strftime(_DIRECTIVE_RE.sub(replace, fmt))


def format_instant(dt: datetime, pattern: str) -> str:
    """Format a datetime with a date pattern."""
    return _render(dt, translate_pattern(pattern))


def parse_instant(text: str, pattern: str) -> datetime:
    """
    Parse text written with a date pattern.

    Raises:
        ValueError: If the text does not match the pattern
    """
    # strptime reads unpadded numbers with the padded directives
    fmt = _DIRECTIVE_RE.sub(lambda m: '%' + m.group(2), translate_pattern(pattern))
    return datetime.strptime(text, fmt)


def _parse_fixed(value: str, regex, fmt: str) -> datetime:
    if not regex.fullmatch(value):
        raise ValueError(f"'{value}' does not match {fmt}")
    return datetime.strptime(value, fmt)


def parse_date(value: str) -> datetime:
    """Parse a "YYYY-MM-DD" string."""
    return _parse_fixed(value, _DATE_RE, DATE_FORMAT)


def parse_time(value: str) -> datetime:
    """Parse a "HH:MM:SS" string. The date part is 1900-01-01."""
    return _parse_fixed(value, _TIME_RE, TIME_FORMAT)


def parse_datetime(value: str) -> datetime:
    """Parse a "YYYY-MM-DD HH:MM:SS" string."""
    return _parse_fixed(value, _DATETIME_RE, DATETIME_FORMAT)


def _as_datetime(value: Any) -> Optional[datetime]:
    """Native date/time objects are accepted as-is."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if isinstance(value, time):
        return datetime.combine(date(1900, 1, 1), value)
    return None


class _FixedRepresentationFilter(BaseFilter):
    """
    Shared logic of date, dateTime and time.

    The subject is parsed with `parser`; the optional first argument is a
    pattern overriding `default_pattern`. The output is prefixed with a
    newline and a space.
    """

    default_pattern: str = ""
    parser: Callable[[str], datetime] = None

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        dt = _as_datetime(value)

        if dt is None:
            try:
                dt = self.parser(coerce_string(value))
            except ValueError:
                return self.degrade("unparseable value", value)

        pattern = self.default_pattern
        if args and args[0] is not None:
            pattern = coerce_string(args[0])

        return f"\n {format_instant(dt, pattern)}"


class DateFilter(_FixedRepresentationFilter):
    """
    Format a "YYYY-MM-DD" date.

    Usage: {{ invoice.issued_on|date }}
           {{ invoice.issued_on|date("dd/MM/yyyy") }}
    """
    name = "date"
    default_pattern = FILTER_DATE_DEFAULT_PATTERN
    parser = staticmethod(parse_date)


class DateTimeFilter(_FixedRepresentationFilter):
    """
    Format a "YYYY-MM-DD HH:MM:SS" date-time.

    Usage: {{ order.created_at|dateTime("dd-MM-yyyy hh:mm") }}
    """
    name = "dateTime"
    default_pattern = FILTER_DATETIME_DEFAULT_PATTERN
    parser = staticmethod(parse_datetime)


class TimeFilter(_FixedRepresentationFilter):
    """
    Format a "HH:MM:SS" time.

    Usage: {{ shift.starts_at|time("HH:mm") }}
    """
    name = "time"
    default_pattern = FILTER_TIME_DEFAULT_PATTERN
    parser = staticmethod(parse_time)


# Relative modifier units -> relativedelta keyword
_MODIFIER_UNITS = {
    'year': 'years',
    'month': 'months',
    'week': 'weeks',
    'day': 'days',
    'hour': 'hours',
    'min': 'minutes',
    'minute': 'minutes',
    'sec': 'seconds',
    'second': 'seconds',
}

_MODIFIER_RE = re.compile(
    r'([+-]?\s*\d+)\s*(years?|months?|weeks?|days?|hours?|minutes?|mins?|seconds?|secs?)\b',
    re.IGNORECASE,
)


def parse_modifier(modifier: str) -> relativedelta:
    """
    Parse a relative date modifier.

    Examples:
        "+1 day"               -> relativedelta(days=+1)
        "-2 months +3 hours"   -> relativedelta(months=-2, hours=+3)

    Raises:
        ValueError: If the modifier is empty or contains anything else
    """
    if not modifier.strip():
        raise ValueError("Empty modifier")

    leftover = _MODIFIER_RE.sub('', modifier)
    if leftover.strip():
        raise ValueError(f"Cannot parse modifier '{modifier}'")

    kwargs: Dict[str, int] = {}
    for amount, unit in _MODIFIER_RE.findall(modifier):
        unit = unit.lower()
        if unit.endswith('s') and unit[:-1] in _MODIFIER_UNITS:
            unit = unit[:-1]
        key = _MODIFIER_UNITS[unit]
        kwargs[key] = kwargs.get(key, 0) + int(re.sub(r'\s', '', amount))

    return relativedelta(**kwargs)


class DateModifyFilter(BaseFilter):
    """
    Shift a date by a relative modifier.

    Usage: {{ invoice.due_on|date_modify("+30 days") }}
           {{ meeting.starts_at|date_modify("-1 hour") }}

    The result keeps the subject's representation: a "YYYY-MM-DD" subject
    gives a "YYYY-MM-DD" result, a datetime object gives a datetime object.
    Other date strings are read with dateutil and returned as
    "YYYY-MM-DD HH:MM:SS".
    """
    name = "date_modify"

    def filter(self, ctx: Dict[str, Any], value: Any, *args: Any) -> Any:
        if not args:
            return self.degrade("missing modifier", value)

        try:
            delta = parse_modifier(coerce_string(args[0]))
        except (ValueError, OverflowError):
            return self.degrade("unparseable modifier", args[0])

        native = _as_datetime(value)
        if native is not None:
            try:
                shifted = native + delta
            except (ValueError, OverflowError):
                return self.degrade("date out of range", value)
            if isinstance(value, datetime):
                return shifted
            if isinstance(value, date):
                return shifted.date()
            return shifted.time()

        text = coerce_string(value).strip()
        if not text:
            return self.degrade("empty value", value)

        for regex, fmt in ((_DATETIME_RE, DATETIME_FORMAT), (_DATE_RE, DATE_FORMAT), (_TIME_RE, TIME_FORMAT)):
            if regex.fullmatch(text):
                try:
                    dt = _parse_fixed(text, regex, fmt)
                except ValueError:
                    return self.degrade("invalid date", value)
                try:
                    return _render(dt + delta, fmt)
                except (ValueError, OverflowError):
                    return self.degrade("date out of range", value)

        try:
            dt = date_parser.parse(text)
        except (ValueError, OverflowError):
            return self.degrade("unparseable value", value)

        try:
            return _render(dt + delta, DATETIME_FORMAT)
        except (ValueError, OverflowError):
            return self.degrade("date out of range", value)
