"""Conversion of OFX data element text into typed values.

All converters take the trimmed, unescaped text of a data element and either
return the converted value or raise `ValueError`.  The caller decides what a
failure means; during parsing it leaves the field unset.
"""

from typing import Callable, Optional, Type, TypeVar
import datetime
import decimal
import enum
import html
import re

from beancount.core.number import D
from beancount.core.number import Decimal
from dateutil import tz

_OFX_TIME_RE = re.compile(
    r'^(\d{4})(\d{2})(\d{2})'
    r'(?:(\d{2})(\d{2})(?:(\d{2})(?:\.(\d{1,6})\d*)?)?)?'
    r'\s*(?:\[\s*([-+]?\d+(?:\.\d+)?)?\s*(?::\s*([^\]]*?))?\s*\])?\s*$')

_COMMA_GROUPED_RE = re.compile(r'^[-+]?\d{1,3}(?:,\d{3})*\.\d*$')
_PERIOD_GROUPED_RE = re.compile(r'^[-+]?\d{1,3}(?:\.\d{3})*,\d*$')


def clean_text(raw: str) -> str:
    """Trims surrounding whitespace and expands character references."""
    return html.unescape(raw.strip())


# Derived from parse_ofx_time in beancount/ingest/importers/ofx.py
# Copyright (C) 2016  Martin Blais
# GNU GPLv2
def parse_ofx_time(date_str: str) -> datetime.datetime:
    """Parse an OFX time string and return a datetime object.

    The general form is `YYYYMMDDHHMMSS.XXX[gmt offset:tz name]`; everything
    after the date is optional.  A missing time means midnight, and a missing
    zone means GMT.

    Args:
      date_str: A string, the date to be parsed.
    Returns:
      A timezone-aware datetime.datetime instance.
    Raises:
      ValueError: if `date_str` is not an OFX date.
    """
    m = _OFX_TIME_RE.match(date_str)
    if m is None:
        raise ValueError('Invalid OFX date: %r' % date_str)
    (year, month, day, hour, minute, second, fraction, offset,
     zone_name) = m.groups()
    if offset is None:
        tzinfo = tz.UTC  # type: datetime.tzinfo
    else:
        seconds = int(round(float(offset) * 3600))
        if abs(seconds) >= 86400:
            raise ValueError('Invalid OFX time zone offset: %r' % date_str)
        if seconds == 0 and not zone_name:
            tzinfo = tz.UTC
        else:
            tzinfo = tz.tzoffset(zone_name or None, seconds)
    return datetime.datetime(
        int(year),
        int(month),
        int(day),
        int(hour or 0),
        int(minute or 0),
        int(second or 0),
        int((fraction or '0').ljust(6, '0')),
        tzinfo=tzinfo)


def parse_decimal(value: str) -> Decimal:
    """Parses an OFX amount.

    Some institutions use a comma as the decimal separator; a comma is taken
    as such when the text contains no period.  Text containing both is only
    accepted with well-formed thousands grouping, either `1,234.50` or
    `1.234,50`.
    """
    text = value.strip()
    if not text:
        raise ValueError('Empty OFX amount')
    if ',' in text and '.' in text:
        if _COMMA_GROUPED_RE.match(text) is not None:
            text = text.replace(',', '')
        elif _PERIOD_GROUPED_RE.match(text) is not None:
            text = text.replace('.', '').replace(',', '.')
        else:
            raise ValueError('Invalid OFX amount: %r' % value)
    elif ',' in text:
        if text.count(',') > 1:
            raise ValueError('Invalid OFX amount: %r' % value)
        text = text.replace(',', '.')
    try:
        number = D(text)
    except (ValueError, decimal.InvalidOperation):
        raise ValueError('Invalid OFX amount: %r' % value)
    if not number.is_finite():
        raise ValueError('Invalid OFX amount: %r' % value)
    return number


def parse_int(value: str) -> int:
    if re.match(r'^[-+]?\d+$', value) is None:
        raise ValueError('Invalid OFX integer: %r' % value)
    return int(value)


E = TypeVar('E', bound=enum.Enum)


def enum_converter(enum_type: Type[E]) -> Callable[[str], E]:
    """Returns a converter into `enum_type`.

    Matching is exact and case-sensitive; any other text converts to the
    `UNKNOWN` member.
    """

    def convert(value: str) -> E:
        member = enum_type.__members__.get(value)
        if member is None:
            return enum_type['UNKNOWN']
        return member

    convert.__name__ = 'parse_%s' % enum_type.__name__
    return convert


def truncate(value: str, max_length: Optional[int]) -> str:
    if max_length is None or len(value) <= max_length:
        return value
    return value[:max_length]
