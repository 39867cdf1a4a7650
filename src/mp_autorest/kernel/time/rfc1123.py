"""Kernel time – RFC 1123 timestamp codec.

Wire format::

    Mon, 02 Jan 2006 15:04:05 MST

Day and month names are always English, independent of the process locale.
A zone abbreviation that is not UTC/GMT is preserved verbatim and treated
as a zero offset; numeric zones (``+0100``) keep their offset.
"""
from __future__ import annotations

import dataclasses
import json
import re
from datetime import UTC, datetime, timedelta, timezone, tzinfo

RFC1123 = "rfc1123"
RFC3339 = "rfc3339"

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_UTC_NAMES = frozenset({"UTC", "GMT", "UT", "Z"})

_RFC1123_RE = re.compile(
    r"^(?:Mon|Tue|Wed|Thu|Fri|Sat|Sun), "
    r"(?P<day>\d{2}) (?P<month>[A-Z][a-z]{2}) (?P<year>\d{4}) "
    r"(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2}) "
    r"(?P<zone>[A-Za-z]{1,5}|[+-]\d{4})$"
)


def _parse_zone(token: str) -> tzinfo:
    if token in _UTC_NAMES:
        return UTC
    if token[0] in "+-":
        sign = -1 if token[0] == "-" else 1
        offset = timedelta(hours=int(token[1:3]), minutes=int(token[3:5]))
        return timezone(sign * offset)
    return timezone(timedelta(0), token)


def _format_zone(value: datetime) -> str:
    name = value.tzname() or ""
    if name.isalpha():
        return name
    offset = value.utcoffset() or timedelta(0)
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{sign}{minutes // 60:02d}{minutes % 60:02d}"


def format_rfc1123(value: datetime) -> str:
    """Render *value* in RFC 1123 form; naive datetimes are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (
        f"{_DAYS[value.weekday()]}, {value.day:02d} {_MONTHS[value.month - 1]} "
        f"{value.year:04d} {value:%H:%M:%S} {_format_zone(value)}"
    )


def parse_time(layout: str, value: str) -> datetime:
    """Parse *value* according to *layout* (``RFC1123`` or ``RFC3339``).

    Raises ``ValueError`` for anything that does not match the layout or
    names an out-of-range date.
    """
    if layout == RFC1123:
        match = _RFC1123_RE.match(value)
        if match is None or match["month"] not in _MONTHS:
            raise ValueError(f"cannot parse {value!r} as an RFC 1123 timestamp")
        return datetime(
            int(match["year"]),
            _MONTHS.index(match["month"]) + 1,
            int(match["day"]),
            int(match["hour"]),
            int(match["minute"]),
            int(match["second"]),
            tzinfo=_parse_zone(match["zone"]),
        )
    if layout == RFC3339:
        parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            raise ValueError(f"RFC 3339 timestamp {value!r} has no zone offset")
        return parsed
    raise ValueError(f"unknown time layout {layout!r}")


@dataclasses.dataclass(frozen=True)
class TimeRFC1123:
    """A ``datetime`` that marshals to and from the RFC 1123 wire format.

    An instance without a value is invalid: marshalling it raises
    ``ValueError`` and ``str()`` renders it as an empty string.
    """

    time: datetime | None = None

    def to_datetime(self) -> datetime | None:
        return self.time

    def marshal_text(self) -> bytes:
        if self.time is None:
            raise ValueError("TimeRFC1123 holds no time to marshal")
        return format_rfc1123(self.time).encode("ascii")

    @classmethod
    def unmarshal_text(cls, data: bytes | str) -> TimeRFC1123:
        text = data.decode("ascii") if isinstance(data, bytes) else data
        return cls(parse_time(RFC1123, text))

    def marshal_binary(self) -> bytes:
        return self.marshal_text()

    @classmethod
    def unmarshal_binary(cls, data: bytes) -> TimeRFC1123:
        return cls.unmarshal_text(data)

    def marshal_json(self) -> str:
        return json.dumps(self.marshal_text().decode("ascii"))

    @classmethod
    def unmarshal_json(cls, data: bytes | str) -> TimeRFC1123:
        value = json.loads(data)
        if not isinstance(value, str):
            raise ValueError(f"expected a JSON string for an RFC 1123 timestamp, got {value!r}")
        return cls.unmarshal_text(value)

    def __str__(self) -> str:
        try:
            return self.marshal_text().decode("ascii")
        except ValueError:
            return ""


__all__ = ["RFC1123", "RFC3339", "TimeRFC1123", "format_rfc1123", "parse_time"]
