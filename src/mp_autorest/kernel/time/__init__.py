"""Kernel time – Clock port and the RFC 1123 timestamp codec."""
from mp_autorest.kernel.time.clock import Clock, FrozenClock, SystemClock
from mp_autorest.kernel.time.rfc1123 import RFC1123, RFC3339, TimeRFC1123, format_rfc1123, parse_time

__all__ = [
    "Clock",
    "FrozenClock",
    "RFC1123",
    "RFC3339",
    "SystemClock",
    "TimeRFC1123",
    "format_rfc1123",
    "parse_time",
]
