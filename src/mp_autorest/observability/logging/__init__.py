"""Observability – structured logging helpers."""
from mp_autorest.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from mp_autorest.observability.logging.factory import JsonLoggerFactory
from mp_autorest.observability.logging.processors import RedactionProcessor, get_logger

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "RedactionProcessor",
    "SensitiveFieldsFilter",
    "get_logger",
]
