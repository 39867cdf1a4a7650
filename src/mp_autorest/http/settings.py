"""HTTP pipeline – client settings.

Loaded from ``AUTOREST_*`` environment variables through
:class:`~mp_autorest.config.EnvSettingsLoader`::

    AUTOREST_POLLING_DELAY=5
    AUTOREST_POLLING_MODE=duration
    AUTOREST_POLLING_CODES=202,201
"""
from __future__ import annotations

import dataclasses
import enum
from typing import ClassVar

from mp_autorest.config import InvalidSettingValueError, Settings
from mp_autorest.http.constants import (
    DEFAULT_POLLING_ATTEMPTS,
    DEFAULT_POLLING_CODES,
    DEFAULT_POLLING_DELAY,
    DEFAULT_POLLING_DURATION,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_BACKOFF,
)


class PollingMode(str, enum.Enum):
    """Which budget bounds :meth:`Client.poll_as_needed`."""

    ATTEMPTS = "attempts"
    DURATION = "duration"


@dataclasses.dataclass(frozen=True)
class ClientSettings(Settings):
    _prefix: ClassVar[str] = "AUTOREST"

    polling_delay: float = DEFAULT_POLLING_DELAY
    polling_duration: float = DEFAULT_POLLING_DURATION
    polling_attempts: int = DEFAULT_POLLING_ATTEMPTS
    polling_mode: str = PollingMode.ATTEMPTS.value
    polling_codes: list[int] = dataclasses.field(default_factory=lambda: list(DEFAULT_POLLING_CODES))
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
    retry_backoff: float = DEFAULT_RETRY_BACKOFF
    user_agent: str = "mp-autorest/0.1.0"

    @property
    def mode(self) -> PollingMode:
        return PollingMode(self.polling_mode.lower())

    def _validate(self) -> None:
        for name in ("polling_delay", "polling_duration", "retry_backoff"):
            if getattr(self, name) < 0:
                raise InvalidSettingValueError(name, getattr(self, name), "must be non-negative")
        for name in ("polling_attempts", "retry_attempts"):
            if getattr(self, name) < 1:
                raise InvalidSettingValueError(name, getattr(self, name), "must be at least 1")
        if self.polling_mode.lower() not in {mode.value for mode in PollingMode}:
            raise InvalidSettingValueError(
                "polling_mode", self.polling_mode, "expected 'attempts' or 'duration'"
            )
        if not self.polling_codes:
            raise InvalidSettingValueError("polling_codes", self.polling_codes, "must not be empty")


__all__ = ["ClientSettings", "PollingMode"]
