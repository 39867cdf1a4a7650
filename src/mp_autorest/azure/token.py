"""Azure – persisted OAuth token.

On disk a token is a JSON object whose numeric lifetime fields are quoted
strings, exactly as the token endpoint emits them::

    {"access_token": "...", "expires_on": "1700000000", ...}

They are kept as strings here as well.
"""
from __future__ import annotations

import contextlib
import dataclasses
import json
import os
import tempfile
from datetime import UTC, datetime, timedelta

from mp_autorest.http.preparer import PrepareDecorator, with_bearer_authorization
from mp_autorest.kernel.errors import TokenLoadError, TokenSaveError
from mp_autorest.kernel.time import Clock, SystemClock
from mp_autorest.observability.logging import get_logger

logger = get_logger(__name__)

# Unparseable expires_on values count as already expired.
_EXPIRED_FALLBACK = -3600


@dataclasses.dataclass(frozen=True)
class Token:
    access_token: str = ""
    refresh_token: str = ""
    expires_in: str = ""
    expires_on: str = ""
    not_before: str = ""
    resource: str = ""
    token_type: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> Token:
        """Build a token from its wire form; unknown keys are ignored."""
        values: dict[str, str] = {}
        for field in dataclasses.fields(cls):
            value = data.get(field.name, "")
            if not isinstance(value, str):
                raise ValueError(f"field {field.name!r} must be a string, got {type(value).__name__}")
            values[field.name] = value
        return cls(**values)

    def to_dict(self) -> dict[str, str]:
        return dataclasses.asdict(self)

    def expires(self) -> datetime:
        """UTC instant named by ``expires_on`` (seconds since the epoch)."""
        try:
            return datetime.fromtimestamp(int(self.expires_on), UTC)
        except (ValueError, OverflowError, OSError):
            return datetime.fromtimestamp(_EXPIRED_FALLBACK, UTC)

    def will_expire_in(self, seconds: float, clock: Clock | None = None) -> bool:
        now = (clock or SystemClock()).now()
        return self.expires() <= now + timedelta(seconds=seconds)

    def is_expired(self, clock: Clock | None = None) -> bool:
        return self.will_expire_in(0, clock)

    def with_authorization(self) -> PrepareDecorator:
        return with_bearer_authorization(self.access_token)


def load_token(path: str | os.PathLike[str]) -> Token:
    """Read the token stored at *path*."""
    path = os.fspath(path)
    try:
        with open(path, "rb") as handle:
            contents = handle.read()
    except OSError as exc:
        raise TokenLoadError(f"failed to open file ({path}) while loading token: {exc}", path=path, cause=exc) from exc
    try:
        data = json.loads(contents)
        if not isinstance(data, dict):
            raise ValueError("token file must hold a JSON object")
        return Token.from_dict(data)
    except ValueError as exc:
        raise TokenLoadError(
            f"failed to decode contents of file ({path}) into Token representation: {exc}", path=path, cause=exc
        ) from exc


def save_token(path: str | os.PathLike[str], token: Token) -> None:
    """Write *token* to *path* atomically.

    The token goes to a temporary file in the target directory which is
    then renamed over *path*, so readers never see a partial file.
    """
    path = os.fspath(path)
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, mode=0o700, exist_ok=True)
    except OSError as exc:
        raise TokenSaveError(
            f"failed to create directory ({directory}) to store token in: {exc}", path=path, cause=exc
        ) from exc

    tmp_path: str | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=directory, prefix="token", delete=False
        ) as handle:
            tmp_path = handle.name
            json.dump(token.to_dict(), handle)
    except OSError as exc:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
        raise TokenSaveError(f"failed to write token to temp file: {exc}", path=path, cause=exc) from exc

    try:
        os.replace(tmp_path, path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            os.remove(tmp_path)
        raise TokenSaveError(
            f"failed to move temporary token to desired output location. src={tmp_path} dst={path}: {exc}",
            path=path,
            cause=exc,
        ) from exc
    logger.debug("azure.token.saved", path=path)


__all__ = ["Token", "load_token", "save_token"]
