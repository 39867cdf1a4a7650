"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DetailedError            (pipeline.py)
    │   ├── PreparationError
    │   ├── StatusCodeError
    │   ├── ResponseDecodeError
    │   ├── PollingError
    │   └── TransportError       (infrastructure.py)
    │       └── TransportTimeoutError
    └── TokenError               (infrastructure.py)
        ├── TokenLoadError
        └── TokenSaveError
"""

from mp_autorest.kernel.errors.base import BaseError
from mp_autorest.kernel.errors.infrastructure import (
    TokenError,
    TokenLoadError,
    TokenSaveError,
    TransportError,
    TransportTimeoutError,
)
from mp_autorest.kernel.errors.pipeline import (
    DetailedError,
    PollingError,
    PreparationError,
    ResponseDecodeError,
    StatusCodeError,
)

__all__ = [
    "BaseError",
    "DetailedError",
    "PollingError",
    "PreparationError",
    "ResponseDecodeError",
    "StatusCodeError",
    "TokenError",
    "TokenLoadError",
    "TokenSaveError",
    "TransportError",
    "TransportTimeoutError",
]
