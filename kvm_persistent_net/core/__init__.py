# kvm_persistent_net/core/__init__.py
from .exceptions import (
    DeliveryError,
    DiscoveryError,
    ErrorKind,
    PersistNetError,
    RenderError,
    UsageError,
    VMStateError,
)
from .result import Result

__all__ = [
    "DeliveryError",
    "DiscoveryError",
    "ErrorKind",
    "PersistNetError",
    "RenderError",
    "Result",
    "UsageError",
    "VMStateError",
]
