"""
Session handling: the Session facade and the backends it stores through.
"""

from .backend import (
    SessionBackend,
    SessionBackendError,
    MemorySessionBackend,
    generate_id,
)
from .session import Session

__all__ = [
    "Session",
    "SessionBackend",
    "SessionBackendError",
    "MemorySessionBackend",
    "generate_id",
]
