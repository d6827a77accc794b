"""
=============================================================================
SESSION BACKENDS
=============================================================================

A backend is the storage a Session reads from and writes through to. The
Session never owns persistence; it holds a backend and calls:

    ┌─────────────────────────────────────────────────────────────────────┐
    │   open(name, session_id)   → id     bind (create id/store if needed)│
    │   read(session_id)         → dict   load stored items               │
    │   write(session_id, data)           replace stored items            │
    │   regenerate(session_id)   → new id move items to a fresh id        │
    │   destroy(session_id, purge)        end it; purge drops the data    │
    └─────────────────────────────────────────────────────────────────────┘

Production stores (files, Redis, a database) implement the same five
methods. MemorySessionBackend keeps everything in a dict and is what a
Session uses when no backend is given.

=============================================================================
"""

import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict


logger = logging.getLogger(__name__)


class SessionBackendError(Exception):
    """Raised when a backend cannot open a session store."""


def generate_id() -> str:
    """New random session id (32 lowercase hex chars)."""
    return uuid.uuid4().hex


class SessionBackend(ABC):
    """Abstract session storage."""

    @abstractmethod
    def open(self, name: str, session_id: str = "") -> str:
        """
        Bind to the store for session_id.

        Args:
            name: Session name
            session_id: Requested id; empty means "create one"

        Returns:
            The id the store is bound to

        Raises:
            SessionBackendError: If the store can't be opened
        """
        pass

    @abstractmethod
    def read(self, session_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def write(self, session_id: str, data: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    def regenerate(self, session_id: str) -> str:
        """Move the stored items to a new id and return it."""
        pass

    @abstractmethod
    def destroy(self, session_id: str, purge: bool = False) -> None:
        pass


class MemorySessionBackend(SessionBackend):
    """
    Process-local backend.

    Stores live in a dict keyed by session id, so two Session objects
    sharing one MemorySessionBackend see each other's data when they use
    the same id. Nothing survives the process.
    """

    def __init__(self):
        self._stores: Dict[str, Dict[str, Any]] = {}

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._stores

    def open(self, name: str, session_id: str = "") -> str:
        if not session_id:
            session_id = self._new_id()
        self._stores.setdefault(session_id, {})
        logger.debug(f"Opened session {name}={session_id}")
        return session_id

    def read(self, session_id: str) -> Dict[str, Any]:
        return dict(self._stores.get(session_id, {}))

    def write(self, session_id: str, data: Dict[str, Any]) -> None:
        self._stores[session_id] = dict(data)

    def regenerate(self, session_id: str) -> str:
        new_id = self._new_id(exclude=session_id)
        self._stores[new_id] = self._stores.pop(session_id, {})
        logger.debug(f"Regenerated session {session_id} -> {new_id}")
        return new_id

    def destroy(self, session_id: str, purge: bool = False) -> None:
        if purge:
            self._stores.pop(session_id, None)
        logger.debug(f"Destroyed session {session_id} (purge={purge})")

    def _new_id(self, exclude: str = "") -> str:
        session_id = generate_id()
        while session_id in self._stores or session_id == exclude:
            session_id = generate_id()
        return session_id
