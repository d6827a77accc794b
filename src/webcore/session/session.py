"""
=============================================================================
SESSION
=============================================================================

Key/value facade over a SessionBackend.

=============================================================================
STATE MACHINE
=============================================================================

                    start() ok
        ┌─────────────┐ ─────────────► ┌─────────────┐
        │ NOT STARTED │                │   STARTED   │◄──┐
        │   id = ""   │ ◄───────────── │  id = "..." │   │ regenerate_id()
        └─────────────┘   destroy()    └─────────────┘───┘ (new id, same items)

    NOT STARTED   get/set/has/remove work on the in-memory items only.
                  set_id()/set_name() take effect here.

    STARTED       items were loaded from the backend by start(); every
                  set()/remove() is written through to it.
                  set_id()/set_name() are ignored (logged).

=============================================================================
DESTROY
=============================================================================

    destroy()                 backend association dropped, stored data kept;
                              items already in memory stay readable

    destroy(remove_data=True) backend data AND in-memory items purged

=============================================================================
"""

import logging
from typing import Any, Dict, Optional

from ..config import WebConfig
from ..http.cookies import Cookie, make_cookie
from .backend import MemorySessionBackend, SessionBackend, SessionBackendError


logger = logging.getLogger(__name__)


class Session:
    """
    A session bound to a client identifier.

    Keys are plain strings. Dots carry no meaning: "foo.bar" is one key,
    unrelated to "foo".

        session = Session()
        session.start()
        session.set("user.id", 42)
        session.get("user.id")          → 42
        session.get("missing", "n/a")   → "n/a"
    """

    def __init__(
        self,
        backend: Optional[SessionBackend] = None,
        auto_start: bool = False,
        config: Optional[WebConfig] = None,
    ):
        """
        Initialize the session.

        Args:
            backend: Storage (defaults to a new MemorySessionBackend)
            auto_start: Call start() right away
            config: Session name and cookie defaults (defaults to WebConfig())
        """
        self.config = config or WebConfig()
        self.backend = backend if backend is not None else MemorySessionBackend()

        self._id = ""
        self._name = self.config.session_name
        self._started = False
        self._items: Dict[str, Any] = {}

        if auto_start:
            self.start()

    # =========================================================================
    # IDENTITY
    # =========================================================================

    def get_id(self) -> str:
        return self._id

    def set_id(self, session_id: str) -> None:
        """Set the id to use. Only effective before start()."""
        if self._started:
            logger.warning("Session already started, set_id() ignored")
            return
        self._id = session_id

    def get_name(self) -> str:
        return self._name

    def set_name(self, name: str) -> None:
        """Set the session name. Only effective before start()."""
        if self._started:
            logger.warning("Session already started, set_name() ignored")
            return
        self._name = name

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self) -> bool:
        """
        Bind to the backend and load the stored items.

        Creates an id when none was set. Calling start() on a started
        session does nothing and returns True.

        Returns:
            True on success, False if the backend could not be opened
        """
        if self._started:
            return True

        try:
            self._id = self.backend.open(self._name, self._id)
            self._items = self.backend.read(self._id)
        except SessionBackendError as e:
            logger.warning(f"Session start failed for {self._name}: {e}")
            return False

        self._started = True
        logger.debug(f"Session started: {self._name}={self._id}")
        return True

    def is_started(self) -> bool:
        return self._started

    def regenerate_id(self) -> bool:
        """
        Switch to a new session id, keeping all items.

        Returns:
            False if the session isn't started, True otherwise
        """
        if not self._started:
            return False

        old_id = self._id
        self._id = self.backend.regenerate(old_id)
        self.backend.write(self._id, self._items)
        logger.debug(f"Session id regenerated: {old_id} -> {self._id}")
        return True

    def destroy(self, remove_data: bool = False) -> bool:
        """
        End the session.

        Args:
            remove_data: Also purge the stored data and the in-memory items

        Returns:
            True
        """
        if remove_data:
            self._items = {}

        if self._started:
            self.backend.destroy(self._id, purge=remove_data)

        self._started = False
        self._id = ""
        return True

    # =========================================================================
    # ITEMS
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        return self._items.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._items[key] = value
        self._save()

    def has(self, key: str) -> bool:
        return key in self._items

    def remove(self, key: str) -> None:
        self._items.pop(key, None)
        self._save()

    def all(self) -> Dict[str, Any]:
        """Copy of all items."""
        return dict(self._items)

    # =========================================================================
    # COOKIE
    # =========================================================================

    def cookie(self, lifetime: int = 0) -> Cookie:
        """
        Cookie record carrying the session id, for ResponseBuilder.set_cookie().

        Args:
            lifetime: Relative expiry in seconds (0 = browser session)
        """
        return make_cookie(
            {"name": self._name, "value": self._id, "expire": lifetime},
            self.config.cookie_defaults(),
        )

    def _save(self) -> None:
        if self._started:
            self.backend.write(self._id, self._items)
