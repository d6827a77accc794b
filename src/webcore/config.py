"""
=============================================================================
WEBCORE CONFIGURATION
=============================================================================

Centralized settings for responses and sessions.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Code                                                           │
    │      └── WebConfig(session_name="APPSESSID")                        │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── WEB_SESSION_NAME=APPSESSID  → WebConfig.from_env()         │
    │                                                                      │
    │   3. Defaults (this file)                                           │
    └─────────────────────────────────────────────────────────────────────┘

Both ResponseBuilder and Session take an optional config. Without one they
use WebConfig(), whose defaults give the plain cookie record defaults:

    expire=0, path="/", domain="", secure=False, http_only=True

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict


_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass
class WebConfig:
    """
    Configuration for responses and sessions.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    RESPONSE
    - default_charset, server_name

    COOKIES (defaults merged under every ResponseBuilder.set_cookie record)
    - cookie_path, cookie_domain, cookie_secure, cookie_http_only

    SESSION
    - session_name

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # RESPONSE
    # ─────────────────────────────────────────────────────────────────────

    default_charset: str = "UTF-8"
    """Charset appended by set_content_type() when none is given."""

    server_name: str = "webcore"
    """Value of the Server header written by StreamSink."""

    # ─────────────────────────────────────────────────────────────────────
    # COOKIES
    # ─────────────────────────────────────────────────────────────────────

    cookie_path: str = "/"
    cookie_domain: str = ""
    cookie_secure: bool = False
    """Only send cookies over HTTPS. Turn on behind TLS."""

    cookie_http_only: bool = True
    """Hide cookies from JavaScript (document.cookie)."""

    # ─────────────────────────────────────────────────────────────────────
    # SESSION
    # ─────────────────────────────────────────────────────────────────────

    session_name: str = "PYSESSID"
    """
    Name of the session, also used as the session cookie name.
    Can be changed per Session with set_name() before start().
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level for the "webcore" logger (DEBUG, INFO, WARNING, ...)."""

    @classmethod
    def from_env(cls) -> "WebConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        WEB_SESSION_NAME     Session name (default: PYSESSID)
        WEB_CHARSET          Default charset (default: UTF-8)
        WEB_COOKIE_PATH      Cookie path (default: /)
        WEB_COOKIE_DOMAIN    Cookie domain (default: empty)
        WEB_COOKIE_SECURE    1/true/yes/on to enable (default: off)
        WEB_COOKIE_HTTPONLY  1/true/yes/on to enable (default: on)
        WEB_LOG_LEVEL        Logging level (default: INFO)
        WEB_SERVER_NAME      Server header value, empty to omit (default: webcore)

        =====================================================================
        """
        return cls(
            session_name=os.getenv("WEB_SESSION_NAME", "PYSESSID"),
            default_charset=os.getenv("WEB_CHARSET", "UTF-8"),
            cookie_path=os.getenv("WEB_COOKIE_PATH", "/"),
            cookie_domain=os.getenv("WEB_COOKIE_DOMAIN", ""),
            cookie_secure=_env_bool("WEB_COOKIE_SECURE", False),
            cookie_http_only=_env_bool("WEB_COOKIE_HTTPONLY", True),
            log_level=os.getenv("WEB_LOG_LEVEL", "INFO"),
            server_name=os.getenv("WEB_SERVER_NAME", "webcore"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Raises:
            ValueError: On the first invalid setting
        """
        if not self.session_name:
            raise ValueError("session_name must not be empty")

        if not self.default_charset:
            raise ValueError("default_charset must not be empty")

        if not self.cookie_path.startswith("/"):
            raise ValueError(f"Invalid cookie_path: {self.cookie_path!r}. Must start with '/'.")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log_level: {self.log_level!r}")

    def cookie_defaults(self) -> Dict[str, Any]:
        """Field defaults merged under every cookie record."""
        return {
            "path": self.cookie_path,
            "domain": self.cookie_domain,
            "secure": self.cookie_secure,
            "http_only": self.cookie_http_only,
        }
