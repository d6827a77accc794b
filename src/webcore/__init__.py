"""
=============================================================================
WEBCORE - Response and Session Layer for Web Frameworks
=============================================================================

Two small, independent components a request-handling framework builds on:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   ResponseBuilder                    Session                         │
    │   ───────────────                    ───────                         │
    │   status, headers, cookies, body     key/value items bound to an id  │
    │   send() → HttpSink → reset()        start / regenerate / destroy    │
    │                                      write-through to a backend      │
    │            │                                   │                     │
    │            ▼                                   ▼                     │
    │   HttpSink (transport)               SessionBackend (storage)        │
    │   BufferedSink, StreamSink           MemorySessionBackend            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Neither touches process-wide state: the transport and the storage are
passed in, so both can be swapped (and tested) freely.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    webcore/
    ├── __init__.py          # This file - package exports
    ├── config.py            # WebConfig dataclass
    ├── logs.py              # configure_logging()
    ├── http/
    │   ├── response.py      # ResponseBuilder
    │   ├── sink.py          # HttpSink, BufferedSink, StreamSink
    │   ├── cookies.py       # Cookie records and Set-Cookie rendering
    │   └── status_codes.py  # HTTPStatus enum
    └── session/
        ├── session.py       # Session
        └── backend.py       # SessionBackend, MemorySessionBackend

=============================================================================
QUICK START
=============================================================================

    from webcore import ResponseBuilder, Session, StreamSink

    session = Session()
    session.start()
    session.set("user.id", 42)

    response = ResponseBuilder(StreamSink(conn.makefile("wb")))
    response.set_content_type("text/html")
    response.set_content("<h1>Welcome back</h1>")
    response.set_cookie(session.cookie())
    response.send()

=============================================================================
"""

__version__ = "1.0.0"
__author__ = "webcore contributors"

from .config import WebConfig
from .logs import configure_logging
from .http import (
    ResponseBuilder,
    Cookie,
    HttpSink,
    BufferedSink,
    StreamSink,
    HTTPStatus,
)
from .session import (
    Session,
    SessionBackend,
    SessionBackendError,
    MemorySessionBackend,
)

__all__ = [
    # Config
    "WebConfig",
    "configure_logging",

    # Responses
    "ResponseBuilder",
    "Cookie",
    "HttpSink",
    "BufferedSink",
    "StreamSink",
    "HTTPStatus",

    # Sessions
    "Session",
    "SessionBackend",
    "SessionBackendError",
    "MemorySessionBackend",
]
