"""
=============================================================================
HTTP MODULE
=============================================================================

Response-side HTTP components.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ RESPONSE (response.py)                                              │
    │ ─────────────────────────────────────────────────────────────────── │
    │ ResponseBuilder: status, headers, cookies, body → send() → reset() │
    └─────────────────────────────────────────────────────────────────────┘
                                    │ emits into
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │ SINKS (sink.py)                                                     │
    │ ─────────────────────────────────────────────────────────────────── │
    │ HttpSink contract, BufferedSink (memory), StreamSink (binary I/O)  │
    └─────────────────────────────────────────────────────────────────────┘

    cookies.py       Cookie records, default merge, Set-Cookie rendering
    status_codes.py  HTTPStatus enum and reason phrases

=============================================================================
"""

from .cookies import Cookie, make_cookie, format_http_date
from .response import ResponseBuilder
from .sink import HttpSink, BufferedSink, StreamSink
from .status_codes import HTTPStatus, reason_phrase

__all__ = [
    # Response building
    "ResponseBuilder",

    # Cookies
    "Cookie",
    "make_cookie",
    "format_http_date",

    # Transports
    "HttpSink",
    "BufferedSink",
    "StreamSink",

    # Status codes
    "HTTPStatus",
    "reason_phrase",
]
