"""
=============================================================================
HTTP RESPONSE BUILDER
=============================================================================

Accumulates everything one outgoing response needs and emits it through an
HttpSink.

=============================================================================
LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   ResponseBuilder(sink)        status=200, nothing else set          │
    │          │                                                           │
    │          ▼                                                           │
    │   set_status_code / set_header / set_cookie / set_content ...        │
    │          │                                                           │
    │          ▼                                                           │
    │   send()                                                             │
    │     ├── send_headers()    status line + headers (insertion order)    │
    │     ├── send_cookies()    one Set-Cookie per stored record           │
    │     ├── send_content()    the body                                   │
    │     ├── sink.finish()     flush/terminate hook                       │
    │     └── reset()           back to the defaults above                 │
    │          │                                                           │
    │          └──────────► ready for the next response                    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Because send() resets the builder, a long-lived instance can serve one
response after another. Anything you want to keep (e.g. the status for an
access log) must be read BEFORE calling send().

=============================================================================
USAGE
=============================================================================

    response = ResponseBuilder(StreamSink(sock.makefile("wb")))
    response.set_status_code(200)
    response.set_content_type("text/html")
    response.set_content("<h1>Hello</h1>")
    response.set_cookie({"name": "hello", "value": "hi cookie", "expire": 60})
    response.set_header("Cache-Control", "max-age=0")
    response.send()

Setters return self, so the same thing can be chained:

    (ResponseBuilder(sink)
        .set_content_type("application/json")
        .set_content('{"ok": true}')
        .send())

=============================================================================
REDIRECTS
=============================================================================

A Location header on a response that still has the default 200 status is
sent as 302 Found. Any other explicit status (301, 303, 307, ...) is kept.

=============================================================================
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from ..config import WebConfig
from .cookies import Cookie, make_cookie
from .sink import HttpSink
from .status_codes import HTTPStatus


logger = logging.getLogger(__name__)


class ResponseBuilder:
    """
    Mutable HTTP response bound to a sink.

    State:
        status_code      int, default 200 (never validated)
        status_message   optional reason phrase override
        content          optional str body, replaced as a whole
        content_type     optional MIME type (mirrored into Content-Type)
        headers          ordered name → value, last write wins
        cookies          name → Cookie, one record per name
    """

    def __init__(
        self,
        sink: HttpSink,
        content: Optional[str] = None,
        code: int = HTTPStatus.OK,
        message: Optional[str] = None,
        config: Optional[WebConfig] = None,
    ):
        """
        Initialize the response.

        Args:
            sink: Transport the response is emitted into
            content: Initial body
            code: Initial status code
            message: Initial reason phrase override
            config: Charset and cookie defaults (defaults to WebConfig())
        """
        self.sink = sink
        self.config = config or WebConfig()

        self._headers: Dict[str, Optional[str]] = {}
        self._cookies: Dict[str, Cookie] = {}
        self._content_type: Optional[str] = None
        self._content = content
        self.set_status_code(code, message)

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def status_code(self) -> int:
        return self._code

    @property
    def status_message(self) -> Optional[str]:
        return self._message

    def set_status_code(self, code: int, message: Optional[str] = None) -> "ResponseBuilder":
        """
        Set the response status.

        Any integer is accepted; the sink falls back to "Unknown" for
        codes without a standard reason phrase.

        Args:
            code: Status code
            message: Reason phrase override (None = standard phrase)

        Returns:
            Self for method chaining
        """
        self._code = code
        self._message = message
        return self

    # =========================================================================
    # BODY
    # =========================================================================

    def get_content_type(self) -> Optional[str]:
        return self._content_type

    def set_content_type(self, content_type: str, charset: Optional[str] = None) -> "ResponseBuilder":
        """
        Set the response content type.

            set_content_type("application/javascript")
            → Content-Type: application/javascript; charset=UTF-8

        Args:
            content_type: MIME type
            charset: Charset (defaults to config.default_charset)

        Returns:
            Self for method chaining
        """
        if charset is None:
            charset = self.config.default_charset
        self._content_type = content_type
        self._headers["Content-Type"] = f"{content_type}; charset={charset}"
        return self

    def get_content(self) -> Optional[str]:
        return self._content

    def set_content(self, content: Optional[str] = None) -> "ResponseBuilder":
        """Replace the whole body (None clears it)."""
        self._content = content
        return self

    # =========================================================================
    # COOKIES
    # =========================================================================

    def get_cookies(self) -> Dict[str, Cookie]:
        return self._cookies

    def set_cookie(self, cookie: Union[Cookie, Mapping[str, Any]]) -> "ResponseBuilder":
        """
        Store a cookie record, replacing any cookie with the same name.

        The record is merged over the configured defaults, NOT over the
        previously stored cookie of that name:

            set_cookie({"name": "a", "value": "1", "secure": True})
            set_cookie({"name": "a", "value": "2"})
            → Cookie(name="a", value="2", secure=False, ...)

        Args:
            cookie: Cookie or mapping (name, value, expire, path, domain,
                    secure, http_only/httpOnly)

        Returns:
            Self for method chaining
        """
        record = make_cookie(cookie, self.config.cookie_defaults())
        self._cookies[record.name] = record
        return self

    # =========================================================================
    # HEADERS
    # =========================================================================

    def get_headers(self) -> Dict[str, Optional[str]]:
        return self._headers

    def set_header(self, name: Any, value: Optional[str] = None) -> "ResponseBuilder":
        """
        Set a response header.

        A None value is kept and sent as a bare header line ("Name").
        Non-string names are ignored without raising.

        Returns:
            Self for method chaining
        """
        if isinstance(name, str):
            self._headers[name] = value
        else:
            logger.debug(f"Ignoring header with non-string name: {name!r}")
        return self

    # =========================================================================
    # SENDING
    # =========================================================================

    def send(self) -> "ResponseBuilder":
        """
        Emit the response and reset the builder.

        Order: headers, cookies, body, sink.finish(), reset().

        Returns:
            Self (already reset)
        """
        try:
            self.send_headers()
            self.send_cookies()
            self.send_content()

            self.sink.finish()
        finally:
            # State never leaks into the next response, even on a failed write
            self.reset()
        return self

    def send_headers(self) -> "ResponseBuilder":
        """
        Write the status line and headers.

        Skipped entirely when the sink reports the headers as already sent.

        Returns:
            Self for method chaining
        """
        if self.sink.already_sent():
            logger.debug("Headers already sent, skipping")
            return self

        if self._has_location() and self._code == HTTPStatus.OK:
            self.set_status_code(HTTPStatus.FOUND)

        self.sink.write_status(self._code, self._message)

        for name, value in self._headers.items():
            self.sink.write_header(name, value)

        logger.debug(f"Sent status {self._code} with {len(self._headers)} headers")
        return self

    def send_cookies(self) -> "ResponseBuilder":
        """
        Write one Set-Cookie entry per stored cookie.

        Returns:
            Self for method chaining
        """
        for cookie in self._cookies.values():
            value = self.encrypt_value(cookie.value)
            if value != cookie.value:
                cookie = make_cookie({**cookie.to_dict(), "value": value})
            self.sink.write_cookie(cookie)
        return self

    def send_content(self) -> "ResponseBuilder":
        """
        Write the body, if there is one.

        Returns:
            Self for method chaining
        """
        if self._content is not None:
            self.sink.write_body(self._content)
        return self

    def encrypt_value(self, value: str) -> str:
        """
        Transform a cookie value right before it is sent.

        Passthrough here; subclasses can sign or encrypt cookie values.
        """
        return value

    def reset(self) -> None:
        """Restore the defaults: 200, no message, headers, cookies or body."""
        self._code = HTTPStatus.OK
        self._message = None
        self._headers = {}
        self._cookies = {}
        self._content = None
        self._content_type = None

    def _has_location(self) -> bool:
        return any(
            name.lower() == "location" and value is not None
            for name, value in self._headers.items()
        )
