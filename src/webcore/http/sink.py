"""
=============================================================================
HTTP SINKS
=============================================================================

A sink is the transport a ResponseBuilder emits into. The builder never
touches a socket itself; it only calls the five primitives below:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         HttpSink CONTRACT                           │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   write_status(code, message)    status line fields                 │
    │   write_header(name, value)      one header, last write wins        │
    │   write_cookie(cookie)           one Set-Cookie entry               │
    │   write_body(body)               the payload                        │
    │   already_sent()                 True once headers hit the wire     │
    │                                                                      │
    │   finish()                       optional flush/terminate hook      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Two implementations ship here:

    BufferedSink   Records everything in memory. Used by tests and by
                   callers that want to inspect a response before writing
                   it somewhere else (render() gives the raw bytes).

    StreamSink     Writes an HTTP/1.1 message to a binary stream, e.g. the
                   file object of an accepted socket (sock.makefile("wb")).

=============================================================================
HEADER LINES
=============================================================================

A header with a value is written as "Name: value". A header whose value is
None or empty is written BARE, as just "Name":

    X-Powered-By: webcore      ← write_header("X-Powered-By", "webcore")
    X-Debug                    ← write_header("X-Debug", None)

=============================================================================
"""

import logging
from abc import ABC, abstractmethod
from typing import BinaryIO, Dict, List, Optional, Tuple

from ..config import WebConfig
from .cookies import Cookie
from .status_codes import reason_phrase


logger = logging.getLogger(__name__)


class HttpSink(ABC):
    """
    Abstract transport for response emission.

    Header names are case-insensitive: writing "content-type" after
    "Content-Type" replaces the earlier value (and keeps its position).

    Implementations drop (with a warning) any header or cookie whose text
    holds CR/LF or can't be encoded as latin-1; see is_safe_header().
    """

    @abstractmethod
    def write_status(self, code: int, message: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def write_header(self, name: str, value: Optional[str] = None) -> None:
        pass

    @abstractmethod
    def write_cookie(self, cookie: Cookie) -> None:
        pass

    @abstractmethod
    def write_body(self, body: str) -> None:
        pass

    @abstractmethod
    def already_sent(self) -> bool:
        """True once status and headers can no longer be changed."""
        pass

    def finish(self) -> None:
        """
        Flush the response to the client and end it.

        Transports without such a hook keep this no-op.
        """


class _HeaderTable:
    """Ordered, case-insensitive header store (last write wins)."""

    def __init__(self):
        self._entries: Dict[str, Tuple[str, Optional[str]]] = {}

    def set(self, name: str, value: Optional[str]) -> None:
        # An existing key keeps its position, takes the new spelling and value
        self._entries[name.lower()] = (name, value)

    def get(self, name: str) -> Optional[str]:
        entry = self._entries.get(name.lower())
        return entry[1] if entry else None

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._entries

    def items(self) -> List[Tuple[str, Optional[str]]]:
        return list(self._entries.values())


def is_safe_header(*parts: Optional[str]) -> bool:
    """
    Check that header text can go on the wire as a single latin-1 line.

    CR or LF would end the line early and let the rest of the value
    pose as extra header lines (response splitting).
    """
    for part in parts:
        if part is None:
            continue
        if "\r" in part or "\n" in part:
            return False
        try:
            part.encode("latin-1")
        except UnicodeEncodeError:
            return False
    return True


def _accept_header(name: str, value: Optional[str]) -> bool:
    if is_safe_header(name, value):
        return True
    logger.warning(f"Header {name!r} dropped: CR/LF or non-latin-1 text")
    return False


def _accept_cookie(cookie: Cookie) -> bool:
    if is_safe_header(cookie.to_header_value()):
        return True
    logger.warning(f"Cookie {cookie.name!r} dropped: CR/LF or non-latin-1 text")
    return False


def _safe_message(message: Optional[str]) -> Optional[str]:
    if is_safe_header(message):
        return message
    logger.warning(f"Status message {message!r} replaced by the standard phrase")
    return None


def format_header_line(name: str, value: Optional[str]) -> str:
    """Render one header line (bare when the value is empty)."""
    if not value:
        return name
    return f"{name}: {value}"


def render_head(
    version: str,
    code: int,
    message: Optional[str],
    headers: List[Tuple[str, Optional[str]]],
    cookies: List[Cookie],
) -> bytes:
    """
    Serialize the status line, headers and Set-Cookie lines.

    The result ends with the empty separator line, ready for the body.
    """
    lines = [f"{version} {code} {message or reason_phrase(code)}"]
    for name, value in headers:
        lines.append(format_header_line(name, value))
    for cookie in cookies:
        lines.append(f"Set-Cookie: {cookie.to_header_value()}")
    lines.append("")
    return "\r\n".join(lines).encode("latin-1") + b"\r\n"


class BufferedSink(HttpSink):
    """
    In-memory sink.

    Everything written is kept in attributes so a test (or a caller that
    forwards the response elsewhere) can look at it afterwards:

        sink = BufferedSink()
        ResponseBuilder(sink).set_content("hi").send()

        sink.status_code   → 200
        sink.body          → "hi"
        sink.render()      → b"HTTP/1.1 200 OK\\r\\n...\\r\\n\\r\\nhi"
    """

    def __init__(self, version: str = "HTTP/1.1", charset: str = "utf-8"):
        self.version = version
        self.charset = charset
        self.status_code: Optional[int] = None
        self.status_message: Optional[str] = None
        self._headers = _HeaderTable()
        self.cookies: List[Cookie] = []
        self.body = ""
        self.finished = False
        self._sent = False

    @property
    def headers(self) -> Dict[str, Optional[str]]:
        """Headers as written, in order, keyed by their last spelling."""
        return dict(self._headers.items())

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        return self._headers.get(name)

    def has_header(self, name: str) -> bool:
        return name in self._headers

    @property
    def header_lines(self) -> List[str]:
        return [format_header_line(n, v) for n, v in self._headers.items()]

    def write_status(self, code: int, message: Optional[str] = None) -> None:
        self.status_code = code
        self.status_message = _safe_message(message)

    def write_header(self, name: str, value: Optional[str] = None) -> None:
        if _accept_header(name, value):
            self._headers.set(name, value)

    def write_cookie(self, cookie: Cookie) -> None:
        if _accept_cookie(cookie):
            self.cookies.append(cookie)

    def write_body(self, body: str) -> None:
        self.body += body

    def already_sent(self) -> bool:
        return self._sent

    def mark_sent(self) -> None:
        """Pretend the headers already went out (e.g. after an early flush)."""
        self._sent = True

    def finish(self) -> None:
        self.finished = True

    def render(self) -> bytes:
        """Serialize what has been written to an HTTP message."""
        head = render_head(
            self.version,
            self.status_code if self.status_code is not None else 200,
            self.status_message,
            self._headers.items(),
            self.cookies,
        )
        return head + self.body.encode(self.charset)


class StreamSink(HttpSink):
    """
    Sink writing an HTTP/1.1 message to a binary stream.

    =========================================================================
    WRITE ORDER
    =========================================================================

        write_status / write_header / write_cookie   → buffered
        first write_body() or finish()                → head flushed:

            HTTP/1.1 200 OK\\r\\n
            Content-Type: text/html; charset=UTF-8\\r\\n
            Content-Length: 5\\r\\n         ← added unless the caller set it
            Server: webcore\\r\\n
            Set-Cookie: a=1; Path=/; HttpOnly\\r\\n
            \\r\\n
            hello

    Once the head is flushed, already_sent() is True and further status,
    header and cookie writes are dropped with a warning.

    Content-Length is computed from the FIRST body write, so the builder's
    single whole-body write is what this sink is made for.

    =========================================================================
    """

    def __init__(
        self,
        stream: BinaryIO,
        version: str = "HTTP/1.1",
        charset: str = "utf-8",
        config: Optional[WebConfig] = None,
    ):
        """
        Args:
            stream: Writable binary stream
            version: HTTP version for the status line
            charset: Encoding of the body
            config: Supplies the Server header (config.server_name,
                    empty to leave it out)
        """
        self.stream = stream
        self.version = version
        self.server_name = (config or WebConfig()).server_name
        self.charset = charset
        self._code = 200
        self._message: Optional[str] = None
        self._headers = _HeaderTable()
        self._cookies: List[Cookie] = []
        self._sent = False

    def write_status(self, code: int, message: Optional[str] = None) -> None:
        if self._sent:
            logger.warning("Status %s dropped: headers already sent", code)
            return
        self._code = code
        self._message = _safe_message(message)

    def write_header(self, name: str, value: Optional[str] = None) -> None:
        if self._sent:
            logger.warning("Header %r dropped: headers already sent", name)
            return
        if _accept_header(name, value):
            self._headers.set(name, value)

    def write_cookie(self, cookie: Cookie) -> None:
        if self._sent:
            logger.warning("Cookie %r dropped: headers already sent", cookie.name)
            return
        if _accept_cookie(cookie):
            self._cookies.append(cookie)

    def write_body(self, body: str) -> None:
        payload = body.encode(self.charset)
        if not self._sent:
            self._flush_head(len(payload))
        self._write(payload)

    def already_sent(self) -> bool:
        return self._sent

    def finish(self) -> None:
        if not self._sent:
            self._flush_head(0)
        try:
            self.stream.flush()
        except (BrokenPipeError, ConnectionResetError, OSError) as e:
            logger.warning(f"Flush failed: {e}")

    def _flush_head(self, content_length: int) -> None:
        if "Content-Length" not in self._headers:
            self._headers.set("Content-Length", str(content_length))
        if self.server_name and "Server" not in self._headers:
            if _accept_header("Server", self.server_name):
                self._headers.set("Server", self.server_name)

        head = render_head(
            self.version, self._code, self._message,
            self._headers.items(), self._cookies,
        )
        self._sent = True
        logger.debug(f"Sending {self._code} with {len(self._headers.items())} headers")
        self._write(head)

    def _write(self, data: bytes) -> None:
        try:
            self.stream.write(data)
        except (BrokenPipeError, ConnectionResetError, OSError) as e:
            # Client went away; nothing left to deliver the error to
            logger.warning(f"Write failed: {e}")
