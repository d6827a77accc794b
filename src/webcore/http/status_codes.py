"""
=============================================================================
HTTP STATUS CODES
=============================================================================

Status codes and reason phrases used when a response is emitted.

The ResponseBuilder deliberately accepts ANY integer as a status code, so
the sinks cannot rely on the enum alone. They go through reason_phrase(),
which falls back to "Unknown" for codes the enum doesn't know:

    ┌──────────────────────────────────────────────────────────────────┐
    │   set_status_code(404)          ──►  "HTTP/1.1 404 Not Found"    │
    │   set_status_code(404, "Gone")  ──►  "HTTP/1.1 404 Gone"         │
    │   set_status_code(799)          ──►  "HTTP/1.1 799 Unknown"      │
    └──────────────────────────────────────────────────────────────────┘

An explicit status message always wins over the table below.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes with reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.FOUND == 302
        True
        >>> HTTPStatus.FOUND.phrase
        'Found'
    """

    # 1xx INFORMATIONAL
    CONTINUE = 100
    SWITCHING_PROTOCOLS = 101

    # 2xx SUCCESS
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NO_CONTENT = 204
    PARTIAL_CONTENT = 206

    # 3xx REDIRECTION
    MOVED_PERMANENTLY = 301
    FOUND = 302                 # What a bare Location header turns into
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    # 4xx CLIENT ERRORS
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    CONFLICT = 409
    GONE = 410
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429

    # 5xx SERVER ERRORS
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504

    @property
    def phrase(self) -> str:
        """Reason phrase for this status code."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_redirect(self) -> bool:
        return 300 <= self < 400

    @property
    def is_error(self) -> bool:
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.CONTINUE: "Continue",
    HTTPStatus.SWITCHING_PROTOCOLS: "Switching Protocols",

    HTTPStatus.OK: "OK",
    HTTPStatus.CREATED: "Created",
    HTTPStatus.ACCEPTED: "Accepted",
    HTTPStatus.NO_CONTENT: "No Content",
    HTTPStatus.PARTIAL_CONTENT: "Partial Content",

    HTTPStatus.MOVED_PERMANENTLY: "Moved Permanently",
    HTTPStatus.FOUND: "Found",
    HTTPStatus.SEE_OTHER: "See Other",
    HTTPStatus.NOT_MODIFIED: "Not Modified",
    HTTPStatus.TEMPORARY_REDIRECT: "Temporary Redirect",
    HTTPStatus.PERMANENT_REDIRECT: "Permanent Redirect",

    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.UNAUTHORIZED: "Unauthorized",
    HTTPStatus.FORBIDDEN: "Forbidden",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.CONFLICT: "Conflict",
    HTTPStatus.GONE: "Gone",
    HTTPStatus.UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    HTTPStatus.TOO_MANY_REQUESTS: "Too Many Requests",

    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.NOT_IMPLEMENTED: "Not Implemented",
    HTTPStatus.BAD_GATEWAY: "Bad Gateway",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.GATEWAY_TIMEOUT: "Gateway Timeout",
}


def reason_phrase(code: int) -> str:
    """
    Get the reason phrase for an arbitrary integer status code.

    Args:
        code: Any integer, including codes outside the enum

    Returns:
        The standard phrase, or "Unknown"
    """
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return "Unknown"
