"""
=============================================================================
COOKIE RECORDS
=============================================================================

A cookie record is everything one Set-Cookie line needs:

    Set-Cookie: token=abc; Expires=Thu, 15 Jan 2026 12:31:45 GMT; Max-Age=60; Path=/; HttpOnly

    ┌────────────┬──────────┬─────────────────────────────────────────┐
    │  Field     │ Default  │  Rendered as                            │
    ├────────────┼──────────┼─────────────────────────────────────────┤
    │  name      │   -      │  token=...                              │
    │  value     │  ""      │  ...=abc                                │
    │  expire    │  0       │  Expires=<now + expire>; Max-Age=expire │
    │  path      │  "/"     │  Path=/                                 │
    │  domain    │  ""      │  Domain=... (omitted when empty)        │
    │  secure    │  False   │  Secure                                 │
    │  http_only │  True    │  HttpOnly                               │
    └────────────┴──────────┴─────────────────────────────────────────┘

=============================================================================
DEFAULT MERGE
=============================================================================

Records are always built on top of the field DEFAULTS, never on top of a
cookie that was stored earlier under the same name:

    set_cookie({"name": "a", "value": "1", "path": "/admin"})
    set_cookie({"name": "a", "value": "2"})

    stored: Cookie(name="a", value="2", path="/")     ← path is NOT "/admin"

=============================================================================
"""

from dataclasses import dataclass, fields, asdict
from datetime import datetime, timezone, timedelta
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import quote


# Name used when a record doesn't carry one
DEFAULT_COOKIE_NAME = "__cookieDefault"

# camelCase spellings accepted from callers
_FIELD_ALIASES = {
    "httpOnly": "http_only",
    "httponly": "http_only",
}


@dataclass
class Cookie:
    """
    A single Set-Cookie instruction.

    expire is RELATIVE: seconds from the moment the cookie is sent.
    0 means a session cookie (dropped when the browser closes), a
    negative value asks the browser to delete the cookie.
    """

    name: str = DEFAULT_COOKIE_NAME
    value: str = ""
    expire: int = 0
    path: str = "/"
    domain: str = ""
    secure: bool = False
    http_only: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_header_value(self, now: Optional[datetime] = None) -> str:
        """
        Serialize to a Set-Cookie header value.

        The value is percent-encoded on the way out; the record itself
        keeps the raw value.

        Args:
            now: Reference time for Expires (defaults to current UTC time)

        Returns:
            Header value without the "Set-Cookie: " prefix
        """
        parts = [f"{self.name}={quote(str(self.value), safe='')}"]

        if self.expire:
            now = now or datetime.now(timezone.utc)
            max_age = max(self.expire, 0)
            if self.expire > 0:
                expires = now + timedelta(seconds=self.expire)
            else:
                # Any date in the past makes the browser drop the cookie
                expires = datetime(1970, 1, 1, tzinfo=timezone.utc)
            parts.append(f"Expires={format_http_date(expires)}")
            parts.append(f"Max-Age={max_age}")

        if self.path:
            parts.append(f"Path={self.path}")
        if self.domain:
            parts.append(f"Domain={self.domain}")
        if self.secure:
            parts.append("Secure")
        if self.http_only:
            parts.append("HttpOnly")

        return "; ".join(parts)


_COOKIE_FIELDS = {f.name for f in fields(Cookie)}


def make_cookie(
    record: Union[Cookie, Mapping[str, Any]],
    defaults: Optional[Mapping[str, Any]] = None,
) -> Cookie:
    """
    Build a Cookie by merging a record over the field defaults.

    Args:
        record: A Cookie, or a mapping with any subset of the Cookie fields.
                "httpOnly" is accepted as an alias of "http_only".
        defaults: Optional overrides for the built-in field defaults
                  (e.g. from WebConfig.cookie_defaults())

    Returns:
        New Cookie instance

    Raises:
        TypeError: If the record carries a field Cookie doesn't have
    """
    if isinstance(record, Cookie):
        record = record.to_dict()

    merged: Dict[str, Any] = dict(defaults or {})
    for key, value in record.items():
        key = _FIELD_ALIASES.get(key, key)
        if key not in _COOKIE_FIELDS:
            raise TypeError(f"Unknown cookie field: {key!r}")
        merged[key] = value

    return Cookie(**merged)


def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Example: Thu, 15 Jan 2026 12:30:45 GMT
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

    dt = dt.astimezone(timezone.utc)
    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )
