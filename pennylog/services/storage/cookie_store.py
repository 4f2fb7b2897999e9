"""
Browser Cookie Storage Implementation

DESIGN DECISION: Cookies are the storage of the web front end because:
1. No server-side database or account is needed
2. Data stays in the user's own browser
3. One cookie per document keeps reads trivial

TRADEOFFS:
- One browser only; clearing cookies loses everything
- Cookie size limits (~4 KB) cap how many entries fit
- The server cannot write cookies after the response starts, so writes
  are queued as Set-Cookie strings and applied by the front end

Values are JSON, percent-encoded exactly like encodeURIComponent, with
`path=/` and an expiry one calendar year after the write.
"""

import json
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Callable, Mapping, Optional
from urllib.parse import quote, unquote

import structlog
from dateutil.relativedelta import relativedelta

from pennylog.services.storage.interface import (
    KeyValueStoreInterface,
    encode_json,
)


# Characters encodeURIComponent leaves as-is, beyond letters, digits and "_.-~"
_URI_COMPONENT_SAFE = "!*'()"


def encode_cookie_value(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def decode_cookie_value(raw: str) -> str:
    return unquote(raw)


def parse_cookie_header(header: str) -> dict[str, str]:
    """
    Split a `Cookie:` header (or document.cookie) into name -> raw value.

    Values stay percent-encoded. The first occurrence of a name wins.
    """
    cookies: dict[str, str] = {}
    for part in header.split(";"):
        part = part.strip()
        if not part or "=" not in part:
            continue
        name, _, value = part.partition("=")
        cookies.setdefault(name.strip(), value)
    return cookies


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CookieStore(KeyValueStoreInterface):
    """
    Key/value store over a browser cookie jar.

    The jar holds raw (percent-encoded) cookie values. `save` updates the
    jar immediately and queues the matching Set-Cookie string; call
    `drain_set_cookies()` to hand queued strings to the browser.
    """

    def __init__(
        self,
        cookies: Optional[Mapping[str, str]] = None,
        path: str = "/",
        lifetime_years: int = 1,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            cookies: Raw cookie values the browser sent, by name
            path: Path attribute of written cookies
            lifetime_years: Expiry of written cookies, in calendar years
            clock: Returns "now"; injectable for tests
        """
        self._jar: dict[str, str] = dict(cookies or {})
        self._path = path
        self._lifetime = relativedelta(years=lifetime_years)
        self._clock = clock or _utcnow
        self._pending: list[str] = []
        self._logger = structlog.get_logger(__name__)

    @classmethod
    def from_header(cls, header: str, **kwargs) -> "CookieStore":
        """Build a store from a raw `Cookie:` header value."""
        return cls(parse_cookie_header(header), **kwargs)

    def load(self, key: str, default: Any) -> Any:
        raw = self._jar.get(key)
        if not raw:
            return default
        try:
            return json.loads(decode_cookie_value(raw))
        except ValueError as e:
            self._logger.warning("cookie_decode_failed", key=key, error=str(e))
            return default

    def save(self, key: str, value: Any) -> None:
        encoded = encode_cookie_value(encode_json(value))
        expires = self.expiry_from(self._clock())
        self._jar[key] = encoded
        self._pending.append(
            f"{key}={encoded};expires={format_datetime(expires.astimezone(timezone.utc), usegmt=True)}"
            f";path={self._path}"
        )

    def expiry_from(self, now: datetime) -> datetime:
        """Expiry a cookie written at `now` gets."""
        return now + self._lifetime

    def drain_set_cookies(self) -> list[str]:
        """Return and forget every Set-Cookie string queued since the last drain."""
        pending, self._pending = self._pending, []
        return pending

    def raw_value(self, key: str) -> Optional[str]:
        """The percent-encoded value currently in the jar."""
        return self._jar.get(key)
