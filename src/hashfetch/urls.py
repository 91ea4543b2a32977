"""URL validation and normalization for raw job input."""

from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

from hashfetch.errors.exceptions import InvalidURLError

ALLOWED_SCHEMES = frozenset({"http", "https"})
DEFAULT_SCHEME = "http"

# RFC 3986: scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." ) ":"
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
# ASCII characters never allowed in a host. Sub-delims, "<", ">" and '"' are fine.
_BAD_HOST_CHARS = frozenset(" `{}|\\^")
# Percent escapes in a host may only encode non-ASCII bytes, or "%25" in an
# IPv6 zone.
_BAD_HOST_ESCAPE_RE = re.compile(r"%(?!25|[89A-Fa-f][0-9A-Fa-f])")


def validate_url(raw: str) -> str:
    """Validate a raw URL string and give it a scheme if it has none.

    Returns the input unchanged for http(s) URLs and ``"http://" + raw`` for
    scheme-less input such as ``example.com``.

    Raises:
        InvalidURLError: empty input, unparsable input, or a scheme other
            than http/https.
    """
    if raw == "":
        raise InvalidURLError("url is empty", url=raw)

    parts = _parse(raw)

    if not parts.scheme:
        return f"{DEFAULT_SCHEME}://{raw}"
    if parts.scheme not in ALLOWED_SCHEMES:
        raise InvalidURLError(f"invalid url: {raw}", url=raw)
    return raw


def is_valid_url(raw: str) -> bool:
    try:
        validate_url(raw)
    except InvalidURLError:
        return False
    return True


def _parse(raw: str) -> SplitResult:
    """Parse ``raw`` the way a strict URL parser would, or raise."""
    if _CONTROL_RE.search(raw):
        raise InvalidURLError(f"invalid url: {raw}: control character", url=raw)
    if raw.startswith(":"):
        raise InvalidURLError(f"invalid url: {raw}: missing protocol scheme", url=raw)

    try:
        parts = urlsplit(raw)
        # Port is parsed lazily; touching it validates it.
        _ = parts.port
    except ValueError as e:
        raise InvalidURLError(f"invalid url: {raw}: {e}", url=raw) from e

    has_scheme = bool(_SCHEME_RE.match(raw))
    if not has_scheme:
        # A relative reference can't carry a colon in its first path segment,
        # e.g. "1.2.3.4:80" or "a_b:c".
        first_segment = raw.split("/", 1)[0]
        if ":" in first_segment:
            raise InvalidURLError(
                f"invalid url: {raw}: first path segment cannot contain colon", url=raw
            )
        return parts._replace(scheme="")

    host = parts.netloc.rpartition("@")[2]
    bad = next((c for c in host if c in _BAD_HOST_CHARS), None)
    if bad is not None:
        raise InvalidURLError(f"invalid url: {raw}: invalid character {bad!r} in host", url=raw)
    if _BAD_HOST_ESCAPE_RE.search(host):
        raise InvalidURLError(f"invalid url: {raw}: invalid escape in host", url=raw)
    return parts
