"""uribuilder.encoding
Percent-encoding, decoding and validation of already-encoded ("raw") components.
"""

import string

from urllib.parse import quote, quote_plus, unquote, unquote_plus

# RFC 2396:
#   unreserved  = alphanum | mark
#   mark        = "-" | "_" | "." | "!" | "~" | "*" | "'" | "(" | ")"
_ALPHANUM: frozenset[str] = frozenset(string.ascii_letters + string.digits)
_MARK: str = "-_.!~*'()"

# urllib.parse.quote never escapes alphanumerics and "_.-~"; the rest of the
# marks have to be passed explicitly.
_SAFE_MARKS: str = "!*'()"

# Legal in every raw component, so that percent-encoded and form-encoded text passes.
_ENCODED_EXTRAS: str = "+%"

PATH_CHARACTERS: str = "/"
QUERY_CHARACTERS: str = "&="
USER_INFO_CHARACTERS: str = ":"
# RFC 3986 section 3.5
FRAGMENT_CHARACTERS: str = "!$&'()*+,;=_~:@/?"


def is_unreserved(c: str) -> bool:
    return c in _ALPHANUM or c in _MARK


def require_text(s: str | None) -> str:
    """Returns s, or raises ValueError if it is None, empty or whitespace only."""
    if s is None or len(s.strip()) == 0:
        raise ValueError(f"Expected non-blank text, got {s!r}")
    return s


def require_url_encoded(s: str | None, additional_allowed_characters: str) -> None:
    if not s:
        return
    for c in s:
        if not (is_unreserved(c) or c in _ENCODED_EXTRAS or c in additional_allowed_characters):
            raise ValueError(f"Insufficient URL encoding: {s!r}")


def url_encode(s: str | None) -> str | None:
    """UTF-8 percent-encoding that leaves only unreserved characters as they are.
    e.g. url_encode("a b+c/d") == "a%20b%2Bc%2Fd"
    """
    if not s:
        return s
    return quote(s, safe=_SAFE_MARKS)


def url_decode(s: str | None) -> str | None:
    if not s:
        return s
    return unquote(s)


def form_encode(s: str | None) -> str | None:
    """Like url_encode, but spaces become "+" as in application/x-www-form-urlencoded."""
    if not s:
        return s
    return quote_plus(s, safe=_SAFE_MARKS)


def form_decode(s: str | None) -> str | None:
    if not s:
        return s
    return unquote_plus(s)


def encode_fragment(fragment: str | None) -> str | None:
    if fragment is None:
        return None
    return "".join(
        c if is_unreserved(c) or c in FRAGMENT_CHARACTERS else quote(c, safe="") for c in fragment
    )


def to_ascii(s: str | None) -> str | None:
    """Percent-encodes every non-ASCII character of s and leaves everything else alone."""
    if s is None or s.isascii():
        return s
    return "".join(c if c.isascii() else quote(c, safe="") for c in s)
