"""uribuilder.parse
RFC 3986 URI-Reference parsing into a value holding the seven raw components.
The builder uses this both to seed itself and to validate what it renders.
"""

import dataclasses
import re

from typing import Iterable, Self

# Grammar rules below are taken from RFC 3986 (and RFC 6874 for zone IDs).
# Only host-based authorities are modeled.

# ALPHA / DIGIT / HEXDIG
_ALPHA: str = r"[A-Za-z]"
_DIGIT: str = r"[0-9]"
_HEXDIG: str = r"[0-9A-Fa-f]"

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
_UNRESERVED: str = r"[A-Za-z0-9\-._~]"

# pct-encoded = "%" HEXDIG HEXDIG
_PCT_ENCODED: str = rf"%{_HEXDIG}{_HEXDIG}"

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
_SUB_DELIMS: str = r"[!$&'()*+,;=]"

# pchar = unreserved / pct-encoded / sub-delims / ":" / "@"
_PCHAR: str = rf"(?:{_UNRESERVED}|{_PCT_ENCODED}|{_SUB_DELIMS}|[:@])"

# query = *( pchar / "/" / "?" ), and fragment has the same shape
_QUERY: str = rf"(?P<query>(?:{_PCHAR}|[/?])*)"
_FRAGMENT: str = rf"(?P<fragment>(?:{_PCHAR}|[/?])*)"

# scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )
_SCHEME: str = rf"(?P<scheme>{_ALPHA}[A-Za-z0-9+\-.]*)"

# segment = *pchar, segment-nz = 1*pchar
_SEGMENT: str = rf"{_PCHAR}*"
_SEGMENT_NZ: str = rf"{_PCHAR}+"

# segment-nz-nc = 1*( unreserved / pct-encoded / sub-delims / "@" )
_SEGMENT_NZ_NC: str = rf"(?:{_UNRESERVED}|{_PCT_ENCODED}|{_SUB_DELIMS}|@)+"

# path-abempty  = *( "/" segment )
# path-absolute = "/" [ segment-nz *( "/" segment ) ]
# path-rootless = segment-nz *( "/" segment )
# path-noscheme = segment-nz-nc *( "/" segment )
# path-empty    = 0<pchar>
_PATH_ABEMPTY: str = rf"(?P<path_abempty>(?:/{_SEGMENT})*)"
_PATH_ABSOLUTE: str = rf"(?P<path_absolute>/(?:{_SEGMENT_NZ}(?:/{_SEGMENT})*)?)"
_PATH_ROOTLESS: str = rf"(?P<path_rootless>{_SEGMENT_NZ}(?:/{_SEGMENT})*)"
_PATH_NOSCHEME: str = rf"(?P<path_noscheme>{_SEGMENT_NZ_NC}(?:/{_SEGMENT})*)"
_PATH_EMPTY: str = r"(?P<path_empty>)"

# userinfo = *( unreserved / pct-encoded / sub-delims / ":" )
_USERINFO: str = rf"(?P<userinfo>(?:{_UNRESERVED}|{_PCT_ENCODED}|{_SUB_DELIMS}|:)*)"

# dec-octet, IPv4address = dec-octet "." dec-octet "." dec-octet "." dec-octet
_DEC_OCTET: str = rf"(?:25[0-5]|2[0-4]{_DIGIT}|1{_DIGIT}{{2}}|[1-9]{_DIGIT}|{_DIGIT})"
_IPV4ADDRESS: str = rf"{_DEC_OCTET}(?:\.{_DEC_OCTET}){{3}}"

# h16 = 1*4HEXDIG, ls32 = ( h16 ":" h16 ) / IPv4address
_H16: str = rf"{_HEXDIG}{{1,4}}"
_LS32: str = rf"(?:{_H16}:{_H16}|{_IPV4ADDRESS})"

# IPv6address, one alternative per line of the ABNF in RFC 3986 section 3.2.2
_IPV6ADDRESS: str = "(?:" + "|".join(
    (
        rf"(?:{_H16}:){{6}}{_LS32}",
        rf"::(?:{_H16}:){{5}}{_LS32}",
        rf"(?:{_H16})?::(?:{_H16}:){{4}}{_LS32}",
        rf"(?:(?:{_H16}:){{0,1}}{_H16})?::(?:{_H16}:){{3}}{_LS32}",
        rf"(?:(?:{_H16}:){{0,2}}{_H16})?::(?:{_H16}:){{2}}{_LS32}",
        rf"(?:(?:{_H16}:){{0,3}}{_H16})?::{_H16}:{_LS32}",
        rf"(?:(?:{_H16}:){{0,4}}{_H16})?::{_LS32}",
        rf"(?:(?:{_H16}:){{0,5}}{_H16})?::{_H16}",
        rf"(?:(?:{_H16}:){{0,6}}{_H16})?::",
    )
) + ")"

# IP-literal = "[" ( IPv6address / IPv6addrz / IPvFuture ) "]"
_ZONEID: str = rf"(?:{_UNRESERVED}|{_PCT_ENCODED})+"
_IPVFUTURE: str = rf"v{_HEXDIG}+\.(?:{_UNRESERVED}|{_SUB_DELIMS}|:)+"
_IP_LITERAL: str = rf"\[(?:{_IPV6ADDRESS}(?:%25{_ZONEID})?|{_IPVFUTURE})\]"

# host = IP-literal / IPv4address / reg-name
_REG_NAME: str = rf"(?:{_UNRESERVED}|{_PCT_ENCODED}|{_SUB_DELIMS})*"
_HOST: str = rf"(?P<host>{_IP_LITERAL}|{_IPV4ADDRESS}|{_REG_NAME})"

# authority = [ userinfo "@" ] host [ ":" port ]
_AUTHORITY: str = rf"(?:{_USERINFO}@)?{_HOST}(?::(?P<port>{_DIGIT}*))?"

# URI = scheme ":" hier-part [ "?" query ] [ "#" fragment ]
_URI_PAT: re.Pattern[str] = re.compile(
    rf"\A{_SCHEME}:(?://{_AUTHORITY}{_PATH_ABEMPTY}|{_PATH_ABSOLUTE}|{_PATH_ROOTLESS}|{_PATH_EMPTY})"
    rf"(?:\?{_QUERY})?(?:#{_FRAGMENT})?\Z"
)

# relative-ref = relative-part [ "?" query ] [ "#" fragment ]
_RELATIVE_REF_PAT: re.Pattern[str] = re.compile(
    rf"\A(?://{_AUTHORITY}{_PATH_ABEMPTY}|{_PATH_ABSOLUTE}|{_PATH_NOSCHEME}|{_PATH_EMPTY})"
    rf"(?:\?{_QUERY})?(?:#{_FRAGMENT})?\Z"
)

_URI_PATH_KINDS: tuple[str, ...] = ("path_abempty", "path_absolute", "path_empty", "path_rootless")
_RELATIVE_REF_PATH_KINDS: tuple[str, ...] = ("path_abempty", "path_absolute", "path_empty", "path_noscheme")


@dataclasses.dataclass(frozen=True)
class Uri:
    """An immutable URI-Reference. Build one with the parse_* functions or UriBuilder.to_uri()."""

    raw_scheme: str | None
    raw_userinfo: str | None
    raw_host: str | None
    raw_port: str | None
    raw_path: str
    raw_query: str | None
    raw_fragment: str | None

    @property
    def scheme(self: Self) -> str | None:
        return self.raw_scheme

    @property
    def host(self: Self) -> str | None:
        return self.raw_host

    @property
    def port(self: Self) -> int | None:
        if self.raw_port:
            return int(self.raw_port, base=10)
        return None

    @property
    def authority(self: Self) -> str | None:
        """userinfo@host:port"""
        if self.raw_host is None:
            return None
        result: str = ""
        if self.raw_userinfo is not None:
            result += f"{self.raw_userinfo}@"
        result += self.raw_host
        if self.raw_port is not None:
            result += f":{self.raw_port}"
        return result

    def serialize(self: Self) -> str:
        """Component recomposition as described in RFC 3986 section 5.3"""
        result: str = ""
        if self.raw_scheme is not None:
            result += f"{self.raw_scheme}:"
        if self.authority is not None:
            result += f"//{self.authority}"
        result += self.raw_path
        if self.raw_query is not None:
            result += f"?{self.raw_query}"
        if self.raw_fragment is not None:
            result += f"#{self.raw_fragment}"
        return result

    def __str__(self: Self) -> str:
        return self.serialize()


def _parse(data: str, pattern: re.Pattern[str], path_kinds: Iterable[str]) -> Uri:
    m: re.Match[str] | None = pattern.match(data)
    if m is None:
        raise ValueError(f"parse failed: {data!r}")

    groups: dict[str, str | None] = m.groupdict()

    port: str | None = groups["port"]
    if port:
        # Get rid of leading 0s.
        port = str(int(port))

    # Components are kept as written; only the port is normalized.
    return Uri(
        raw_scheme=groups.get("scheme"),
        raw_userinfo=groups["userinfo"],
        raw_host=groups["host"],
        raw_port=port,
        raw_path=next(groups[pk] for pk in path_kinds if groups[pk] is not None),
        raw_query=groups["query"],
        raw_fragment=groups["fragment"],
    )


def parse_uri(data: str) -> Uri:
    """RFC 3986-compliant URI parser, e.g. "http://example.org/path?query#fragment"."""
    return _parse(data, _URI_PAT, _URI_PATH_KINDS)


def parse_relative_ref(data: str) -> Uri:
    """RFC 3986-compliant relative-ref parser, e.g. "//example.org/path?query#fragment"."""
    return _parse(data, _RELATIVE_REF_PAT, _RELATIVE_REF_PATH_KINDS)


def parse_uri_reference(data: str) -> Uri:
    """RFC 3986-compliant URI-Reference parser.
    Tries a full URI first and falls back to a relative reference.
    """
    try:
        return parse_uri(data)
    except ValueError as e:
        uri_error: ValueError = e
    try:
        return parse_relative_ref(data)
    except ValueError as e:
        raise ValueError(
            f"failed to parse URI-Reference: {data!r} (as URI: {uri_error}; as relative-ref: {e})"
        ) from e
