"""uribuilder.builder
A mutable builder for URIs with host-based authorities.

Every mutator changes the builder in place and returns it, so calls can be chained:

    UriBuilder.of("http://example.com").add_path_component("a b").add_parameter("x", 1).to_string()
    == "http://example.com/a%20b?x=1"
"""

import copy
import logging

from typing import Any, Mapping, Self

from . import path as _path
from . import query as _query
from .encoding import (
    FRAGMENT_CHARACTERS,
    PATH_CHARACTERS,
    QUERY_CHARACTERS,
    USER_INFO_CHARACTERS,
    encode_fragment,
    require_text,
    require_url_encoded,
    to_ascii,
    url_decode,
    url_encode,
)
from .errors import UriSyntaxError
from .parse import Uri, parse_uri_reference

logger = logging.getLogger(__name__)

UNDEFINED_PORT: int = -1

# Ports that are left out of the rendered authority for their scheme.
DEFAULT_PORTS: dict[str, int] = {"http": 80, "https": 443}

ParameterValue = str | int | bool | None


def _empty_to_none(s: str | None) -> str | None:
    if s is not None and len(s) == 0:
        return None
    return s


def _parameter_value(value: ParameterValue) -> str | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class UriBuilder:
    """Builds a URI component by component.

    Path and query each live in exactly one of two forms at a time: the raw
    encoded string, or a structured list (path segments, query parameters).
    Operations convert between the two on demand.
    """

    def __init__(self: Self) -> None:
        self._scheme: str | None = None
        self._user_info: str | None = None
        self._host: str | None = None
        self._port: int = UNDEFINED_PORT
        self._path: _path.Path = _path.RawPath()
        # Kept across projections; an empty raw path has no leading "/" to infer it from.
        self._absolute_path: bool = True
        self._query: _query.Query = _query.RawQuery()
        self._fragment: str | None = None

    # ------------------------------------------------------------------ construction

    @classmethod
    def of(cls, source: Any) -> Self:
        """Creates a builder from a string, a Uri, or a URL value such as urllib.parse.SplitResult."""
        if isinstance(source, str):
            return cls.from_string(source)
        if isinstance(source, Uri):
            return cls.from_uri(source)
        if callable(getattr(source, "geturl", None)):
            return cls.from_url(source)
        raise TypeError(f"Cannot build a URI from {type(source).__name__}")

    @classmethod
    def from_uri(cls, uri: Uri) -> Self:
        # Components of a parsed Uri are already validated by the grammar.
        builder: Self = cls()
        builder._scheme = _empty_to_none(uri.raw_scheme)
        builder._user_info = _empty_to_none(to_ascii(uri.raw_userinfo))
        builder._host = _empty_to_none(to_ascii(uri.raw_host))
        builder._port = uri.port if uri.port is not None else UNDEFINED_PORT
        builder._path = _path.RawPath(_empty_to_none(to_ascii(uri.raw_path)))
        builder._query = _query.RawQuery(_empty_to_none(to_ascii(uri.raw_query)))
        builder._fragment = _empty_to_none(to_ascii(uri.raw_fragment))
        return builder

    @classmethod
    def from_url(cls, url: Any) -> Self:
        text: str | bytes = url.geturl()
        if isinstance(text, bytes):
            try:
                text = text.decode("ascii")
            except UnicodeDecodeError as e:
                logger.debug("Cannot decode %r: %s", text, e)
                raise UriSyntaxError(repr(text), "Illegal URI syntax") from e
        return cls.from_string(text)

    @classmethod
    def from_string(cls, url: str) -> Self:
        text: str = to_ascii(require_text(url).strip())
        try:
            uri: Uri = parse_uri_reference(text)
        except ValueError as e:
            logger.debug("Cannot parse %r: %s", text, e)
            raise UriSyntaxError(text, "Illegal URI syntax") from e
        return cls.from_uri(uri)

    def copy(self: Self) -> Self:
        """Returns an independent builder with the same state."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------ scalar components

    def set_scheme(self: Self, scheme: str | None) -> Self:
        self._scheme = _empty_to_none(scheme)
        return self

    @property
    def scheme(self: Self) -> str | None:
        return self._scheme

    def set_raw_user_info(self: Self, user_info: str | None) -> Self:
        """Sets the encoded user info, e.g. "username:password"."""
        require_url_encoded(user_info, USER_INFO_CHARACTERS)
        self._user_info = _empty_to_none(user_info)
        return self

    def set_user_info(self: Self, username: str | None, password: str | None) -> Self:
        """Sets the user info from a non-encoded username and password. A username of None clears it."""
        if username is None:
            self._user_info = None
            return self
        if password is None:
            raise ValueError("password must not be None when a username is given")
        self._user_info = f"{url_encode(username)}:{url_encode(password)}"
        return self

    @property
    def raw_user_info(self: Self) -> str | None:
        return self._user_info

    def set_host(self: Self, host: str | None) -> Self:
        self._host = _empty_to_none(host)
        return self

    @property
    def host(self: Self) -> str | None:
        return self._host

    def set_port(self: Self, port: int | None) -> Self:
        self._port = UNDEFINED_PORT if port is None else port
        return self

    @property
    def port(self: Self) -> int:
        """The port, or -1 if undefined."""
        return self._port

    def set_raw_fragment(self: Self, fragment: str | None) -> Self:
        """Sets the encoded fragment, without the leading "#"."""
        require_url_encoded(fragment, FRAGMENT_CHARACTERS)
        self._fragment = _empty_to_none(fragment)
        return self

    def set_fragment(self: Self, fragment: str | None) -> Self:
        """Sets the non-encoded fragment, without the leading "#"."""
        self._fragment = encode_fragment(_empty_to_none(fragment))
        return self

    @property
    def raw_fragment(self: Self) -> str | None:
        return self._fragment

    @property
    def fragment(self: Self) -> str | None:
        return url_decode(self._fragment)

    # ------------------------------------------------------------------ path

    def _raw_path(self: Self) -> str | None:
        raw: _path.RawPath = _path.to_raw(self._path)
        if raw is not self._path:
            logger.debug("Collapsed path segments into %r", raw.text)
            self._path = raw
        return raw.text

    def _path_segments(self: Self) -> _path.PathSegments:
        segments: _path.PathSegments = _path.to_segments(self._path, self._absolute_path)
        if segments is not self._path:
            logger.debug("Split path into segments %r", segments.segments)
            self._path = segments
            self._absolute_path = segments.absolute
        return segments

    def set_raw_path(self: Self, path: str | None) -> Self:
        """Sets the encoded path, e.g. "/mypath"."""
        require_url_encoded(path, PATH_CHARACTERS)
        self._path = _path.RawPath(_empty_to_none(path))
        return self

    def append_raw_path(self: Self, path: str | None) -> Self:
        """Appends an encoded path to the current one, with exactly one "/" between them."""
        require_url_encoded(path, PATH_CHARACTERS)
        self._path = _path.RawPath(_path.join_raw(self._raw_path(), path))
        return self

    def set_absolute_path(self: Self, absolute: bool) -> Self:
        """Renders the path with a leading "/". Paths are absolute by default."""
        self._path_segments().absolute = absolute
        self._absolute_path = absolute
        return self

    def set_relative_path(self: Self, relative: bool) -> Self:
        """Renders the path without a leading "/". Ignored on output while a host is set."""
        return self.set_absolute_path(not relative)

    def add_path_component(self: Self, component: str) -> Self:
        """Appends a single non-encoded segment. A "/" inside it is encoded."""
        return self.add_path_components(component)

    def add_path_components(self: Self, *components: str) -> Self:
        encoded: list[str] = [url_encode(require_text(component)) for component in components]
        self._path_segments().segments.extend(encoded)
        return self

    @property
    def raw_path(self: Self) -> str | None:
        return self._raw_path()

    @property
    def path_components(self: Self) -> list[str]:
        """The decoded path segments, empty if there is no path."""
        return [url_decode(segment) for segment in self._path_segments().segments]

    @property
    def is_absolute_path(self: Self) -> bool:
        if isinstance(self._path, _path.PathSegments):
            return self._path.absolute
        if not self._path.text:
            return self._absolute_path
        return self._path.text.startswith("/")

    @property
    def is_relative_path(self: Self) -> bool:
        return not self.is_absolute_path

    # ------------------------------------------------------------------ query

    def _raw_query(self: Self) -> str | None:
        raw: _query.RawQuery = _query.to_raw(self._query)
        if raw is not self._query:
            logger.debug("Collapsed query parameters into %r", raw.text)
            self._query = raw
        return raw.text

    def _query_parameters(self: Self) -> list[_query.QueryParameter]:
        parameters: _query.QueryParameters = _query.to_parameters(self._query)
        if parameters is not self._query:
            logger.debug("Split query into %d parameter(s)", len(parameters.parameters))
            self._query = parameters
        return parameters.parameters

    def set_raw_query(self: Self, query: str | None) -> Self:
        """Sets the encoded query without the leading "?", e.g. "key=value&x=y"."""
        require_url_encoded(query, QUERY_CHARACTERS)
        self._query = _query.RawQuery(_empty_to_none(query))
        return self

    def add_parameter(self: Self, name: str, value: ParameterValue = None) -> Self:
        """Appends a parameter; adding the same name again appends it again."""
        parameter = _query.QueryParameter(name, _parameter_value(value))
        self._query_parameters().append(parameter)
        return self

    def add_parameters(self: Self, parameters: Mapping[str, ParameterValue]) -> Self:
        """Appends one parameter per entry, in the mapping's iteration order."""
        added: list[_query.QueryParameter] = [
            _query.QueryParameter(name, _parameter_value(value)) for name, value in parameters.items()
        ]
        self._query_parameters().extend(added)
        return self

    def remove_parameters(self: Self, name: str) -> Self:
        if name is None:
            raise ValueError("name must not be None")
        parameters: list[_query.QueryParameter] = self._query_parameters()
        parameters[:] = [p for p in parameters if p.name != name]
        return self

    def set_parameter(self: Self, name: str, value: ParameterValue = None) -> Self:
        """Replaces all parameters with the given name by a single one."""
        parameter = _query.QueryParameter(name, _parameter_value(value))
        self.remove_parameters(name)
        self._query_parameters().append(parameter)
        return self

    def get_parameter_value(self: Self, name: str) -> str | None:
        """The value of the first parameter with the given name.

        None means either that there is no such parameter, or that it has no value (as in "?name").
        """
        if name is None:
            raise ValueError("name must not be None")
        return next((p.value for p in self._query_parameters() if p.name == name), None)

    def get_parameter_values(self: Self, name: str) -> list[str | None]:
        if name is None:
            raise ValueError("name must not be None")
        return [p.value for p in self._query_parameters() if p.name == name]

    @property
    def parameter_names(self: Self) -> set[str]:
        return {p.name for p in self._query_parameters()}

    @property
    def raw_query(self: Self) -> str | None:
        return self._raw_query()

    # ------------------------------------------------------------------ serialization

    def _scheme_part(self: Self) -> str:
        if self._scheme is None:
            return ""
        return f"{self._scheme}:"

    def _authority_part(self: Self) -> str:
        if self._host is None:
            return ""
        result: str = "//"
        if self._user_info is not None:
            result += f"{self._user_info}@"
        if ":" in self._host and not self._host.startswith("[") and not self._host.endswith("]"):
            result += f"[{self._host}]"
        else:
            result += self._host
        if self._port != UNDEFINED_PORT and DEFAULT_PORTS.get(self._scheme) != self._port:
            result += f":{self._port}"
        return result

    def _path_part(self: Self) -> str:
        path: str | None = self._raw_path()
        if path is None:
            return ""
        # A URI with an authority cannot have a relative path.
        if self._host is not None and not path.startswith("/"):
            return f"/{path}"
        return path

    def to_string(self: Self) -> str:
        """Renders the URI built so far as an ASCII string."""
        result: str = self._scheme_part() + self._authority_part() + self._path_part()
        query: str | None = self._raw_query()
        if query is not None:
            result += f"?{query}"
        if self._fragment is not None:
            result += f"#{self._fragment}"
        return result

    def to_host_string(self: Self) -> str:
        """Renders only scheme and authority, e.g. "http://example.com" for "http://example.com/a?b#c"."""
        return self._scheme_part() + self._authority_part()

    def to_uri(self: Self) -> Uri:
        text: str = self.to_string()
        try:
            return parse_uri_reference(text)
        except ValueError as e:
            logger.debug("Rendered URI %r does not parse: %s", text, e)
            raise UriSyntaxError(text, "Illegal URI syntax") from e

    def build(self: Self) -> Uri:
        return self.to_uri()

    def __str__(self: Self) -> str:
        return self.to_string()

    def __repr__(self: Self) -> str:
        return f"{self.__class__.__name__}({self.to_string()!r})"
