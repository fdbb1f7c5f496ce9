"""uribuilder.query
The two representations of a query: raw text, or an ordered list of decoded parameters.
"""

import dataclasses

from typing import Self, assert_never

from .encoding import form_decode, form_encode, require_text


@dataclasses.dataclass(frozen=True)
class QueryParameter:
    """A decoded name/value pair. A value of None renders as a bare name."""

    name: str
    value: str | None = None

    def __post_init__(self: Self) -> None:
        require_text(self.name)

    @classmethod
    def of_encoded_pair(cls, pair: str) -> Self:
        """e.g. "a=b" -> ("a", "b"), "a=" -> ("a", ""), "a" -> ("a", None)"""
        if len(pair) == 0:
            raise ValueError("Empty query parameter")
        name, equals, value = pair.partition("=")
        if len(name) == 0:
            raise ValueError(f"Query parameter without a name: {pair!r}")
        if len(equals) == 0:
            return cls(form_decode(name), None)
        return cls(form_decode(name), form_decode(value))

    def encoded(self: Self) -> str:
        if self.value is None:
            return form_encode(self.name)
        return f"{form_encode(self.name)}={form_encode(self.value)}"


@dataclasses.dataclass(frozen=True)
class RawQuery:
    text: str | None = None


@dataclasses.dataclass
class QueryParameters:
    parameters: list[QueryParameter] = dataclasses.field(default_factory=list)


Query = RawQuery | QueryParameters


def to_parameters(query: Query) -> QueryParameters:
    if isinstance(query, QueryParameters):
        return query
    if isinstance(query, RawQuery):
        if not query.text:
            return QueryParameters()
        return QueryParameters([QueryParameter.of_encoded_pair(pair) for pair in query.text.split("&") if pair])
    assert_never(query)


def to_raw(query: Query) -> RawQuery:
    if isinstance(query, RawQuery):
        return query
    if isinstance(query, QueryParameters):
        # No parameters renders the same as no query at all.
        if not query.parameters:
            return RawQuery()
        return RawQuery("&".join(parameter.encoded() for parameter in query.parameters))
    assert_never(query)
