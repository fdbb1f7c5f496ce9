"""uribuilder.path
The two representations of a path: raw text, or a list of encoded segments.
"""

import dataclasses

from typing import assert_never


@dataclasses.dataclass(frozen=True)
class RawPath:
    text: str | None = None


@dataclasses.dataclass
class PathSegments:
    # Each segment is still percent-encoded.
    segments: list[str] = dataclasses.field(default_factory=list)
    absolute: bool = True


Path = RawPath | PathSegments


def to_segments(path: Path, absolute: bool = True) -> PathSegments:
    """Splits a raw path into its encoded segments.
    An empty path has no leading "/" to look at, so it takes the given absolute flag.
    """
    if isinstance(path, PathSegments):
        return path
    if isinstance(path, RawPath):
        if not path.text:
            return PathSegments(absolute=absolute)
        return PathSegments(
            segments=[segment for segment in path.text.split("/") if segment],
            absolute=path.text.startswith("/"),
        )
    assert_never(path)


def to_raw(path: Path) -> RawPath:
    if isinstance(path, RawPath):
        return path
    if isinstance(path, PathSegments):
        if not path.segments:
            return RawPath()
        joined: str = "/".join(path.segments)
        return RawPath(f"/{joined}" if path.absolute else joined)
    assert_never(path)


def join_raw(path: str | None, appended: str | None) -> str | None:
    """Joins two encoded paths so that exactly one "/" separates them.
    e.g. join_raw("/test/", "/test2") == "/test/test2"
    """
    if not path:
        return appended or None
    if not appended:
        return path
    if appended.startswith("/"):
        if path.endswith("/"):
            return path + appended[1:]
        return path + appended
    if path.endswith("/"):
        return path + appended
    return f"{path}/{appended}"
