from typing import Self


class UriSyntaxError(ValueError):
    """Raised when a string cannot be parsed as a URI-Reference.

    The low-level parse failure is kept as ``__cause__``.
    """

    def __init__(self: Self, input_: str, reason: str) -> None:
        super().__init__(f"{reason}: {input_}")
        self.input: str = input_
        self.reason: str = reason
