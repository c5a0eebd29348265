"""Exceptions raised by the frame codecs."""

from __future__ import annotations


class RuuviError(ValueError):
    """Base class for every frame parsing/encoding failure."""


class EmptyInputError(RuuviError):
    def __init__(self) -> None:
        super().__init__("data is empty")


class UnknownFormatError(RuuviError):
    def __init__(self, tag: int) -> None:
        self.tag = tag
        super().__init__(f"unknown format: 0x{tag:02X}")


class WrongFormatTagError(RuuviError):
    """Raised when a codec is handed a frame carrying another format's tag."""

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"not format {expected} data: format byte is 0x{actual:02X}")


class InvalidLengthError(RuuviError):
    def __init__(self, what: str, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what} requires exactly {expected} bytes, got {actual}")


class NilInputError(RuuviError):
    def __init__(self) -> None:
        super().__init__("data cannot be None")


class ValueOutOfRangeError(RuuviError):
    """An encoded value does not fit the raw field it is written to."""

    def __init__(self, field: str, value: object, raw: int) -> None:
        self.field = field
        self.value = value
        self.raw = raw
        super().__init__(f"{field}={value!r} is out of range for the frame (raw {raw})")


__all__ = [
    "EmptyInputError",
    "InvalidLengthError",
    "NilInputError",
    "RuuviError",
    "UnknownFormatError",
    "ValueOutOfRangeError",
    "WrongFormatTagError",
]
