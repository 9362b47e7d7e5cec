"""
Error taxonomy for bencode decoding.
"""
from enum import Enum


class ErrorKind(Enum):
    """Kinds of structural failure the decoder can report."""
    UNEXPECTED_TOKEN = "unexpected token"
    UNEXPECTED_EOF = "unexpected end of input"
    MALFORMED_INTEGER = "malformed integer"
    MALFORMED_LENGTH = "malformed string length"
    INVALID_KEY_TYPE = "dictionary key is not a byte string"
    UNORDERED_OR_DUPLICATE_KEY = "dictionary keys out of order or duplicated"
    NESTING_TOO_DEEP = "nesting too deep"
    TRAILING_DATA = "trailing data after value"


class BencodeDecodeError(ValueError):
    """
    Raised when a buffer is not valid bencode.

    Carries the failure ``kind`` and the byte ``offset`` at which it was
    detected. ``detail`` is an optional extra hint for humans.
    """
    def __init__(self, kind: ErrorKind, offset: int, detail: str = ""):
        self.kind = kind
        self.offset = offset
        self.detail = detail
        super().__init__(str(self))

    def __str__(self):
        msg = f"{self.kind.value.capitalize()} at offset {self.offset}"
        if self.detail:
            msg += f" ({self.detail})"
        return msg

    def __repr__(self):
        return f"BencodeDecodeError({self.kind.name}, offset={self.offset})"

    def __reduce__(self):
        return (type(self), (self.kind, self.offset, self.detail))
