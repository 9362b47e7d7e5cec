"""
Bencode decoder for BitTorrent metainfo and tracker responses.
"""
import logging
import sys
from enum import Enum
from typing import Optional

from .errors import BencodeDecodeError, ErrorKind
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, digits_to_int

logger = logging.getLogger(__name__)

# Deepest list/dict nesting accepted by default.
MAX_DEPTH = 256

# Python frames reserved for callers above decode().
_FRAME_RESERVE = 200

_DIGITS = b"0123456789"


def max_depth_ceiling() -> int:
    """
    Largest max_depth the recursive parser can honour under the current
    recursion limit. Each nesting level costs two Python frames.
    """
    return max(1, (sys.getrecursionlimit() - _FRAME_RESERVE) // 2)


class DuplicateKeys(Enum):
    """How a lenient decode resolves a dictionary key that appears twice."""
    LAST = "last"      # later occurrence replaces the earlier one
    FIRST = "first"    # earlier occurrence is kept
    REJECT = "reject"  # fail with UNORDERED_OR_DUPLICATE_KEY


class BencodeDecoder:
    """
    Decodes Bencoded byte strings into Bencode values.

    One decoder instance walks one buffer once. ``position`` is the number
    of bytes consumed so far.
    """
    def __init__(self, data: bytes, strict: bool = False, max_depth: int = MAX_DEPTH,
                 duplicate_keys: DuplicateKeys = DuplicateKeys.LAST):
        if isinstance(data, (bytearray, memoryview)):
            data = bytes(data)
        elif not isinstance(data, bytes):
            raise TypeError(f"Bencode input must be bytes, got {type(data).__name__}")
        if not isinstance(max_depth, int) or isinstance(max_depth, bool) or max_depth < 1:
            raise ValueError("max_depth must be a positive integer")
        if max_depth > max_depth_ceiling():
            raise ValueError(f"max_depth {max_depth} exceeds the recursion ceiling {max_depth_ceiling()}")

        self.data = data
        self.i = 0  # cursor index
        self.strict = strict
        self.max_depth = max_depth
        self.duplicate_keys = DuplicateKeys(duplicate_keys)

    @property
    def position(self) -> int:
        return self.i

    def decode(self):
        """Decodes one value starting at the cursor."""
        try:
            return self._parse_value(0)
        except BencodeDecodeError as exc:
            logger.debug("bencode decode failed: %s at offset %d", exc.kind.name, exc.offset)
            raise

    # --------------------------
    # Low-level utilities
    # --------------------------

    def _fail(self, kind: ErrorKind, offset: Optional[int] = None, detail: str = ""):
        raise BencodeDecodeError(kind, self.i if offset is None else offset, detail)

    def _peek(self):
        if self.i >= len(self.data):
            self._fail(ErrorKind.UNEXPECTED_EOF)
        return self.data[self.i:self.i+1]

    def _consume(self, n=1):
        """Moves cursor forward by n bytes and returns the consumed chunk."""
        chunk = self.data[self.i:self.i+n]
        self.i += n
        return chunk

    def _read_digits(self):
        """Advances over a run of ASCII digits and returns it."""
        start = self.i
        data = self.data
        end = len(data)
        i = start
        while i < end and data[i] in _DIGITS:
            i += 1
        self.i = i
        return data[start:i]

    # --------------------------
    # Parsing functions
    # --------------------------

    def _parse_value(self, depth: int):
        ch = self._peek()

        if ch == b'i':
            return self._parse_int()

        if ch in _DIGITS:  # Bencode strings start with length, which is a digit
            return self._parse_string()

        if ch == b'l':
            return self._parse_list(depth + 1)

        if ch == b'd':
            return self._parse_dict(depth + 1)

        self._fail(ErrorKind.UNEXPECTED_TOKEN, detail=f"byte {ch!r}")

    def _parse_int(self):
        """Parses an integer from the Bencoded data."""
        self._consume(1)  # skip 'i'

        negative = self._peek() == b'-'
        if negative:
            self._consume(1)

        body_start = self.i
        digits = self._read_digits()
        terminator = self._peek()

        if terminator != b'e':
            self._fail(ErrorKind.MALFORMED_INTEGER, detail=f"unexpected byte {terminator!r}")
        if not digits:
            self._fail(ErrorKind.MALFORMED_INTEGER, detail="no digits")
        if digits[0:1] == b'0' and len(digits) > 1:
            self._fail(ErrorKind.MALFORMED_INTEGER, body_start, "leading zero")
        if negative and digits == b'0':
            self._fail(ErrorKind.MALFORMED_INTEGER, body_start, "negative zero")

        self._consume(1)  # skip 'e'
        num = digits_to_int(digits)
        return BencodeInt(-num if negative else num)

    def _parse_string(self):
        """Parses a byte string from the Bencoded data."""
        # read length until ':'
        length_start = self.i
        length_bytes = self._read_digits()
        sep = self._peek()

        if sep != b':':
            self._fail(ErrorKind.MALFORMED_LENGTH, detail=f"unexpected byte {sep!r}")
        if length_bytes[0:1] == b'0' and len(length_bytes) > 1:
            self._fail(ErrorKind.MALFORMED_LENGTH, length_start, "leading zero")

        self._consume(1)  # skip ':'
        remaining = len(self.data) - self.i
        length = int(length_bytes) if len(length_bytes) <= len(b"%d" % remaining) else remaining + 1
        if length > remaining:
            self._fail(ErrorKind.UNEXPECTED_EOF,
                       detail=f"string declares {length_bytes.decode()} bytes, {remaining} remain")

        return BencodeString(self._consume(length))

    def _enter(self, depth: int):
        if depth > self.max_depth:
            self._fail(ErrorKind.NESTING_TOO_DEEP, detail=f"limit is {self.max_depth}")

    def _parse_list(self, depth: int):
        """Parses a list from the Bencoded data."""
        self._enter(depth)
        self._consume(1)  # skip 'l'
        items = []

        while self._peek() != b'e':
            items.append(self._parse_value(depth))

        self._consume(1)  # skip 'e'
        return BencodeList(items)

    def _parse_key(self):
        """Parses a dictionary key, which must be a byte string."""
        ch = self._peek()
        if ch in b"ild":
            self._fail(ErrorKind.INVALID_KEY_TYPE, detail=f"key starts with {ch!r}")
        if ch not in _DIGITS:
            self._fail(ErrorKind.UNEXPECTED_TOKEN, detail=f"byte {ch!r}")
        return self._parse_string().value

    def _parse_dict(self, depth: int):
        """Parses a dictionary from the Bencoded data."""
        self._enter(depth)
        self._consume(1)  # skip 'd'
        obj = {}
        prev = None

        while self._peek() != b'e':
            key_start = self.i
            # keys MUST be strings
            key = self._parse_key()

            if self.strict and prev is not None and key <= prev:
                self._fail(ErrorKind.UNORDERED_OR_DUPLICATE_KEY, key_start,
                           f"{key!r} follows {prev!r}")
            prev = key

            value = self._parse_value(depth)

            if key in obj:
                if self.duplicate_keys is DuplicateKeys.REJECT:
                    self._fail(ErrorKind.UNORDERED_OR_DUPLICATE_KEY, key_start, f"{key!r} repeated")
                logger.debug("duplicate dictionary key %r at offset %d, keeping %s",
                             key, key_start, self.duplicate_keys.value)
                if self.duplicate_keys is DuplicateKeys.FIRST:
                    continue
            obj[key] = value

        self._consume(1)  # skip 'e'
        return BencodeDict(obj)


def decode_prefix(data: bytes, *, strict: bool = False, max_depth: int = MAX_DEPTH,
                  duplicate_keys: DuplicateKeys = DuplicateKeys.LAST):
    """
    Decodes the value at the start of ``data``.

    Returns ``(value, consumed)``; bytes after the value are left alone.
    """
    decoder = BencodeDecoder(data, strict=strict, max_depth=max_depth, duplicate_keys=duplicate_keys)
    value = decoder.decode()
    return value, decoder.position


def decode(data: bytes, *, strict: bool = False, max_depth: int = MAX_DEPTH,
           duplicate_keys: DuplicateKeys = DuplicateKeys.LAST):
    """
    Convenience function to decode Bencoded data.

    In strict mode the buffer must hold exactly one value with canonically
    ordered dictionary keys.
    """
    value, consumed = decode_prefix(data, strict=strict, max_depth=max_depth,
                                    duplicate_keys=duplicate_keys)
    if strict and consumed != len(data):
        logger.debug("bencode decode failed: TRAILING_DATA at offset %d", consumed)
        raise BencodeDecodeError(ErrorKind.TRAILING_DATA, consumed,
                                 f"{len(data) - consumed} bytes left")
    return value


def raw_value(data: bytes, key) -> bytes:
    """
    Returns the exact encoded bytes stored under ``key`` in a top-level
    dictionary, e.g. the ``info`` dictionary whose SHA-1 is a torrent's
    info hash.
    """
    if isinstance(key, str):
        key = key.encode()

    decoder = BencodeDecoder(data)
    if decoder._peek() != b'd':
        raise BencodeDecodeError(ErrorKind.UNEXPECTED_TOKEN, 0, "top-level value is not a dictionary")
    decoder._consume(1)  # skip 'd'

    found = None
    while decoder._peek() != b'e':
        k = decoder._parse_key()
        start = decoder.i
        decoder._parse_value(1)
        if k == key:
            # last occurrence wins, matching decode()
            found = decoder.data[start:decoder.i]

    if found is None:
        raise KeyError(key)
    return found
