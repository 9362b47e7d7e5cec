"""
Data structures for representing Bencoded types.

A bencoded value is exactly one of four variants: integer, byte string,
list, or dictionary. Every variant wraps its payload in ``.value`` and is
immutable once constructed.
"""
from types import MappingProxyType

__all__ = [
    "BencodeType",
    "BencodeInt",
    "BencodeString",
    "BencodeList",
    "BencodeDict",
    "from_python",
    "to_python",
]


class BencodeType:
    """Base class for all Bencode data types."""
    __slots__ = ("_value",)

    @property
    def value(self):
        return self._value

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _set(self, value):
        object.__setattr__(self, "_value", value)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((type(self).__name__, self._value))

    def __reduce__(self):
        return (type(self), (self._value,))

    def __repr__(self):
        return f"{type(self).__name__}({self._value!r})"


class BencodeInt(BencodeType):
    """Represents a Bencoded integer."""
    __slots__ = ()

    def __init__(self, value: int):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError("BencodeInt requires an integer.")
        self._set(int(value))


class BencodeString(BencodeType):
    """Represents a Bencoded byte string."""
    __slots__ = ()

    def __init__(self, value: bytes):
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError("BencodeString requires bytes.")
        self._set(bytes(value))

    def __len__(self):
        return len(self._value)


class BencodeList(BencodeType):
    """Represents a Bencoded list."""
    __slots__ = ()

    def __init__(self, value=()):
        if not isinstance(value, (list, tuple)):
            raise TypeError("BencodeList requires a list.")
        for item in value:
            if not isinstance(item, BencodeType):
                raise TypeError(f"BencodeList items must be Bencode values, got {type(item).__name__}.")
        self._set(tuple(value))

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    def __getitem__(self, index):
        return self._value[index]


class BencodeDict(BencodeType):
    """
    Represents a Bencoded dictionary.

    ``.value`` is a read-only view keyed by ``bytes``. Insertion order is
    kept as given; canonical key order is applied by the encoder.
    """
    __slots__ = ()

    def __init__(self, value=None):
        if value is None:
            value = {}
        if not isinstance(value, dict):
            raise TypeError("BencodeDict requires a dict.")
        owned = {}
        for k, v in value.items():
            # keys must be bytes (bencode requirement)
            if not isinstance(k, (bytes, bytearray)):
                raise TypeError("BencodeDict keys must be bytes.")
            if not isinstance(v, BencodeType):
                raise TypeError(f"BencodeDict values must be Bencode values, got {type(v).__name__}.")
            owned[bytes(k)] = v
        self._set(MappingProxyType(owned))

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return dict(self._value) == dict(other._value)

    __hash__ = None

    def __reduce__(self):
        return (type(self), (dict(self._value),))

    def __repr__(self):
        return f"BencodeDict({dict(self._value)!r})"

    def __len__(self):
        return len(self._value)

    def __iter__(self):
        return iter(self._value)

    def __contains__(self, key):
        return key in self._value

    def __getitem__(self, key):
        return self._value[key]

    def get(self, key, default=None):
        return self._value.get(key, default)


# ------------------------------------------------------------
#   Decimal conversion
# ------------------------------------------------------------

# Newer interpreters refuse int <-> str conversions past 4300 digits, so
# longer numbers are split into pieces that each stay under the cap.
_DIGIT_CHUNK = 4000
_CHUNK_LIMIT = 10 ** _DIGIT_CHUNK


def digits_to_int(digits: bytes) -> int:
    """Parses a run of ASCII digits of any length."""
    if len(digits) <= _DIGIT_CHUNK:
        return int(digits)
    split = len(digits) // 2
    low_len = len(digits) - split
    return digits_to_int(digits[:split]) * 10 ** low_len + digits_to_int(digits[split:])


def int_to_digits(n: int) -> bytes:
    """Renders a non-negative integer of any size as ASCII digits."""
    if n < _CHUNK_LIMIT:
        return b"%d" % n
    # lower bound on the digit count; log10(2) < 0.30103
    low_len = max(_DIGIT_CHUNK, (n.bit_length() * 30103 // 100000) // 2)
    high, low = divmod(n, 10 ** low_len)
    return int_to_digits(high) + int_to_digits(low).rjust(low_len, b"0")


# ------------------------------------------------------------
#   Plain Python conversions
# ------------------------------------------------------------

def _key_to_bytes(k) -> bytes:
    if isinstance(k, (bytes, bytearray)):
        return bytes(k)
    if isinstance(k, str):
        return k.encode()
    raise TypeError(f"Dictionary keys must be bytes or str, got {type(k).__name__}")


def from_python(obj) -> BencodeType:
    """
    Builds a Bencode value tree from plain Python objects.

    ``str`` values and keys are stored as their UTF-8 bytes.
    """
    if isinstance(obj, BencodeType):
        return obj

    if isinstance(obj, bool):
        raise TypeError("Cannot bencode a bool")

    if isinstance(obj, int):
        return BencodeInt(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return BencodeString(obj)

    if isinstance(obj, str):
        return BencodeString(obj.encode())

    if isinstance(obj, (list, tuple)):
        return BencodeList([from_python(x) for x in obj])

    if isinstance(obj, dict):
        items = {}
        for k, v in obj.items():
            key = _key_to_bytes(k)
            if key in items:
                raise ValueError(f"Duplicate dictionary key after encoding: {key!r}")
            items[key] = from_python(v)
        return BencodeDict(items)

    raise TypeError(f"Cannot bencode object of type {type(obj)}")


def to_python(value: BencodeType):
    """Unwraps a Bencode value tree into plain ints, bytes, lists and dicts."""
    if isinstance(value, (BencodeInt, BencodeString)):
        return value.value

    if isinstance(value, BencodeList):
        return [to_python(x) for x in value.value]

    if isinstance(value, BencodeDict):
        return {k: to_python(v) for k, v in value.value.items()}

    raise TypeError(f"Not a Bencode value: {type(value)}")
