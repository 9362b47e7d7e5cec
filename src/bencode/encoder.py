"""
Bencode encoder for BitTorrent metainfo and tracker responses.

Output is always canonical: dictionary keys are emitted in ascending
byte order no matter how the dictionary was built.
"""
from .structure import (BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, from_python,
                        int_to_digits)


def encode(obj) -> bytes:
    """Encodes a Python object or BencodeType into bencoded bytes."""
    if not isinstance(obj, BencodeType):
        obj = from_python(obj)

    out = bytearray()
    _write(obj, out)
    return bytes(out)


def _write(obj: BencodeType, out: bytearray):
    if isinstance(obj, BencodeInt):
        out += encode_int(obj.value)

    elif isinstance(obj, BencodeString):
        out += encode_bytes(obj.value)

    elif isinstance(obj, BencodeList):
        out += b"l"
        for item in obj.value:
            _write(item, out)
        out += b"e"

    elif isinstance(obj, BencodeDict):
        out += b"d"
        for key in sorted(obj.value):
            out += encode_bytes(key)
            _write(obj.value[key], out)
        out += b"e"

    else:
        raise TypeError(f"Cannot bencode object of type {type(obj)}")


# ------------------------------------------------------------
#   Encoding primitives
# ------------------------------------------------------------

def encode_int(n: int) -> bytes:
    """Encodes an integer to bencoded bytes (e.g., i123e)."""
    if isinstance(n, bool):
        raise TypeError("Cannot bencode a bool")
    if n < 0:
        return b"i-" + int_to_digits(-n) + b"e"
    return b"i" + int_to_digits(n) + b"e"


def encode_bytes(b: bytes) -> bytes:
    """Encodes bytes to bencoded bytes (e.g., 4:spam)."""
    return b"%d:" % len(b) + bytes(b)


def encode_str(s: str) -> bytes:
    """Encodes a string to bencoded bytes (e.g., 4:spam)."""
    return encode_bytes(s.encode())


def encode_list(lst) -> bytes:
    """Encodes a list to bencoded bytes (e.g., l4:spame)."""
    return encode(from_python(list(lst)))


def encode_dict(d: dict) -> bytes:
    """Encodes a dictionary to bencoded bytes (e.g., d3:cow3:moo4:spam4:eggse)."""
    return encode(from_python(d))
