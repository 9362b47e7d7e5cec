"""
Bencode package for encoding and decoding BitTorrent data.
"""
from .decoder import MAX_DEPTH, BencodeDecoder, DuplicateKeys, decode, decode_prefix, max_depth_ceiling, raw_value
from .encoder import encode
from .errors import BencodeDecodeError, ErrorKind
from .structure import BencodeDict, BencodeInt, BencodeList, BencodeString, BencodeType, from_python, to_python

__all__ = [
    'decode', 'decode_prefix', 'raw_value', 'encode',
    'BencodeDecoder', 'DuplicateKeys', 'MAX_DEPTH', 'max_depth_ceiling',
    'BencodeDecodeError', 'ErrorKind',
    'BencodeType', 'BencodeInt', 'BencodeString', 'BencodeList', 'BencodeDict',
    'from_python', 'to_python',
]
