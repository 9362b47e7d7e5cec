from bencode import decode, decode_prefix, encode
from bencode.structure import BencodeInt, BencodeString, BencodeList, BencodeDict


def test_int():
    print("Testing integer decoding...")
    obj = decode(b"i42e")
    print("Decoded:", obj)
    assert isinstance(obj, BencodeInt)
    assert obj.value == 42

    print("Testing integer encoding...")
    enc = encode(obj)
    print("Re-encoded:", enc)
    assert enc == b"i42e"


def test_int_zero_and_negative():
    assert decode(b"i0e") == BencodeInt(0)
    assert decode(b"i-42e") == BencodeInt(-42)
    assert encode(BencodeInt(0)) == b"i0e"
    assert encode(BencodeInt(-42)) == b"i-42e"


def test_string():
    print("Testing string decoding...")
    obj = decode(b"4:spam")
    print("Decoded:", obj)
    assert isinstance(obj, BencodeString)
    assert obj.value == b"spam"

    print("Testing string encoding...")
    assert encode(obj) == b"4:spam"


def test_empty_string_consumes_two_bytes():
    value, consumed = decode_prefix(b"0:")
    assert value == BencodeString(b"")
    assert consumed == 2


def test_binary_string():
    raw = bytes(range(256))
    obj = decode(b"256:" + raw)
    assert obj.value == raw
    assert encode(obj) == b"256:" + raw


def test_list():
    print("Testing list decoding...")
    obj = decode(b"l4:spami3ee")
    print("Decoded:", obj)
    assert isinstance(obj, BencodeList)
    assert len(obj.value) == 2
    assert obj.value[0] == BencodeString(b"spam")
    assert obj.value[1] == BencodeInt(3)


def test_empty_containers():
    assert decode(b"le") == BencodeList([])
    assert decode(b"de") == BencodeDict({})


def test_dict():
    print("Testing dictionary decoding & encoding...")
    obj = decode(b"d3:cow3:mooe")
    print("Decoded:", obj)
    assert isinstance(obj, BencodeDict)
    assert obj.value[b"cow"].value == b"moo"
    enc = encode(obj)
    print("Re-encoded:", enc)
    assert enc == b"d3:cow3:mooe"


def test_end_to_end_person():
    raw = b"d3:agei25e4:name4:Johne"
    obj = decode(raw)
    assert obj == BencodeDict({b"age": BencodeInt(25), b"name": BencodeString(b"John")})
    assert encode(obj) == raw


def test_nested_structure():
    raw = b"d4:dictd3:key5:value4:listl1:a1:bee5:hello5:worlde"
    obj = decode(raw)
    inner = obj.value[b"dict"]
    assert isinstance(inner, BencodeDict)
    assert inner.value[b"list"] == BencodeList([BencodeString(b"a"), BencodeString(b"b")])
    assert encode(obj) == raw


def test_decode_prefix_reports_consumed_bytes():
    value, consumed = decode_prefix(b"i7etrailing")
    assert value == BencodeInt(7)
    assert consumed == 3


def test_lenient_decode_ignores_trailing_data():
    assert decode(b"4:spamXYZ") == BencodeString(b"spam")


def test_accepts_bytearray_and_memoryview():
    assert decode(bytearray(b"i1e")) == BencodeInt(1)
    assert decode(memoryview(b"l1:ae")) == BencodeList([BencodeString(b"a")])


def test_decoded_strings_do_not_alias_input():
    buf = bytearray(b"4:spam")
    obj = decode(buf)
    buf[2:6] = b"XXXX"
    assert obj.value == b"spam"
