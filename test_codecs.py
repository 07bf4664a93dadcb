"""
Tests for the per-category codecs and the compress/decompress dispatcher.

Checks exact payload layouts, round trips for every representable case,
the unique local loss, and rejection of malformed payloads.
"""

import ipaddress

import pytest

from v6codec import compress, decompress
from v6codec.core import (
    Category,
    CompressedRecord,
    InvalidInputError,
    Ipv6Compressor,
    ProviderPattern,
)
from v6codec.core.interface_id import (
    DOCUMENTATION_MARKERS,
    LINK_LOCAL_MARKERS,
    Eui64Interface,
    SmallSegment,
    SparseSegments,
    ZeroInterface,
    analyze,
)
from v6codec.core.category import segments_of


def addr(text):
    return ipaddress.IPv6Address(text)


def roundtrip(text, port=None):
    record = compress(text, port)
    return record, decompress(record)


# Concrete scenarios

def test_loopback_with_port():
    record, (ip, port) = roundtrip("::1", 443)

    assert record.category is Category.LOOPBACK
    assert len(record.payload) == 6
    assert record.payload == bytes([0, 0, 1, 0, 0, 0])
    assert record.compressed_bits == 48
    assert record.recommended_word_count() >= 4
    assert (ip, port) == (addr("::1"), 443)


def test_link_local_single_small_segment():
    record, (ip, port) = roundtrip("fe80::1", 22)

    assert record.category is Category.LINK_LOCAL
    # value 1 sits in segment 7, relative position 3
    assert record.payload == bytes([1, 3, 1, 0, 0, 0])
    assert record.compressed_bits == 48
    assert record.compression_ratio() > 0.3
    assert (ip, port) == (addr("fe80::1"), 22)


def test_documentation_single_small_segment():
    record, (ip, port) = roundtrip("2001:db8::1", 80)

    assert record.category is Category.DOCUMENTATION
    assert record.payload == bytes([0, 0, 0, 0, 1, 3, 1])
    assert record.compressed_bits == 56
    assert 4 <= record.recommended_word_count() <= 6
    assert (ip, port) == (addr("2001:db8::1"), 80)


def test_global_unicast_provider_hit():
    record, (ip, port) = roundtrip("2001:4860:4860::8888")

    assert record.category is Category.GLOBAL_UNICAST
    assert len(record.payload) == 13
    assert record.payload[0] == 0
    assert record.payload[1:3] == bytes([0x48, 0x60])
    assert record.payload[-2:] == bytes([0x88, 0x88])
    assert record.compressed_bits == 3 + 48
    assert (ip, port) == (addr("2001:4860:4860::8888"), None)


def test_unique_local_drops_interface_identifier():
    record, (ip, port) = roundtrip("fc00:1234:5678:9abc::1")

    assert record.category is Category.UNIQUE_LOCAL
    assert len(record.payload) == 8
    assert record.payload == bytes.fromhex("fc00123456789abc")
    assert record.compressed_bits == 67
    assert ip == addr("fc00:1234:5678:9abc::")
    assert port is None


# Loopback / unspecified

def test_unspecified():
    record, (ip, port) = roundtrip("::", 8080)

    assert record.category is Category.UNSPECIFIED
    assert record.payload == bytes(6)
    assert record.compressed_bits == 48
    assert (ip, port) == (addr("::"), 8080)


def test_singleton_decoders_ignore_payload(compressor):
    loopback = CompressedRecord(Category.LOOPBACK, b"\xff\xee", 16)
    unspecified = CompressedRecord(Category.UNSPECIFIED, b"\x42", 8)

    assert compressor.decompress(loopback) == (addr("::1"), None)
    assert compressor.decompress(unspecified) == (addr("::"), None)


# Link-local

@pytest.mark.parametrize("text,payload", [
    ("fe80::", [0, 0, 0, 0, 0, 0]),
    ("fe80::5:0:0:0", [1, 0, 5, 0, 0, 0]),
    ("fe80::ab:0", [1, 2, 0xAB, 0, 0, 0]),
    ("fe80::ff", [1, 3, 0xFF, 0, 0, 0]),
])
def test_link_local_fixed_size_forms(text, payload):
    record, (ip, _) = roundtrip(text)

    assert record.payload == bytes(payload)
    assert record.compressed_bits == 48
    assert ip == addr(text)


def test_link_local_eui64_with_zero_last_segment():
    record, (ip, _) = roundtrip("fe80::211:22ff:33:0")

    # u/l bit (0x02 of the high byte) is cleared in the stored value
    assert record.payload == bytes([2, 0x11, 0x00, 0xFF, 0x22, 0x33])
    assert record.compressed_bits == 48
    assert ip == addr("fe80::211:22ff:33:0")


def test_link_local_eui64_guard_falls_back_to_sparse():
    # segment 6 high byte would be lost in the 5-byte form
    record, (ip, _) = roundtrip("fe80::211:22ff:fe33:0")
    assert record.payload[0] == 3
    assert ip == addr("fe80::211:22ff:fe33:0")

    # segment 7 non-zero
    record, (ip, _) = roundtrip("fe80::211:22ff:fe33:4455")
    assert record.payload[0] == 3
    assert ip == addr("fe80::211:22ff:fe33:4455")


def test_link_local_sparse_layout():
    record, (ip, _) = roundtrip("fe80::1234")

    assert record.payload == bytes([3, 3, 0x12, 0x34, 255])
    assert record.compressed_bits == 3 + 5 * 8
    assert ip == addr("fe80::1234")

    record, (ip, _) = roundtrip("fe80::1:0:abcd:2")
    assert record.payload == bytes([3, 0, 0, 1, 2, 0xAB, 0xCD, 3, 0, 2, 255])
    assert record.compressed_bits == 3 + 11 * 8
    assert ip == addr("fe80::1:0:abcd:2")


def test_link_local_assumes_zero_middle_segments():
    # only segments 4-7 are stored; segments 1-3 always come back zero
    record, (ip, _) = roundtrip("fe80:1::1")
    assert record.category is Category.LINK_LOCAL
    assert ip == addr("fe80::1")


# Documentation

def test_documentation_zero_interface():
    record, (ip, _) = roundtrip("2001:db8:85a3::")

    assert record.payload == bytes([0x85, 0xA3, 0, 0, 0])
    assert record.compressed_bits == 40
    assert ip == addr("2001:db8:85a3::")


def test_documentation_sparse_interface():
    text = "2001:db8:85a3::8a2e:370:7334"
    record, (ip, _) = roundtrip(text)

    assert record.payload == bytes([
        0x85, 0xA3, 0x00, 0x00,
        2,
        1, 0x8A, 0x2E,
        2, 0x03, 0x70,
        3, 0x73, 0x34,
        255,
    ])
    assert record.compressed_bits == len(record.payload) * 8
    assert ip == addr(text)


def test_documentation_never_uses_eui64():
    record, (ip, _) = roundtrip("2001:db8::211:22ff:33:0")
    assert record.payload[4] == 2
    assert ip == addr("2001:db8::211:22ff:33:0")


# Global unicast

@pytest.mark.parametrize("text,pattern_id", [
    ("2001:4860:4860::8844", 0),
    ("2001:470:1:2:3:4:5:6", 1),
    ("2001:558:feed::1", 2),
])
def test_global_unicast_provider_patterns(text, pattern_id):
    record, (ip, _) = roundtrip(text)

    assert len(record.payload) == 13
    assert record.payload[0] == pattern_id
    assert ip == addr(text)


def test_global_unicast_fallback():
    record, (ip, port) = roundtrip("2606:4700:4700::1111", 443)

    assert record.category is Category.GLOBAL_UNICAST
    assert record.payload == addr("2606:4700:4700::1111").packed
    assert record.compressed_bits == 3 + 128
    assert (ip, port) == (addr("2606:4700:4700::1111"), 443)


def test_custom_provider_table():
    google_v6 = ProviderPattern(7, (0x2A00, 0x1450), "Google EU")
    custom = Ipv6Compressor(providers=[google_v6])

    record = custom.compress("2a00:1450:4001:82a::200e")
    assert record.payload[0] == 7
    assert len(record.payload) == 13
    assert custom.decompress(record)[0] == addr("2a00:1450:4001:82a::200e")

    # the built-in table has no pattern 7
    with pytest.raises(InvalidInputError, match="pattern ID: 7"):
        decompress(record)


def test_duplicate_provider_ids_rejected():
    with pytest.raises(InvalidInputError):
        Ipv6Compressor(providers=[
            ProviderPattern(0, (0x2001, 0x4860)),
            ProviderPattern(0, (0x2001, 0x0470)),
        ])


# Special

def test_special_multicast():
    record, (ip, _) = roundtrip("ff02::1")

    assert record.category is Category.SPECIAL
    assert record.payload == addr("ff02::1").packed
    assert record.compressed_bits == 3 + 128
    assert ip == addr("ff02::1")


def test_special_reads_first_sixteen_bytes(compressor):
    record = CompressedRecord(Category.SPECIAL, addr("ff02::2").packed + b"\x00", 131)
    assert compressor.decompress(record)[0] == addr("ff02::2")


# Unique local legacy payloads

def test_unique_local_legacy_sixteen_bytes(compressor):
    original = addr("fd12:3456:789a:1::abcd")
    record = CompressedRecord(Category.UNIQUE_LOCAL, original.packed, 131)

    with pytest.warns(DeprecationWarning):
        ip, _ = compressor.decompress(record)
    assert ip == original


def test_round_trip_sample_addresses(compressor, sample_addresses):
    for address in sample_addresses:
        record = compressor.compress(address, 1234)
        assert compressor.decompress(record) == (address, 1234)


def test_compress_accepts_strings_bytes_and_ints(compressor):
    expected = compressor.compress("fe80::1")
    assert compressor.compress(addr("fe80::1")) == expected
    assert compressor.compress(addr("fe80::1").packed) == expected
    assert compressor.compress(int(addr("fe80::1"))) == expected
    assert compressor.compress("[fe80::1]") == expected


@pytest.mark.parametrize("value", ["not-an-address", "192.168.1.1", "fe80::1::2", b"\x00" * 4, 2 ** 128])
def test_compress_rejects_bad_addresses(value):
    with pytest.raises(InvalidInputError):
        compress(value)


def test_compress_rejects_bad_port():
    with pytest.raises(InvalidInputError, match="Port"):
        compress("::1", 70000)


# Malformed payloads

@pytest.mark.parametrize("category,payload,message", [
    (Category.LINK_LOCAL, [4, 0, 0, 0, 0, 0], "marker"),
    (Category.LINK_LOCAL, [1], "Truncated"),
    (Category.LINK_LOCAL, [1, 0], "Truncated"),
    (Category.LINK_LOCAL, [1, 7, 1], "position"),
    (Category.LINK_LOCAL, [2, 1, 2, 3], "Truncated"),
    (Category.LINK_LOCAL, [3, 0, 0], "Truncated"),
    (Category.LINK_LOCAL, [3, 0, 0, 1], "end marker"),
    (Category.LINK_LOCAL, [3, 9, 0, 1, 255], "position"),
    (Category.DOCUMENTATION, [0, 0, 0, 0], "too short"),
    (Category.DOCUMENTATION, [0, 0, 0, 0, 3], "marker"),
    (Category.DOCUMENTATION, [0, 0, 0, 0, 1, 0], "Truncated"),
    (Category.DOCUMENTATION, [0, 0, 0, 0, 2, 0, 0, 1], "end marker"),
    (Category.UNIQUE_LOCAL, [0xFC] * 10, "length"),
    (Category.GLOBAL_UNICAST, [0x20] * 12, "length"),
    (Category.GLOBAL_UNICAST, [9] + [0] * 12, "pattern ID"),
    (Category.SPECIAL, [0xFF] * 15, "special"),
])
def test_malformed_payloads_raise(compressor, category, payload, message):
    record = CompressedRecord(category, bytes(payload), len(payload) * 8)

    with pytest.raises(InvalidInputError, match=message):
        compressor.decompress(record)


def test_invalid_input_error_is_value_error():
    record = CompressedRecord(Category.GLOBAL_UNICAST, b"\x00", 8)
    with pytest.raises(ValueError):
        decompress(record)


# Structured interface-identifier shapes

@pytest.mark.parametrize("text,shape", [
    ("fe80::", ZeroInterface()),
    ("fe80::1", SmallSegment(3, 1)),
    ("fe80::211:22ff:33:0", Eui64Interface(bytes([0x11, 0x00, 0xFF, 0x22, 0x33]))),
    ("fe80::1234", SparseSegments(((3, 0x1234),))),
    ("fe80::1:2", SparseSegments(((2, 1), (3, 2)))),
])
def test_analyze_link_local_shapes(text, shape):
    segments = segments_of(addr(text))

    assert analyze(segments, allow_eui64=True) == shape
    assert LINK_LOCAL_MARKERS.decode(compress(text).payload) == shape


def test_analyze_without_eui64():
    segments = segments_of(addr("fe80::211:22ff:33:0"))
    assert analyze(segments) == SparseSegments(((0, 0x0211), (1, 0x22FF), (2, 0x33)))


def test_marker_numbering_differs_by_category():
    sparse = SparseSegments(((3, 0x1234),))

    assert LINK_LOCAL_MARKERS.encode(sparse)[0] == 3
    assert DOCUMENTATION_MARKERS.encode(sparse)[0] == 2
    assert DOCUMENTATION_MARKERS.decode(bytes([2, 3, 0x12, 0x34, 255])) == sparse

    with pytest.raises(InvalidInputError):
        DOCUMENTATION_MARKERS.encode(Eui64Interface(bytes(5)))


def test_shape_validation():
    with pytest.raises(InvalidInputError):
        SmallSegment(4, 1)
    with pytest.raises(InvalidInputError):
        SmallSegment(0, 256)
    with pytest.raises(InvalidInputError):
        SparseSegments(((0, 0x10000),))
    with pytest.raises(InvalidInputError):
        Eui64Interface(bytes(6))
