"""
Per-category encoders and decoders.

Each category has an encode function returning ``(payload, compressed_bits)``
and a decode function turning a payload back into 8 segments. The ``CODECS``
table holds one pair per category and is checked to be complete at import.

Bit accounting differs by category. Unique local, global unicast, special
and the sparse link-local form count 3 extra bits for the category tag;
documentation and the fixed 6-byte forms do not. Downstream word counts
depend on these exact values.
"""

import struct
import warnings
from typing import Callable, Dict, List, NamedTuple, Sequence, Tuple

from .category import Category
from .errors import InvalidInputError
from .interface_id import (
    DOCUMENTATION_MARKERS,
    LINK_LOCAL_MARKERS,
    SparseSegments,
    analyze,
)
from .providers import ProviderPattern, lookup_pattern, match_provider

CATEGORY_BITS = 3
FIXED_PAYLOAD_BYTES = 6
FIXED_PAYLOAD_BITS = 48

LOOPBACK_PADDING = bytes([0x00, 0x00, 0x01, 0x00, 0x00, 0x00])
UNSPECIFIED_PADDING = bytes(FIXED_PAYLOAD_BYTES)

LINK_LOCAL_PREFIX = (0xFE80, 0x0000, 0x0000, 0x0000)
DOCUMENTATION_PREFIX = (0x2001, 0x0DB8)

Providers = Sequence[ProviderPattern]


def pack_segments(segments: Sequence[int]) -> bytes:
    return struct.pack(f">{len(segments)}H", *segments)


def unpack_segments(data: bytes, count: int) -> List[int]:
    return list(struct.unpack(f">{count}H", data[:count * 2]))


def encode_loopback(segments, providers: Providers) -> Tuple[bytes, int]:
    return LOOPBACK_PADDING, FIXED_PAYLOAD_BITS


def decode_loopback(data: bytes, providers: Providers) -> List[int]:
    return [0, 0, 0, 0, 0, 0, 0, 1]


def encode_unspecified(segments, providers: Providers) -> Tuple[bytes, int]:
    return UNSPECIFIED_PADDING, FIXED_PAYLOAD_BITS


def decode_unspecified(data: bytes, providers: Providers) -> List[int]:
    return [0] * 8


def encode_link_local(segments: Sequence[int], providers: Providers) -> Tuple[bytes, int]:
    """
    Stores only the interface identifier; segments 0-3 are fe80:0:0:0.

    The zero, small and EUI-64 forms are padded to 6 bytes and declared as
    48 bits. The sparse form is variable length and declared as
    3 + 8 * len(payload) bits.
    """
    shape = analyze(segments, allow_eui64=True)
    payload = LINK_LOCAL_MARKERS.encode(shape)

    if isinstance(shape, SparseSegments):
        return payload, CATEGORY_BITS + len(payload) * 8

    return payload.ljust(FIXED_PAYLOAD_BYTES, b"\x00"), FIXED_PAYLOAD_BITS


def decode_link_local(data: bytes, providers: Providers) -> List[int]:
    segments = list(LINK_LOCAL_PREFIX) + [0, 0, 0, 0]
    LINK_LOCAL_MARKERS.decode(data).apply(segments)
    return segments


def encode_unique_local(segments: Sequence[int], providers: Providers) -> Tuple[bytes, int]:
    """Keeps prefix, global id and subnet; the interface identifier is dropped."""
    return pack_segments(segments[:4]), CATEGORY_BITS + 64


def decode_unique_local(data: bytes, providers: Providers) -> List[int]:
    if len(data) == 8:
        return unpack_segments(data, 4) + [0, 0, 0, 0]
    if len(data) == 16:
        warnings.warn(
            "Decoding legacy 16-byte unique local payload; current encoders "
            "store only the first 64 bits",
            DeprecationWarning,
            stacklevel=3,
        )
        return unpack_segments(data, 8)
    raise InvalidInputError(
        f"Invalid unique local data length: {len(data)} (expected 8 or 16 bytes)"
    )


def encode_documentation(segments: Sequence[int], providers: Providers) -> Tuple[bytes, int]:
    payload = pack_segments(segments[2:4]) + DOCUMENTATION_MARKERS.encode(analyze(segments))
    return payload, len(payload) * 8


def decode_documentation(data: bytes, providers: Providers) -> List[int]:
    if len(data) < 5:
        raise InvalidInputError(
            "Documentation data too short - expected at least 5 bytes"
        )
    segments = list(DOCUMENTATION_PREFIX) + unpack_segments(data, 2) + [0, 0, 0, 0]
    DOCUMENTATION_MARKERS.decode(data, offset=4).apply(segments)
    return segments


def encode_global_unicast(segments: Sequence[int], providers: Providers) -> Tuple[bytes, int]:
    """
    Replaces a known provider /32 prefix with its pattern id.

    Falls back to the full 16 bytes when no provider matches.
    """
    pattern = match_provider(segments, providers)
    if pattern is not None:
        payload = bytes([pattern.pattern_id]) + pack_segments(segments[2:])
        return payload, CATEGORY_BITS + 48
    return pack_segments(segments), CATEGORY_BITS + 128


def decode_global_unicast(data: bytes, providers: Providers) -> List[int]:
    if len(data) == 16:
        return unpack_segments(data, 8)
    if len(data) == 13:
        pattern = lookup_pattern(data[0], providers)
        return list(pattern.prefix) + unpack_segments(data[1:], 6)
    raise InvalidInputError(
        f"Invalid global unicast data length: {len(data)} bytes"
    )


def encode_special(segments: Sequence[int], providers: Providers) -> Tuple[bytes, int]:
    return pack_segments(segments), CATEGORY_BITS + 128


def decode_special(data: bytes, providers: Providers) -> List[int]:
    if len(data) < 16:
        raise InvalidInputError(
            f"Invalid special address data: expected 16 bytes, got {len(data)}"
        )
    return unpack_segments(data, 8)


class Codec(NamedTuple):
    encode: Callable[[Sequence[int], Providers], Tuple[bytes, int]]
    decode: Callable[[bytes, Providers], List[int]]


CODECS: Dict[Category, Codec] = {
    Category.LOOPBACK: Codec(encode_loopback, decode_loopback),
    Category.LINK_LOCAL: Codec(encode_link_local, decode_link_local),
    Category.UNIQUE_LOCAL: Codec(encode_unique_local, decode_unique_local),
    Category.DOCUMENTATION: Codec(encode_documentation, decode_documentation),
    Category.GLOBAL_UNICAST: Codec(encode_global_unicast, decode_global_unicast),
    Category.UNSPECIFIED: Codec(encode_unspecified, decode_unspecified),
    Category.SPECIAL: Codec(encode_special, decode_special),
}

_missing = set(Category) - set(CODECS)
if _missing:
    raise RuntimeError(f"No codec registered for {sorted(c.name for c in _missing)}")
