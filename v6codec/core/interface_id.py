"""
Sub-encodings for the 64-bit interface identifier (segments 4-7).

The link-local and documentation codecs both shrink the interface identifier
by recognising a few common shapes: all zero, one small segment, an EUI-64
derived value, or a sparse list of non-zero segments. Each shape is a small
frozen dataclass so encoders and tests work with structured values rather
than byte offsets. A ``MarkerScheme`` maps shapes to the one-byte marker
that selects them; the two categories number their markers differently.
"""

from dataclasses import dataclass
from typing import Dict, List, MutableSequence, Sequence, Tuple, Type, Union

from .errors import InvalidInputError

INTERFACE_START = 4
INTERFACE_SEGMENTS = 4
END_OF_SEGMENTS = 255

UNIVERSAL_LOCAL_BIT = 0x0200


def _check_position(position: int) -> None:
    if not 0 <= position < INTERFACE_SEGMENTS:
        raise InvalidInputError(
            f"Interface segment position {position} out of range (expected 0-3)"
        )


@dataclass(frozen=True)
class ZeroInterface:
    """Interface identifier with all four segments zero."""

    def body(self) -> bytes:
        return b""

    def apply(self, segments: MutableSequence[int]) -> None:
        for i in range(INTERFACE_START, INTERFACE_START + INTERFACE_SEGMENTS):
            segments[i] = 0


@dataclass(frozen=True)
class SmallSegment:
    """Exactly one non-zero interface segment whose value fits in a byte."""

    position: int
    value: int

    def __post_init__(self):
        _check_position(self.position)
        if not 0 <= self.value <= 0xFF:
            raise InvalidInputError(f"Small segment value {self.value} exceeds one byte")

    def body(self) -> bytes:
        return bytes([self.position, self.value])

    def apply(self, segments: MutableSequence[int]) -> None:
        ZeroInterface().apply(segments)
        segments[INTERFACE_START + self.position] = self.value


@dataclass(frozen=True)
class Eui64Interface:
    """
    Interface identifier derived from a hardware address.

    Stores five bytes: segment 4 (low byte, then high byte with the
    universal/local bit cleared), segment 5 (low, high) and the low byte of
    segment 6. Segment 7 is implied zero and the universal/local bit is set
    again on reconstruction.
    """

    mac: bytes

    def __post_init__(self):
        if len(self.mac) != 5:
            raise InvalidInputError(
                f"EUI-64 value must be 5 bytes, got {len(self.mac)}"
            )

    @classmethod
    def from_segments(cls, segments: Sequence[int]) -> "Eui64Interface":
        seg4, seg5, seg6 = segments[4], segments[5], segments[6]
        return cls(bytes([
            seg4 & 0xFF,
            ((seg4 & ~UNIVERSAL_LOCAL_BIT) >> 8) & 0xFF,
            seg5 & 0xFF,
            seg5 >> 8,
            seg6 & 0xFF,
        ]))

    @staticmethod
    def representable(segments: Sequence[int]) -> bool:
        """True when the address survives the 5-byte form without loss."""
        return (
            segments[4] & UNIVERSAL_LOCAL_BIT == UNIVERSAL_LOCAL_BIT
            and segments[7] == 0
            and segments[6] <= 0xFF
        )

    def body(self) -> bytes:
        return bytes(self.mac)

    def apply(self, segments: MutableSequence[int]) -> None:
        mac = self.mac
        segments[4] = (mac[1] << 8) | mac[0] | UNIVERSAL_LOCAL_BIT
        segments[5] = (mac[3] << 8) | mac[2]
        segments[6] = mac[4]
        segments[7] = 0


@dataclass(frozen=True)
class SparseSegments:
    """Non-zero interface segments as (position, value) pairs."""

    entries: Tuple[Tuple[int, int], ...]

    def __post_init__(self):
        for position, value in self.entries:
            _check_position(position)
            if not 0 <= value <= 0xFFFF:
                raise InvalidInputError(f"Segment value {value} exceeds 16 bits")

    def body(self) -> bytes:
        out = bytearray()
        for position, value in self.entries:
            out.append(position)
            out.extend(value.to_bytes(2, "big"))
        out.append(END_OF_SEGMENTS)
        return bytes(out)

    def apply(self, segments: MutableSequence[int]) -> None:
        ZeroInterface().apply(segments)
        for position, value in self.entries:
            segments[INTERFACE_START + position] = value


InterfaceId = Union[ZeroInterface, SmallSegment, Eui64Interface, SparseSegments]


def non_zero_segments(segments: Sequence[int]) -> List[Tuple[int, int]]:
    """Returns (relative position, value) for each non-zero segment 4-7."""
    return [
        (i - INTERFACE_START, segments[i])
        for i in range(INTERFACE_START, INTERFACE_START + INTERFACE_SEGMENTS)
        if segments[i] != 0
    ]


def analyze(segments: Sequence[int], allow_eui64: bool = False) -> InterfaceId:
    """
    Picks the most compact shape for an address's interface identifier.

    Args:
        segments: All 8 address segments
        allow_eui64: Whether the EUI-64 shape may be chosen

    Returns:
        The first matching shape, in order zero, small, EUI-64, sparse
    """
    present = non_zero_segments(segments)

    if not present:
        return ZeroInterface()
    if len(present) == 1 and present[0][1] <= 0xFF:
        position, value = present[0]
        return SmallSegment(position, value)
    if allow_eui64 and Eui64Interface.representable(segments):
        return Eui64Interface.from_segments(segments)
    return SparseSegments(tuple(present))


def _parse_small(data: bytes, offset: int, label: str) -> SmallSegment:
    if len(data) < offset + 2:
        raise InvalidInputError(
            f"Truncated {label} payload: single-segment form needs 2 bytes "
            f"after the marker, got {len(data) - offset}"
        )
    return SmallSegment(data[offset], data[offset + 1])


def _parse_eui64(data: bytes, offset: int, label: str) -> Eui64Interface:
    if len(data) < offset + 5:
        raise InvalidInputError(
            f"Truncated {label} payload: EUI-64 form needs 5 bytes "
            f"after the marker, got {len(data) - offset}"
        )
    return Eui64Interface(bytes(data[offset:offset + 5]))


def _parse_sparse(data: bytes, offset: int, label: str) -> SparseSegments:
    entries = []
    i = offset
    while True:
        if i >= len(data):
            raise InvalidInputError(
                f"Truncated {label} payload: missing end marker {END_OF_SEGMENTS}"
            )
        if data[i] == END_OF_SEGMENTS:
            break
        if i + 2 >= len(data):
            raise InvalidInputError(
                f"Truncated {label} payload: incomplete segment entry at byte {i}"
            )
        entries.append((data[i], (data[i + 1] << 8) | data[i + 2]))
        i += 3
    return SparseSegments(tuple(entries))


_PARSERS = {
    ZeroInterface: lambda data, offset, label: ZeroInterface(),
    SmallSegment: _parse_small,
    Eui64Interface: _parse_eui64,
    SparseSegments: _parse_sparse,
}


class MarkerScheme:
    """
    One category's numbering of interface-identifier shapes.

    Args:
        label: Category name used in error messages
        markers: Shape class -> marker byte

    Example:
        >>> scheme = MarkerScheme("documentation", {ZeroInterface: 0})
        >>> scheme.encode(ZeroInterface())
        b'\\x00'
    """

    def __init__(self, label: str, markers: Dict[Type, int]):
        self.label = label
        self.markers = dict(markers)
        self.shapes = {marker: shape for shape, marker in self.markers.items()}

    def encode(self, shape: InterfaceId) -> bytes:
        marker = self.markers.get(type(shape))
        if marker is None:
            raise InvalidInputError(
                f"{type(shape).__name__} has no {self.label} marker"
            )
        return bytes([marker]) + shape.body()

    def decode(self, data: bytes, offset: int = 0) -> InterfaceId:
        """
        Parses the marker at ``offset`` and the bytes that follow it.

        Raises:
            InvalidInputError: On a missing or unknown marker, or truncated data
        """
        if offset >= len(data):
            raise InvalidInputError(f"Missing {self.label} marker byte")
        marker = data[offset]
        shape = self.shapes.get(marker)
        if shape is None:
            raise InvalidInputError(f"Invalid {self.label} marker: {marker}")
        return _PARSERS[shape](data, offset + 1, self.label)


LINK_LOCAL_MARKERS = MarkerScheme("link-local", {
    ZeroInterface: 0,
    SmallSegment: 1,
    Eui64Interface: 2,
    SparseSegments: 3,
})

DOCUMENTATION_MARKERS = MarkerScheme("documentation", {
    ZeroInterface: 0,
    SmallSegment: 1,
    SparseSegments: 2,
})
