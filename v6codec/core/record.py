"""
The compressed record produced by the codec.

A record carries the category, the payload bytes, the declared bit length
and an optional port. The port never goes into the payload; it only adds 16
bits to the size computations.
"""

from dataclasses import dataclass
from typing import Optional

from ..utils import metrics
from .category import Category
from .errors import InvalidInputError

ORIGINAL_BITS = 128


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class CompressedRecord:
    """
    Compressed representation of an IPv6 address and optional port.

    Args:
        category: Category the address was classified into
        payload: Codec output bytes, never empty
        compressed_bits: Declared size of the payload in bits
        port: Optional port, 0-65535
        original_bits: Size of the uncompressed address (always 128)

    Example:
        >>> record = compress("fe80::1", port=22)
        >>> record.payload
        b'\\x01\\x03\\x01\\x00\\x00\\x00'
        >>> record.recommended_word_count()
        5
    """

    category: Category
    payload: bytes
    compressed_bits: int
    port: Optional[int] = None
    original_bits: int = ORIGINAL_BITS

    def __post_init__(self):
        if not isinstance(self.category, Category):
            object.__setattr__(self, 'category', Category.from_bits(self.category))
        object.__setattr__(self, 'payload', bytes(self.payload))

        if not self.payload:
            raise InvalidInputError("Empty compressed data")
        if not _is_int(self.compressed_bits) or self.compressed_bits <= 0:
            raise InvalidInputError(
                f"Compressed bits must be a positive integer, got {self.compressed_bits!r}"
            )
        if self.port is not None:
            if not _is_int(self.port):
                raise InvalidInputError(f"Port must be an integer, got {self.port!r}")
            if not 0 <= self.port <= 0xFFFF:
                raise InvalidInputError(f"Port {self.port} out of range (0-65535)")

    @classmethod
    def from_bytes(cls, data: bytes, category: Category) -> "CompressedRecord":
        """
        Creates a record from raw payload bytes, declaring 8 bits per byte.

        Raises:
            InvalidInputError: If data is empty
        """
        return cls(category=category, payload=data, compressed_bits=len(data) * 8)

    def as_bytes(self) -> bytes:
        """Returns a copy of the payload."""
        return bytes(self.payload)

    def total_bits(self) -> int:
        """Compressed size including the port, if any."""
        return metrics.total_bits(self)

    def recommended_word_count(self) -> int:
        return metrics.recommended_word_count(self)

    def compression_ratio(self) -> float:
        return metrics.compression_ratio(self)

    def category_description(self) -> str:
        return self.category.description
