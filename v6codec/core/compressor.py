"""
High-level compression and decompression interface.

This module provides the Ipv6Compressor class that orchestrates the
pipeline: classify the address, dispatch to the category codec, and wrap the
result in a CompressedRecord. Decompression reads the stored category and
runs the matching decoder.
"""

import ipaddress
import logging
from typing import Optional, Sequence, Tuple

from ..io.addresses import AddressLike, as_address
from .category import Category, classify, segments_of
from .codecs import CODECS, pack_segments
from .providers import PROVIDER_PATTERNS, ProviderPattern, build_table
from .record import CompressedRecord

logger = logging.getLogger(__name__)


class Ipv6Compressor:
    """
    Category-aware IPv6 address compressor.

    The compressor holds the provider pattern table used by the global
    unicast codec. Both ends of an exchange must use the same table.

    Args:
        providers: Provider patterns for global unicast compression

    Example:
        >>> compressor = Ipv6Compressor()
        >>> record = compressor.compress("2001:4860:4860::8888")
        >>> record.category
        <Category.GLOBAL_UNICAST: 4>
        >>> compressor.decompress(record)
        (IPv6Address('2001:4860:4860::8888'), None)
    """

    def __init__(self, providers: Sequence[ProviderPattern] = PROVIDER_PATTERNS):
        self.providers = build_table(providers)

    def compress(
        self,
        address: AddressLike,
        port: Optional[int] = None
    ) -> CompressedRecord:
        """
        Compresses an IPv6 address with an optional port.

        Args:
            address: Address to compress
            port: Optional port carried alongside the payload

        Returns:
            Compressed record

        Raises:
            InvalidInputError: If the address or port is invalid
        """
        ip = as_address(address)
        category = classify(ip)
        payload, compressed_bits = CODECS[category].encode(segments_of(ip), self.providers)

        logger.debug(
            "Compressed %s as %s: %d bytes, %d bits",
            ip, category.name, len(payload), compressed_bits
        )

        return CompressedRecord(
            category=category,
            payload=payload,
            compressed_bits=compressed_bits,
            port=port,
        )

    def decompress(
        self,
        record: CompressedRecord
    ) -> Tuple[ipaddress.IPv6Address, Optional[int]]:
        """
        Decompresses a record back to its address and port.

        Unique local records come back with a zero interface identifier.

        Args:
            record: Record produced by ``compress``

        Returns:
            Tuple of (address, port)

        Raises:
            InvalidInputError: If the payload is malformed for its category
        """
        category = Category.from_bits(record.category)
        segments = CODECS[category].decode(bytes(record.payload), self.providers)

        ip = ipaddress.IPv6Address(pack_segments(segments))

        logger.debug("Decompressed %s record to %s", category.name, ip)

        return ip, record.port

    def classify(self, address: AddressLike) -> Category:
        return classify(as_address(address))


_default = Ipv6Compressor()


def compress(address: AddressLike, port: Optional[int] = None) -> CompressedRecord:
    """Compresses an address with the built-in provider table."""
    return _default.compress(address, port)


def decompress(record: CompressedRecord) -> Tuple[ipaddress.IPv6Address, Optional[int]]:
    """Decompresses a record with the built-in provider table."""
    return _default.decompress(record)

