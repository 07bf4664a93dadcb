"""
V6-Codec: Category-Aware IPv6 Address Compression

Compresses an IPv6 address and optional port into a small tagged payload by
exploiting structure common to each address category, so that a word
encoder can represent it with 4-6 words.
"""

__version__ = "0.1.0"

from .core import (
    Category,
    CompressedRecord,
    InvalidInputError,
    Ipv6Compressor,
    category_description,
    classify,
    compress,
    decompress,
)
