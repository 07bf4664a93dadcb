"""Classification, per-category codecs and the compression dispatcher."""

from .category import Category, category_description, classify
from .compressor import Ipv6Compressor, compress, decompress
from .errors import InvalidInputError
from .providers import PROVIDER_PATTERNS, ProviderPattern
from .record import CompressedRecord

__all__ = [
    "Category",
    "CompressedRecord",
    "InvalidInputError",
    "Ipv6Compressor",
    "PROVIDER_PATTERNS",
    "ProviderPattern",
    "category_description",
    "classify",
    "compress",
    "decompress",
]
