"""
Metrics for compressed address records.

This module provides the word-count recommendation consumed by downstream
word encoders, the compression ratio of a single record, and batch summaries
over many records for evaluation runs.
"""

from collections import Counter
from typing import Sequence

import numpy as np

PORT_BITS = 16

FOUR_WORD_MAX_BITS = 56
FIVE_WORD_MAX_BITS = 70


def total_bits(record) -> int:
    """Declared payload bits plus 16 when the record carries a port."""
    return record.compressed_bits + (PORT_BITS if record.port is not None else 0)


def original_total_bits(record) -> int:
    """Uncompressed size: 128 address bits plus 16 when a port is present."""
    return record.original_bits + (PORT_BITS if record.port is not None else 0)


def recommended_word_count(record) -> int:
    """
    Recommends how many words a downstream encoder should use.

    IPv6 always gets at least 4 words so it stays distinguishable from
    IPv4 encodings.

    Args:
        record: Compressed address record

    Returns:
        4 for up to 56 total bits, 5 for up to 70, otherwise 6

    Example:
        >>> record = compress("::1", port=443)
        >>> recommended_word_count(record)
        5
    """
    bits = total_bits(record)
    if bits <= FOUR_WORD_MAX_BITS:
        return 4
    elif bits <= FIVE_WORD_MAX_BITS:
        return 5
    else:
        return 6


def compression_ratio(record) -> float:
    """
    Computes the fraction of bits saved relative to the uncompressed form.

    Uncompressed categories (special, global unicast without a provider
    match) come out slightly negative, since the 3 tag bits are counted on
    top of the full 128-bit payload.

    Args:
        record: Compressed address record

    Returns:
        1 - total_bits / original_total_bits (e.g. 0.625 for 48 of 128 bits)
    """
    return 1.0 - total_bits(record) / original_total_bits(record)


def compression_factor(record) -> float:
    """
    Computes compression factor (inverse of the kept fraction).

    Returns:
        Compression factor (e.g., 2.0 means the record needs half the bits)
    """
    return original_total_bits(record) / total_bits(record)


def percent_savings(record) -> float:
    """Computes bit savings as a percentage."""
    return compression_ratio(record) * 100


def evaluate_compression_performance(records: Sequence) -> dict:
    """
    Computes summary metrics over a batch of compressed records.

    Args:
        records: Compressed address records

    Returns:
        Dictionary containing:
        - count: Number of records
        - mean_ratio / min_ratio / max_ratio: Compression ratio statistics
        - mean_total_bits: Average bits including ports
        - mean_factor: Average compression factor
        - categories: Record count per category name
        - word_counts: Record count per recommended word count (4, 5, 6)

    Raises:
        ValueError: If records is empty
    """
    if len(records) == 0:
        raise ValueError("Cannot evaluate an empty batch of records")

    bits = np.array([total_bits(r) for r in records], dtype=np.float64)
    originals = np.array([original_total_bits(r) for r in records], dtype=np.float64)
    ratios = 1.0 - bits / originals
    words = np.array([recommended_word_count(r) for r in records], dtype=np.int64)
    word_hist = np.bincount(words, minlength=7)

    categories = Counter(r.category.name for r in records)

    return {
        'count': len(records),
        'mean_ratio': float(ratios.mean()),
        'min_ratio': float(ratios.min()),
        'max_ratio': float(ratios.max()),
        'mean_total_bits': float(bits.mean()),
        'mean_factor': float((originals / bits).mean()),
        'categories': dict(categories),
        'word_counts': {n: int(word_hist[n]) for n in (4, 5, 6)},
    }
