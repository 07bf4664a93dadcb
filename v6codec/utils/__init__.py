"""Utilities for metrics calculation over compressed records."""

from .metrics import (
    compression_factor,
    compression_ratio,
    evaluate_compression_performance,
    percent_savings,
    recommended_word_count,
    total_bits,
)

__all__ = [
    "compression_factor",
    "compression_ratio",
    "evaluate_compression_performance",
    "percent_savings",
    "recommended_word_count",
    "total_bits",
]
