"""
Evaluation and benchmarking script for V6-Codec.

Compresses every address in an address list, verifies that each record
decompresses back to the expected address, and reports compression metrics
per category alongside the uncompressed 128-bit baseline.
"""

import argparse
import ipaddress
import json
import time
from collections import defaultdict
from typing import List, Optional, Tuple

import numpy as np
from tqdm import tqdm

from v6codec.config import load_config, providers_from_config
from v6codec.core import Category, Ipv6Compressor
from v6codec.io import load_address_file
from v6codec.utils.metrics import evaluate_compression_performance, total_bits


def expected_roundtrip(address: ipaddress.IPv6Address, category: Category) -> ipaddress.IPv6Address:
    """Unique local records drop the interface identifier; all others are exact."""
    if category == Category.UNIQUE_LOCAL:
        return ipaddress.IPv6Address(int(address) >> 64 << 64)
    return address


def evaluate_addresses(
    entries: List[Tuple[ipaddress.IPv6Address, Optional[int]]],
    compressor: Optional[Ipv6Compressor] = None,
    show_progress: bool = False
) -> dict:
    """
    Compresses and verifies a batch of (address, port) entries.

    Args:
        entries: Addresses with optional ports
        compressor: Compressor to use (default: built-in provider table)
        show_progress: Whether to show a progress bar

    Returns:
        Dictionary with the overall summary, per-category mean bits,
        round-trip mismatch count and timing
    """
    compressor = compressor or Ipv6Compressor()

    iterator = entries
    if show_progress:
        iterator = tqdm(entries, desc="Compressing")

    records = []
    mismatches = 0
    per_category = defaultdict(list)

    start = time.time()
    for address, port in iterator:
        record = compressor.compress(address, port)
        decoded, decoded_port = compressor.decompress(record)
        if decoded != expected_roundtrip(address, record.category) or decoded_port != port:
            mismatches += 1
        records.append(record)
        per_category[record.category.name].append(total_bits(record))
    elapsed = time.time() - start

    summary = evaluate_compression_performance(records)

    return {
        'summary': summary,
        'mean_bits_by_category': {
            name: float(np.mean(bits)) for name, bits in sorted(per_category.items())
        },
        'roundtrip_mismatches': mismatches,
        'elapsed_s': elapsed,
        'addresses_per_s': len(entries) / elapsed if elapsed > 0 else float('inf'),
    }


def print_report(results: dict):
    summary = results['summary']

    print("\n" + "=" * 70)
    print("V6-Codec Evaluation")
    print("=" * 70)
    print(f"Addresses:          {summary['count']:,}")
    print(f"Mean ratio:         {summary['mean_ratio']:.4f} "
          f"(min {summary['min_ratio']:.4f}, max {summary['max_ratio']:.4f})")
    print(f"Mean total bits:    {summary['mean_total_bits']:.2f}")
    print(f"Mean factor:        {summary['mean_factor']:.2f}x")
    print(f"Round-trip errors:  {results['roundtrip_mismatches']}")
    print(f"Throughput:         {results['addresses_per_s']:,.0f} addresses/s")

    print(f"\n{'Category':<20} {'Count':<10} {'Mean bits':<12} {'vs 128-bit':<10}")
    print("-" * 70)
    for name, mean_bits in results['mean_bits_by_category'].items():
        count = summary['categories'].get(name, 0)
        print(f"{name:<20} {count:<10} {mean_bits:<12.2f} {mean_bits / 128:<10.3f}")

    print(f"\n{'Words':<10} {'Count':<10}")
    print("-" * 70)
    for words, count in summary['word_counts'].items():
        print(f"{words:<10} {count:<10}")
    print("=" * 70)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Evaluate V6-Codec on an address list")
    parser.add_argument('--data', type=str, required=True,
                       help='Path to address list file')
    parser.add_argument('--config', type=str, default=None,
                       help='Path to configuration file')
    parser.add_argument('--max-entries', type=int, default=None,
                       help='Maximum addresses to evaluate')
    parser.add_argument('--json', type=str, default=None,
                       help='Write results as JSON to this path')

    args = parser.parse_args(argv)

    config = load_config(args.config)
    compressor = Ipv6Compressor(providers_from_config(config))
    entries = load_address_file(args.data, max_entries=args.max_entries)

    print(f"Loaded {len(entries):,} addresses from {args.data}")
    results = evaluate_addresses(entries, compressor, show_progress=True)
    print_report(results)

    if args.json:
        with open(args.json, 'w') as f:
            json.dump(results, f, indent=2)
        print(f"\nResults written to: {args.json}")

    return results


if __name__ == "__main__":
    main()
