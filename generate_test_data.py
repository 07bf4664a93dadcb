"""
Generate test address lists for compression benchmarking.

Creates a mix of IPv6 addresses that exercises every category and codec path:
- Loopback and unspecified singletons
- Link-local addresses (zero, small host number, EUI-64, arbitrary)
- Unique local prefixes with random interface identifiers
- Documentation addresses
- Global unicast under well-known provider prefixes and elsewhere
- Multicast and other special addresses
"""

import argparse
import ipaddress
from pathlib import Path
from typing import List, Optional

import numpy as np

from v6codec.core.providers import PROVIDER_PATTERNS

CATEGORY_WEIGHTS = {
    'loopback': 0.02,
    'unspecified': 0.02,
    'link_local': 0.25,
    'unique_local': 0.15,
    'documentation': 0.10,
    'global_unicast': 0.36,
    'special': 0.10,
}

COMMON_PORTS = [22, 53, 80, 443, 8080, 3306, 5432, 6379]


def _address(segments) -> ipaddress.IPv6Address:
    value = 0
    for segment in segments:
        value = (value << 16) | int(segment)
    return ipaddress.IPv6Address(value)


def _random_segments(rng: np.random.Generator, count: int) -> List[int]:
    return [int(s) for s in rng.integers(0, 0x10000, size=count)]


def generate_link_local(rng: np.random.Generator) -> ipaddress.IPv6Address:
    """
    Generates a link-local address.

    Spread over the four interface shapes: all zero, one small host number,
    EUI-64 derived from a random MAC, and arbitrary values.
    """
    shape = rng.choice(4, p=[0.1, 0.3, 0.3, 0.3])
    interface = [0, 0, 0, 0]

    if shape == 1:
        interface[int(rng.integers(0, 4))] = int(rng.integers(1, 256))
    elif shape == 2:
        mac = [int(b) for b in rng.integers(0, 256, size=6)]
        interface = [
            ((mac[0] ^ 0x02) << 8) | mac[1],
            (mac[2] << 8) | 0xFF,
            0xFE00 | mac[3],
            (mac[4] << 8) | mac[5],
        ]
    elif shape == 3:
        interface = _random_segments(rng, 4)

    return _address([0xFE80, 0, 0, 0] + interface)


def generate_unique_local(rng: np.random.Generator) -> ipaddress.IPv6Address:
    first = 0xFD00 | int(rng.integers(0, 256))
    return _address([first] + _random_segments(rng, 7))


def generate_documentation(rng: np.random.Generator) -> ipaddress.IPv6Address:
    interface = [0, 0, 0, 0]
    if rng.random() < 0.5:
        interface[3] = int(rng.integers(1, 256))
    else:
        interface = _random_segments(rng, 4)
    subnet = [int(rng.integers(0, 0x10000)), 0]
    return _address([0x2001, 0x0DB8] + subnet + interface)


def generate_global_unicast(rng: np.random.Generator) -> ipaddress.IPv6Address:
    if rng.random() < 0.4:
        pattern = PROVIDER_PATTERNS[int(rng.integers(0, len(PROVIDER_PATTERNS)))]
        prefix = list(pattern.prefix)
    else:
        prefix = [0x2000 | int(rng.integers(0x0100, 0x2000)), int(rng.integers(0, 0x10000))]
    return _address(prefix + _random_segments(rng, 6))


def generate_special(rng: np.random.Generator) -> ipaddress.IPv6Address:
    scope = int(rng.choice([0x1, 0x2, 0x5, 0xE]))
    group = int(rng.choice([0x1, 0x2, 0xFB, 0x101]))
    return _address([0xFF00 | scope, 0, 0, 0, 0, 0, 0, group])


_GENERATORS = {
    'loopback': lambda rng: ipaddress.IPv6Address("::1"),
    'unspecified': lambda rng: ipaddress.IPv6Address("::"),
    'link_local': generate_link_local,
    'unique_local': generate_unique_local,
    'documentation': generate_documentation,
    'global_unicast': generate_global_unicast,
    'special': generate_special,
}


def generate_addresses(
    count: int,
    seed: Optional[int] = None,
    weights: Optional[dict] = None
) -> List[ipaddress.IPv6Address]:
    """
    Draws a mix of addresses across all categories.

    Args:
        count: Number of addresses
        seed: Random seed for reproducible output
        weights: Category name -> relative weight (default: CATEGORY_WEIGHTS)

    Returns:
        List of generated addresses
    """
    weights = weights or CATEGORY_WEIGHTS
    names = list(weights)
    probs = np.array([weights[n] for n in names], dtype=np.float64)
    probs = probs / probs.sum()

    rng = np.random.default_rng(seed)
    picks = rng.choice(len(names), size=count, p=probs)

    return [_GENERATORS[names[i]](rng) for i in picks]


def write_address_file(
    output_file: str,
    count: int = 10000,
    seed: Optional[int] = None,
    port_fraction: float = 0.5
) -> str:
    """
    Writes generated addresses one per line, some as ``[addr]:port``.

    Returns:
        Path of the written file
    """
    print(f"Generating {count} IPv6 addresses...")

    rng = np.random.default_rng(None if seed is None else seed + 1)
    addresses = generate_addresses(count, seed=seed)

    with open(output_file, "w", encoding="utf-8") as f:
        for address in addresses:
            if rng.random() < port_fraction:
                port = int(rng.choice(COMMON_PORTS))
                f.write(f"[{address}]:{port}\n")
            else:
                f.write(f"{address}\n")

    file_size = Path(output_file).stat().st_size
    print(f"Created {output_file}: {count:,} addresses ({file_size:,} bytes)")
    return output_file


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate IPv6 address lists for compression")
    parser.add_argument('--output', type=str, default='data/addresses.txt',
                       help='Output address list file')
    parser.add_argument('--count', type=int, default=10000,
                       help='Number of addresses to generate')
    parser.add_argument('--seed', type=int, default=None,
                       help='Random seed')
    parser.add_argument('--port-fraction', type=float, default=0.5,
                       help='Fraction of addresses written with a port')

    args = parser.parse_args()

    Path(args.output).parent.mkdir(parents=True, exist_ok=True)
    write_address_file(args.output, args.count, args.seed, args.port_fraction)
