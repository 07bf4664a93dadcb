"""
CLI entry point for V6-Codec decompression.

Usage:
    v6-decompress --category link-local --payload 010301000000 --port 22
"""

import argparse
import json
import logging
import sys

from v6codec.config import load_config, providers_from_config
from v6codec.core import Category, CompressedRecord, Ipv6Compressor, InvalidInputError
from v6codec.io.addresses import parse_port


def parse_payload(text: str) -> bytes:
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise InvalidInputError(f"Payload is not valid hex: {text!r}") from None


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Decompress V6-Codec payloads",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Decompress a link-local payload
  v6-decompress --category link-local --payload 010301000000

  # Category by tag, with a port and a custom provider table
  v6-decompress --category 4 --payload 00486000000000000000008888 --config config.yaml

Note: The provider table used for decompression must be the same as the one
used for compression.
"""
    )

    parser.add_argument(
        "-c", "--category",
        type=str,
        required=True,
        help="Category name (e.g. link-local) or 3-bit tag (0-6)"
    )
    parser.add_argument(
        "--payload",
        type=str,
        required=True,
        help="Payload bytes as hex"
    )
    parser.add_argument(
        "--bits",
        type=int,
        default=None,
        help="Declared compressed bits (default: 8 per payload byte)"
    )
    parser.add_argument(
        "-p", "--port",
        type=str,
        default=None,
        help="Port carried with the record"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (optional)"
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default=None,
        help="Output format (default: from config, else text)"
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        logging.basicConfig(level=config['logging']['level'])
        compressor = Ipv6Compressor(providers_from_config(config))

        payload = parse_payload(args.payload)
        record = CompressedRecord(
            category=Category.from_name(args.category),
            payload=payload,
            compressed_bits=args.bits if args.bits is not None else len(payload) * 8,
            port=parse_port(args.port) if args.port is not None else None,
        )
        address, port = compressor.decompress(record)
    except (InvalidInputError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1

    output_format = args.format or config['output']['format']

    if output_format == "json":
        print(json.dumps({
            'address': str(address),
            'port': port,
            'category': record.category.name,
        }))
    elif port is not None:
        print(f"[{address}]:{port}")
    else:
        print(address)

    return 0


if __name__ == "__main__":
    sys.exit(main())
