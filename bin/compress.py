"""Compress IPv6 addresses with V6-Codec."""

import argparse
import json
import logging
import sys

from v6codec.config import load_config, providers_from_config
from v6codec.core import Ipv6Compressor, InvalidInputError
from v6codec.io import load_address_file, parse_address_line
from v6codec.io.addresses import parse_port


def record_to_dict(address, record) -> dict:
    """Flattens a record into JSON-friendly fields."""
    return {
        'address': str(address),
        'port': record.port,
        'category': record.category.name,
        'tag': record.category.to_bits(),
        'description': record.category_description(),
        'payload': record.payload.hex(),
        'compressed_bits': record.compressed_bits,
        'total_bits': record.total_bits(),
        'recommended_words': record.recommended_word_count(),
        'compression_ratio': record.compression_ratio(),
    }


def print_record(fields: dict):
    print(f"Address:           {fields['address']}")
    if fields['port'] is not None:
        print(f"Port:              {fields['port']}")
    print(f"Category:          {fields['description']} [tag {fields['tag']}]")
    print(f"Payload:           {fields['payload']}")
    print(f"Compressed bits:   {fields['compressed_bits']}")
    print(f"Total bits:        {fields['total_bits']}")
    print(f"Recommended words: {fields['recommended_words']}")
    print(f"Compression ratio: {fields['compression_ratio']:.2%}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Compress IPv6 addresses using V6-Codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compress a single address
  v6-compress fe80::1

  # Compress with a port, as JSON
  v6-compress 2001:db8::1 --port 80 --format json

  # Compress every line of an address list ("addr" or "[addr]:port")
  v6-compress --input addresses.txt --config config.yaml
"""
    )

    parser.add_argument(
        "addresses",
        nargs="*",
        help="IPv6 addresses, bare or as [addr]:port"
    )
    parser.add_argument(
        "-p", "--port",
        type=str,
        default=None,
        help="Port to attach to bare addresses"
    )
    parser.add_argument(
        "-i", "--input",
        type=str,
        default=None,
        help="Path to address list file"
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
        default_port = parse_port(args.port) if args.port is not None else None

        entries = []
        for text in args.addresses:
            address, port = parse_address_line(text)
            entries.append((address, port if port is not None else default_port))
        if args.input:
            entries.extend(load_address_file(args.input))
    except (InvalidInputError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1

    output_format = args.format or config['output']['format']

    if not entries:
        parser.print_usage()
        print("Error: no addresses given")
        return 1

    results = []
    for address, port in entries:
        try:
            record = compressor.compress(address, port)
        except InvalidInputError as e:
            print(f"Error: {address}: {e}")
            return 1
        results.append(record_to_dict(address, record))

    if output_format == "json":
        print(json.dumps(results, indent=2))
    else:
        for i, fields in enumerate(results):
            if i:
                print("-" * 70)
            print_record(fields)

    return 0


if __name__ == "__main__":
    sys.exit(main())
