"""Address parsing and address list loading."""

from .addresses import as_address, load_address_file, parse_address_line

__all__ = ["as_address", "load_address_file", "parse_address_line"]
