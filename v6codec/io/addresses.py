"""
Address input helpers.

Turns the values callers hand us (strings, packed bytes, integers) into
``ipaddress.IPv6Address`` and reads address lists for batch runs. Lines in
an address file are either a bare address or ``[address]:port``; blank lines
and ``#`` comments are skipped.
"""

import ipaddress
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from ..core.errors import InvalidInputError

AddressLike = Union[str, bytes, int, Sequence[int], ipaddress.IPv6Address]


def as_address(value: AddressLike) -> ipaddress.IPv6Address:
    """
    Coerces a value into an IPv6 address.

    Accepts an IPv6Address, 16 packed bytes, a 128-bit integer, a list or
    tuple of 8 segments, or a string (optionally wrapped in brackets).

    Raises:
        InvalidInputError: If the value is not a valid IPv6 address
    """
    if isinstance(value, ipaddress.IPv6Address):
        return value

    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
        if len(data) != 16:
            raise InvalidInputError(f"IPv6 bytes must be length 16, got {len(data)}")
        return ipaddress.IPv6Address(data)

    if isinstance(value, str):
        text = value.strip()
        if text.startswith("[") and text.endswith("]"):
            text = text[1:-1]
        try:
            return ipaddress.IPv6Address(text)
        except ValueError as e:
            raise InvalidInputError(f"Invalid IPv6 address {value!r}: {e}") from None

    if isinstance(value, int) and not isinstance(value, bool):
        try:
            return ipaddress.IPv6Address(value)
        except ValueError as e:
            raise InvalidInputError(f"Invalid IPv6 address {value}: {e}") from None

    if isinstance(value, (list, tuple)):
        if len(value) != 8:
            raise InvalidInputError(f"IPv6 segments must be length 8, got {len(value)}")
        packed = 0
        for segment in value:
            if isinstance(segment, bool) or not isinstance(segment, int) \
                    or not 0 <= segment <= 0xFFFF:
                raise InvalidInputError(f"Invalid IPv6 segment: {segment!r}")
            packed = (packed << 16) | segment
        return ipaddress.IPv6Address(packed)

    raise InvalidInputError(f"Unsupported address type: {type(value).__name__}")


def parse_port(text: str) -> int:
    try:
        port = int(text)
    except ValueError:
        raise InvalidInputError(f"Invalid port: {text!r}") from None
    if not 0 <= port <= 0xFFFF:
        raise InvalidInputError(f"Port {port} out of range (0-65535)")
    return port


def parse_address_line(line: str) -> Tuple[ipaddress.IPv6Address, Optional[int]]:
    """
    Parses ``addr`` or ``[addr]:port``.

    Example:
        >>> parse_address_line("[2001:db8::1]:80")
        (IPv6Address('2001:db8::1'), 80)
    """
    text = line.strip()
    if text.startswith("[") and "]:" in text:
        host, _, port = text[1:].partition("]:")
        return as_address(host), parse_port(port)
    return as_address(text), None


def load_address_file(
    path: Union[str, Path],
    max_entries: Optional[int] = None
) -> List[Tuple[ipaddress.IPv6Address, Optional[int]]]:
    """
    Reads an address list file.

    Args:
        path: File with one address per line
        max_entries: Optional limit on entries read

    Returns:
        List of (address, port) pairs

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidInputError: On a malformed line (message includes the line number)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Address file not found: {path}")

    entries = []
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            text = line.split("#", 1)[0].strip()
            if not text:
                continue
            try:
                entries.append(parse_address_line(text))
            except InvalidInputError as e:
                raise InvalidInputError(f"{path}:{lineno}: {e}") from None
            if max_entries is not None and len(entries) >= max_entries:
                break
    return entries
