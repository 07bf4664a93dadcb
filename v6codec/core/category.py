"""
Structural address categories and the classifier that assigns them.

Every IPv6 address falls into exactly one of seven categories. The category
decides which codec compresses the address and travels alongside the payload
as a 3-bit tag.
"""

from enum import IntEnum
from ipaddress import IPv6Address
from typing import Tuple

from .errors import InvalidInputError


class Category(IntEnum):
    """
    IPv6 address categories with their fixed 3-bit tags.

    Example:
        >>> Category.from_bits(1)
        <Category.LINK_LOCAL: 1>
        >>> Category.LINK_LOCAL.description
        'Link-Local (fe80::)'
    """

    LOOPBACK = 0
    LINK_LOCAL = 1
    UNIQUE_LOCAL = 2
    DOCUMENTATION = 3
    GLOBAL_UNICAST = 4
    UNSPECIFIED = 5
    SPECIAL = 6

    def to_bits(self) -> int:
        """Returns the 3-bit numeric tag."""
        return int(self)

    @classmethod
    def from_bits(cls, bits: int) -> "Category":
        """
        Converts a 3-bit numeric tag back to a category.

        Args:
            bits: Tag value, 0-6

        Returns:
            The matching category

        Raises:
            InvalidInputError: If the tag is outside 0-6
        """
        try:
            return cls(bits)
        except ValueError:
            raise InvalidInputError(f"Invalid IPv6 category bits: {bits}") from None

    @classmethod
    def from_name(cls, name: str) -> "Category":
        """Looks up a category by name (``link-local``, ``LINK_LOCAL``) or tag."""
        key = name.strip()
        if key.isdigit():
            return cls.from_bits(int(key))
        try:
            return cls[key.upper().replace("-", "_")]
        except KeyError:
            raise InvalidInputError(f"Unknown IPv6 category: {name!r}") from None

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    Category.LOOPBACK: "IPv6 Loopback (::1)",
    Category.LINK_LOCAL: "Link-Local (fe80::)",
    Category.UNIQUE_LOCAL: "Unique Local (fc00::)",
    Category.DOCUMENTATION: "Documentation (2001:db8::)",
    Category.GLOBAL_UNICAST: "Global Unicast",
    Category.UNSPECIFIED: "Unspecified (::)",
    Category.SPECIAL: "Special/Multicast",
}


def category_description(category: Category) -> str:
    """Returns the fixed human-readable description of a category."""
    return Category(category).description


def segments_of(address: IPv6Address) -> Tuple[int, ...]:
    """Splits an address into its 8 big-endian 16-bit segments."""
    packed = address.packed
    return tuple((packed[i] << 8) | packed[i + 1] for i in range(0, 16, 2))


def classify(address: IPv6Address) -> Category:
    """
    Assigns an address to its structural category.

    Rules are checked in order and the first match wins. Link-local and
    unique-local prefixes are tested before the 2000::/3 global unicast
    range, and the 2001:db8::/32 documentation prefix before global
    unicast because it is a subrange of it.

    Args:
        address: Address to classify

    Returns:
        The address category
    """
    if address.is_loopback:
        return Category.LOOPBACK
    if address.is_unspecified:
        return Category.UNSPECIFIED

    segments = segments_of(address)

    if segments[0] & 0xFFC0 == 0xFE80:
        return Category.LINK_LOCAL
    if segments[0] & 0xFE00 == 0xFC00:
        return Category.UNIQUE_LOCAL
    if segments[0] == 0x2001 and segments[1] == 0x0DB8:
        return Category.DOCUMENTATION
    if segments[0] & 0xE000 == 0x2000:
        return Category.GLOBAL_UNICAST

    return Category.SPECIAL
