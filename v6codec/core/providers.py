"""
Well-known provider prefixes used as a global unicast shortcut.

A global unicast address under one of these /32 prefixes is stored as a
one-byte pattern id followed by its last six segments.
"""

import ipaddress
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .category import Category, classify
from .errors import InvalidInputError


@dataclass(frozen=True)
class ProviderPattern:
    """A /32 prefix (segments 0 and 1) paired with its one-byte id."""

    pattern_id: int
    prefix: Tuple[int, int]
    name: str = ""

    def __post_init__(self):
        if not 0 <= self.pattern_id <= 0xFF:
            raise InvalidInputError(
                f"Provider pattern id {self.pattern_id} does not fit in one byte"
            )
        # only prefixes the classifier routes to global unicast can ever match
        sample = ipaddress.IPv6Address((self.prefix[0] << 112) | (self.prefix[1] << 96) | 1)
        if classify(sample) is not Category.GLOBAL_UNICAST:
            raise InvalidInputError(
                f"Provider prefix {self.prefix[0]:x}:{self.prefix[1]:x}::/32 "
                f"is not a global unicast prefix"
            )

    def matches(self, segments: Sequence[int]) -> bool:
        return segments[0] == self.prefix[0] and segments[1] == self.prefix[1]


PROVIDER_PATTERNS: Tuple[ProviderPattern, ...] = (
    ProviderPattern(0, (0x2001, 0x4860), "Google"),
    ProviderPattern(1, (0x2001, 0x0470), "Hurricane Electric"),
    ProviderPattern(2, (0x2001, 0x0558), "Comcast"),
)


def build_table(patterns: Iterable[ProviderPattern]) -> Tuple[ProviderPattern, ...]:
    """
    Freezes a provider table after checking ids and prefixes are unique.

    Raises:
        InvalidInputError: On a duplicate id or prefix
    """
    table = tuple(patterns)
    ids = [p.pattern_id for p in table]
    prefixes = [p.prefix for p in table]
    if len(set(ids)) != len(ids):
        raise InvalidInputError(f"Duplicate provider pattern ids: {sorted(ids)}")
    if len(set(prefixes)) != len(prefixes):
        raise InvalidInputError("Duplicate provider prefixes in pattern table")
    return table


def match_provider(
    segments: Sequence[int],
    patterns: Sequence[ProviderPattern] = PROVIDER_PATTERNS
) -> Optional[ProviderPattern]:
    """Returns the first pattern whose prefix matches, or None."""
    for pattern in patterns:
        if pattern.matches(segments):
            return pattern
    return None


def lookup_pattern(
    pattern_id: int,
    patterns: Sequence[ProviderPattern] = PROVIDER_PATTERNS
) -> ProviderPattern:
    """
    Finds a pattern by id.

    Raises:
        InvalidInputError: If no pattern has this id
    """
    for pattern in patterns:
        if pattern.pattern_id == pattern_id:
            return pattern
    raise InvalidInputError(f"Invalid provider pattern ID: {pattern_id}")
