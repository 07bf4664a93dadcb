"""Error types raised by the IPv6 codec."""


class InvalidInputError(ValueError):
    """
    Raised when an address, payload, category tag or setting is malformed.

    Subclasses ValueError so callers that already guard parsing with
    ``except ValueError`` keep working.
    """
