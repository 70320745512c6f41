"""
Domain errors.

The domain rejects malformed input instead of coercing it. Every rejection is
an InvalidInputError, which stays a ValueError so callers written against
plain ValueError keep working.
"""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when an entity or calculator input violates a business rule."""
    pass
