"""Resolvers that recover full identifiers from truncated ones."""

from .commit import CommitResolver

__all__ = [
    "CommitResolver",
]
