"""Buf Schema Registry API package.

- client.py: unary Connect calls for labels, label history, commits and
  curated plugins, mapped onto the versioning data model.

Public API is preserved at registry.bsr without shims.
"""

# Patch points exposed for tests (e.g., monkeypatch in tests)
from common.http_client import connect_post  # noqa: F401

from .client import BSRClient, parse_registry_type  # noqa: F401

__all__ = [
    "BSRClient",
    "parse_registry_type",
    # Patch points for tests
    "connect_post",
]
