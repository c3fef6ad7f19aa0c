"""Exception hierarchy shared by the resolution pipeline.

Library code raises these; the CLI layer maps them to exit codes and a
single ``error: ...`` line.
"""

from __future__ import annotations

from typing import Optional


class RemoteverError(Exception):
    """Base class for every failure surfaced to the user."""


class UsageError(RemoteverError):
    """Wrong argument shape on the command line."""


class ClassificationError(RemoteverError):
    """A package name matched none of the known naming dialects."""

    def __init__(self, raw_name: str):
        self.raw_name = raw_name
        super().__init__(f"could not determine registry from package name: {raw_name!r}")


class ParseError(RemoteverError, ValueError):
    """A package name, version string or reference is malformed."""

    def __init__(self, message: str, value: Optional[str] = None):
        self.value = value
        super().__init__(message)


class RemoteError(RemoteverError):
    """A remote call failed; carries the operation it was part of."""

    def __init__(
        self,
        operation: str,
        message: str,
        *,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.operation = operation
        self.code = code
        self.status_code = status_code
        detail = f"{code}: {message}" if code else message
        super().__init__(f"{operation}: {detail}")


class ResolutionNotFoundError(RemoteverError):
    """No commit in the module history matched the short commit prefix."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f"no match found for prefix {prefix!r}")


class CompatibilityError(RemoteverError):
    """The plugin targets an ecosystem this tool cannot produce versions for."""

    def __init__(self, registry_type: Optional[str], plugin: str):
        self.registry_type = registry_type
        super().__init__(
            f"plugin {plugin} targets unsupported registry type {registry_type or 'unspecified'!r}"
        )
