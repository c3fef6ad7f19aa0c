"""Token parsing utilities for composite versions and registry references."""

from typing import Optional, Tuple

import semantic_version

from constants import Constants
from common.errors import ParseError
from .models import ReferenceRequest, VersionSpec


def ensure_prefix(value: str, prefix: str = Constants.VERSION_PREFIX) -> str:
    """Return ``value`` with ``prefix`` prepended unless already present."""
    if value.startswith(prefix):
        return value
    return prefix + value


def _has_semver_core(value: str) -> bool:
    """True when ``value`` (optionally v-prefixed) is MAJOR.MINOR.PATCH[-pre][+build]."""
    text = value[1:] if value.startswith(Constants.VERSION_PREFIX) else value
    return bool(text) and semantic_version.validate(text)


def parse_version(version: str) -> VersionSpec:
    """Decompose ``<pluginVersion>[-<marker>-<shortCommit>].<revision>``.

    Without a usable trailing ``.<revision>`` the whole string is the plugin
    version (legacy form). With fewer than three dash tokens the whole
    version part is the plugin version and no short commit is recorded,
    unless it lacks a MAJOR.MINOR.PATCH core, in which case the legacy form
    applies;
    otherwise the first token is the plugin version and the third the
    module short commit. Tokens past the third are ignored.

    Raises:
        ParseError: The string is empty or the revision is not a
            non-negative integer.
    """
    version = version.strip()
    if not version:
        raise ParseError("empty version string", version)

    last_dot = version.rfind(".")
    if last_dot == -1 or last_dot == len(version) - 1:
        return VersionSpec(plugin_version=ensure_prefix(version))

    revision_text = version[last_dot + 1:]
    version_part = version[:last_dot]
    dash_parts = version_part.split("-")

    if len(dash_parts) < 3:
        # "v1.2.3" would otherwise read as plugin version "v1.2" at revision 3.
        if not _has_semver_core(dash_parts[0]):
            return VersionSpec(plugin_version=ensure_prefix(version))
        plugin_version, short_commit, marker = version_part, None, None
    else:
        plugin_version, marker, short_commit = dash_parts[0], dash_parts[1], dash_parts[2]

    if not revision_text.isdigit():
        raise ParseError(
            f"invalid plugin revision {revision_text!r} in version {version!r}", version
        )

    return VersionSpec(
        plugin_version=ensure_prefix(plugin_version),
        plugin_revision=int(revision_text),
        module_short_commit=short_commit or None,
        marker=marker,
    )


def tokenize_rightmost_colon(s: str) -> Tuple[str, Optional[str]]:
    """Return (identifier, spec or None) using the rightmost-colon rule."""
    s = s.strip()
    if ':' not in s:
        return s, None
    parts = s.rsplit(':', 1)
    identifier = parts[0].strip()
    spec_part = parts[1].strip() if len(parts) > 1 else ''
    spec = spec_part if spec_part else None
    return identifier, spec


def normalize_remote(remote: str) -> str:
    """Strip scheme and trailing slashes from a remote host."""
    remote = remote.strip()
    for scheme in ("https://", "http://"):
        if remote.startswith(scheme):
            remote = remote[len(scheme):]
    return remote.rstrip("/")


def parse_reference(token: str, default_remote: str = Constants.DEFAULT_REMOTE) -> ReferenceRequest:
    """Parse ``[remote/]owner/name[:ref|:latest]`` into a ReferenceRequest.

    A missing ref or the literal ``latest`` both mean the latest release.
    """
    identifier, ref = tokenize_rightmost_colon(normalize_remote(token))
    if ref is not None and "/" in ref:
        # host:port with no version suffix
        identifier, ref = normalize_remote(token), None
    segments = identifier.split("/")
    if len(segments) == 2:
        remote = default_remote
        owner, name = segments
    elif len(segments) == 3:
        remote, owner, name = segments
    else:
        raise ParseError(
            f"invalid reference {token!r}: expected [remote/]owner/name[:version]", token
        )
    if not remote or not owner or not name:
        raise ParseError(f"invalid reference {token!r}: empty path segment", token)

    if ref is not None and ref.lower() == Constants.LATEST:
        ref = None
    return ReferenceRequest(
        remote=normalize_remote(remote),
        owner=owner,
        name=name,
        ref=ref,
        raw=token,
    )
