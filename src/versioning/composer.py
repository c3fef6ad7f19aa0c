"""Synthetic version composition and per-ecosystem install guidance.

A synthetic version encodes a plugin release and a module commit into the
single flat version string a downstream package manager understands.
"""

from typing import Dict, Optional

import semantic_version

from constants import Constants, RegistryType
from common.errors import ParseError
from common.timestamps import format_compact_utc
from registry.naming import format_package_name
from .models import CommitRecord, ModuleIdentity, PluginIdentity, SyntheticVersion


def format_commit_timestamp(commit: CommitRecord, registry_type: RegistryType) -> str:
    """YYYYMMDDHHMMSS of the commit, or the zero sentinel for drafts in npm/maven."""
    if commit.is_draft and registry_type in Constants.DRAFT_ZERO_TIMESTAMP_REGISTRIES:
        return Constants.ZERO_TIMESTAMP
    return format_compact_utc(commit.created_at)


def short_commit(commit_id: str) -> str:
    if len(commit_id) < Constants.SHORT_COMMIT_LENGTH:
        raise ValueError(
            f"commit id {commit_id!r} is shorter than {Constants.SHORT_COMMIT_LENGTH} characters"
        )
    return commit_id[:Constants.SHORT_COMMIT_LENGTH]


def _maven_semver(plugin_version: str) -> str:
    text = plugin_version[1:] if plugin_version.startswith(Constants.VERSION_PREFIX) else plugin_version
    try:
        return str(semantic_version.Version.coerce(text))
    except ValueError as exc:
        raise ParseError(f"plugin version {plugin_version!r} is not semver-like", plugin_version) from exc


def compose_version_string(
    plugin_version: str,
    plugin_revision: Optional[int],
    commit: CommitRecord,
    registry_type: RegistryType,
) -> str:
    """Build the canonical version string for ``registry_type``."""
    timestamp = format_commit_timestamp(commit, registry_type)
    commit_part = short_commit(commit.commit_id)

    if registry_type is RegistryType.MAVEN:
        if plugin_revision is None:
            raise ParseError("maven versions require a plugin revision", plugin_version)
        return f"{_maven_semver(plugin_version)}.{plugin_revision}.{timestamp}.{commit_part}"

    if registry_type in (RegistryType.GO, RegistryType.NPM):
        version = f"{plugin_version}-{timestamp}-{commit_part}"
        if plugin_revision is not None:
            version = f"{version}.{plugin_revision}"
        return version

    raise ValueError(f"unsupported registry type: {registry_type!r}")


def _install_guidance(
    registry_type: RegistryType,
    module: ModuleIdentity,
    plugin: PluginIdentity,
    version: str,
) -> tuple:
    """Return (command or None, hint) for installing the generated SDK."""
    remote = module.remote
    package = format_package_name(registry_type, module, plugin)
    if registry_type is RegistryType.GO:
        return (
            f"go get {package}@{version}",
            f"Run inside your Go module. For private modules set GOPRIVATE={remote}/gen/go "
            f"and authenticate via ~/.netrc for {remote}.",
        )
    if registry_type is RegistryType.NPM:
        return (
            f"npm install {package}@{version}",
            f"Point the @buf scope at the registry first: "
            f"npm config set @buf:registry https://{remote}/gen/npm/v1/",
        )
    if registry_type is RegistryType.MAVEN:
        # No one-line install exists for Maven or Gradle.
        return (
            None,
            f"Add the repository https://{remote}/gen/maven to your build and depend on {package}:{version}",
        )
    raise ValueError(f"unsupported registry type: {registry_type!r}")


def compose(
    plugin_version: str,
    plugin_revision: Optional[int],
    commit: CommitRecord,
    registry_type: RegistryType,
    module: ModuleIdentity,
    plugin: PluginIdentity,
) -> SyntheticVersion:
    """Compose the synthetic version and install guidance for one ecosystem."""
    version = compose_version_string(plugin_version, plugin_revision, commit, registry_type)
    command, hint = _install_guidance(registry_type, module, plugin, version)
    return SyntheticVersion(version=version, command=command, hint=hint)


def resolved_urls(
    module: ModuleIdentity,
    plugin: PluginIdentity,
    commit_id: str,
    plugin_version: str,
) -> Dict[str, str]:
    """Human-facing registry URLs for a resolved module commit and plugin."""
    remote = module.remote
    return {
        "module": f"https://{remote}/{module.owner}/{module.name}/docs/{commit_id}",
        "plugin": f"https://{plugin.remote}/{plugin.owner}/{plugin.name}?version={plugin_version}",
        "homepage": (
            f"https://{remote}/{module.owner}/{module.name}/sdks/"
            f"{commit_id}:{plugin.owner}/{plugin.name}?version={plugin_version}"
        ),
    }
