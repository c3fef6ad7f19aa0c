"""Data models for package references and synthetic version resolution."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from constants import Constants, RegistryType


@dataclass(frozen=True)
class PackageReference:
    """Raw downstream package coordinates as the user supplied them."""
    raw_name: str
    raw_version: str
    registry_type: RegistryType


@dataclass(frozen=True)
class ModuleIdentity:
    """Schema repository that produced the generated code."""
    owner: str
    name: str
    remote: str = Constants.DEFAULT_REMOTE

    def __str__(self) -> str:
        return f"{self.remote}/{self.owner}/{self.name}"


@dataclass(frozen=True)
class PluginIdentity:
    """Code generator registered in the registry."""
    owner: str
    name: str
    remote: str = Constants.DEFAULT_REMOTE

    def __str__(self) -> str:
        return f"{self.remote}/{self.owner}/{self.name}"


@dataclass(frozen=True)
class ParsedPackageName:
    """Module and plugin recovered from a downstream package name."""
    registry_type: RegistryType
    module: ModuleIdentity
    plugin: PluginIdentity
    scope: Optional[str] = None  # npm scope the name was published under


@dataclass(frozen=True)
class VersionSpec:
    """Decomposed composite version string.

    ``plugin_version`` is always set; ``plugin_revision`` and
    ``module_short_commit`` only when the string encoded them. ``marker`` is
    the middle dash segment, carried but not interpreted.
    """
    plugin_version: str
    plugin_revision: Optional[int] = None
    module_short_commit: Optional[str] = None
    marker: Optional[str] = None


@dataclass(frozen=True)
class Label:
    """Named pointer to a commit in a module."""
    id: str
    name: str
    create_time: Optional[datetime] = None


@dataclass(frozen=True)
class CommitRecord:
    """Module commit as reported by the registry."""
    commit_id: str
    created_at: datetime
    is_draft: bool = False


@dataclass(frozen=True)
class CuratedPlugin:
    """Curated plugin release metadata."""
    version: str
    revision: int
    registry_type: Optional[RegistryType]
    raw_registry_type: Optional[str] = None


@dataclass(frozen=True)
class ReferenceRequest:
    """Fully qualified ``[remote/]owner/name[:ref]`` reference from the CLI."""
    remote: str
    owner: str
    name: str
    ref: Optional[str]  # None means latest
    raw: str


@dataclass(frozen=True)
class SyntheticVersion:
    """Canonical version string plus install guidance for one ecosystem."""
    version: str
    command: Optional[str]
    hint: str

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"version": self.version, "command": self.command, "hint": self.hint}


@dataclass
class PackageResolution:
    """Everything ``sdk resolve`` learned about one downstream package."""
    package: PackageReference
    parsed: ParsedPackageName
    spec: VersionSpec
    commit: CommitRecord
    synthetic: SyntheticVersion
    urls: Dict[str, str] = field(default_factory=dict)
