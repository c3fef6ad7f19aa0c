"""Naming dialects of generated SDK packages.

Classifies a downstream package name (npm scoped package or Go module path)
and decomposes it into the module and plugin that generated it. The inverse,
``format_package_name``, rebuilds the canonical name from the identities.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from constants import Constants, RegistryType
from common.errors import ClassificationError, ParseError
from common.logging_utils import extra_context, is_debug_enabled
from versioning.models import ModuleIdentity, ParsedPackageName, PluginIdentity

logger = logging.getLogger(__name__)

_NPM_SCOPED_RE = re.compile(Constants.NPM_SCOPED_PATTERN)


def _npm_scope(name: str) -> Optional[str]:
    """Return the known scope prefix ``name`` starts with, if any."""
    for scope in Constants.NPM_SCOPES:
        if name.startswith(scope):
            return scope
    return None


def classify(name: str) -> Optional[RegistryType]:
    """Decide which naming dialect produced ``name``.

    Scoped npm names are checked before Go module paths. Returns None when
    neither matches.
    """
    if _npm_scope(name) and _NPM_SCOPED_RE.match(name):
        return RegistryType.NPM
    if Constants.GO_PATH_MARKER in name:
        return RegistryType.GO
    return None


def _split_pair(token: str) -> Optional[tuple]:
    parts = token.split("_")
    if len(parts) != 2:
        return None
    return parts[0], parts[1]


def _parse_go(name: str) -> Optional[ParsedPackageName]:
    segments = name.split("/")
    if len(segments) < Constants.GO_MIN_SEGMENTS:
        return None
    # <host>/gen/go/<module owner>/<module name>/<plugin owner>/<plugin name>[/...]
    remote = segments[0]
    return ParsedPackageName(
        registry_type=RegistryType.GO,
        module=ModuleIdentity(owner=segments[3], name=segments[4], remote=remote),
        plugin=PluginIdentity(owner=segments[5], name=segments[6], remote=remote),
    )


def _parse_npm(name: str, remote: str) -> Optional[ParsedPackageName]:
    scope = _npm_scope(name)
    if scope is None:
        return None
    module_token, sep, plugin_token = name[len(scope):].rpartition(".")
    if not sep:
        return None
    module_parts = _split_pair(module_token)
    plugin_parts = _split_pair(plugin_token)
    if module_parts is None or plugin_parts is None:
        return None
    return ParsedPackageName(
        registry_type=RegistryType.NPM,
        module=ModuleIdentity(owner=module_parts[0], name=module_parts[1], remote=remote),
        plugin=PluginIdentity(owner=plugin_parts[0], name=plugin_parts[1], remote=remote),
        scope=scope,
    )


def parse_package_name(name: str, remote: str = Constants.DEFAULT_REMOTE) -> ParsedPackageName:
    """Classify ``name`` and extract the module and plugin identities.

    Args:
        name: Raw downstream package name.
        remote: Registry host for dialects whose names do not carry one (npm).

    Raises:
        ClassificationError: No known dialect matches.
        ParseError: The dialect matched but the name is malformed.
    """
    registry_type = classify(name)
    if registry_type is None:
        raise ClassificationError(name)

    if registry_type is RegistryType.GO:
        parsed = _parse_go(name)
    elif registry_type is RegistryType.NPM:
        parsed = _parse_npm(name, remote)
    else:
        parsed = None

    if parsed is None or not all((
        parsed.module.owner, parsed.module.name, parsed.plugin.owner, parsed.plugin.name,
    )):
        raise ParseError(f"could not parse package name: {name!r}", name)

    if is_debug_enabled(logger):
        logger.debug(
            "Parsed package name",
            extra=extra_context(
                event="parse",
                component="naming",
                action="parse_package_name",
                registry_type=registry_type.value,
                module_ref=f"{parsed.module.owner}/{parsed.module.name}",
                plugin_ref=f"{parsed.plugin.owner}/{parsed.plugin.name}",
            )
        )
    return parsed


def format_package_name(
    registry_type: RegistryType,
    module: ModuleIdentity,
    plugin: PluginIdentity,
    scope: Optional[str] = None,
) -> str:
    """Build the downstream package name for ``module`` generated by ``plugin``.

    Maven coordinates are ``group:artifact``; there is no parser for them.
    """
    if registry_type is RegistryType.GO:
        return f"{module.remote}/gen/go/{module.owner}/{module.name}/{plugin.owner}/{plugin.name}"
    if registry_type is RegistryType.NPM:
        scope = scope or Constants.NPM_SCOPES[0]
        return f"{scope}{module.owner}_{module.name}.{plugin.owner}_{plugin.name}"
    if registry_type is RegistryType.MAVEN:
        return (
            f"{Constants.MAVEN_GROUP_ID}:"
            f"{module.owner}_{module.name}_{plugin.owner}_{plugin.name}"
        )
    raise ValueError(f"unsupported registry type: {registry_type!r}")
