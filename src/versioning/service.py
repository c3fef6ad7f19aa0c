"""Resolution service tying parsing, remote lookups and composition together.

Two entry points match the two invocation modes:

- ``resolve_package``: downstream package name + composite version, with the
  module short commit recovered by CommitResolver.
- ``synthesize``: fully qualified plugin and module references, fetched
  through two concurrent lookups.

Both are all-or-nothing: any failure propagates and nothing is returned.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait

from constants import Constants
from common.errors import CompatibilityError, ParseError
from common.logging_utils import extra_context, is_debug_enabled
from registry.naming import parse_package_name
from .composer import compose, resolved_urls
from .models import (
    ModuleIdentity,
    PackageReference,
    PackageResolution,
    PluginIdentity,
    SyntheticVersion,
)
from .parser import parse_reference, parse_version
from .resolvers import CommitResolver

logger = logging.getLogger(__name__)


class SDKResolutionService:
    """Resolve generated SDK packages against one registry remote."""

    def __init__(self, client, config):
        self.client = client
        self.config = config
        self.commit_resolver = CommitResolver(client, max_workers=config.max_workers)

    def resolve_package(self, raw_name: str, raw_version: str) -> PackageResolution:
        """Map a downstream package name and version back to module and plugin.

        Raises:
            ClassificationError: Unknown naming dialect.
            ParseError: Malformed name or version, or a version that does
                not encode a module commit.
            RemoteError: A registry call failed.
            ResolutionNotFoundError: No commit matches the short commit.
        """
        parsed = parse_package_name(raw_name, remote=self.config.remote)
        spec = parse_version(raw_version)
        if not spec.module_short_commit:
            raise ParseError(
                f"version {raw_version!r} does not encode a module commit", raw_version
            )

        logger.debug(
            "Resolving %s %s (%s): module %s/%s, plugin %s/%s",
            raw_name, raw_version, parsed.registry_type.value,
            parsed.module.owner, parsed.module.name,
            parsed.plugin.owner, parsed.plugin.name,
        )
        commit = self.commit_resolver.resolve(parsed.module, spec.module_short_commit)
        synthetic = compose(
            spec.plugin_version,
            spec.plugin_revision,
            commit,
            parsed.registry_type,
            parsed.module,
            parsed.plugin,
        )
        return PackageResolution(
            package=PackageReference(raw_name, raw_version, parsed.registry_type),
            parsed=parsed,
            spec=spec,
            commit=commit,
            synthetic=synthetic,
            urls=resolved_urls(parsed.module, parsed.plugin, commit.commit_id, spec.plugin_version),
        )

    def synthesize(self, plugin_ref: str, module_ref: str) -> SyntheticVersion:
        """Compose the synthetic version for a plugin release and module reference.

        The plugin and module lookups run concurrently; the first failure
        aborts and the other result is discarded.

        Raises:
            ParseError: A reference is malformed.
            RemoteError: A registry call failed.
            CompatibilityError: The plugin targets an unsupported ecosystem.
        """
        plugin_req = parse_reference(plugin_ref, default_remote=self.config.remote)
        module_req = parse_reference(module_ref, default_remote=self.config.remote)
        plugin = PluginIdentity(owner=plugin_req.owner, name=plugin_req.name, remote=plugin_req.remote)
        module = ModuleIdentity(owner=module_req.owner, name=module_req.name, remote=module_req.remote)

        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="synthesize") as executor:
            plugin_future = executor.submit(self.client.get_curated_plugin, plugin, plugin_req.ref)
            commit_future = executor.submit(self.client.get_commit, module, module_req.ref)
            done, pending = wait([plugin_future, commit_future], return_when=FIRST_EXCEPTION)
            for future in pending:
                future.cancel()
            for future in (plugin_future, commit_future):
                if future in done and future.exception() is not None:
                    raise future.exception()
            curated = plugin_future.result()
            commit = commit_future.result()

        if curated.registry_type not in Constants.SUPPORTED_REGISTRIES:
            raise CompatibilityError(curated.raw_registry_type, f"{plugin.owner}/{plugin.name}")

        if is_debug_enabled(logger):
            logger.debug(
                "Fetched plugin and module metadata",
                extra=extra_context(
                    event="decision",
                    component="service",
                    action="synthesize",
                    registry_type=curated.registry_type.value,
                    plugin_version=curated.version,
                    plugin_revision=curated.revision,
                    commit=commit.commit_id,
                    draft=commit.is_draft,
                )
            )
        return compose(
            curated.version,
            curated.revision,
            commit,
            curated.registry_type,
            module,
            plugin,
        )
