"""Handlers for the ``sdk`` subcommands and their output.

Renders results only after the whole resolution succeeded; errors are left
to the caller, which maps them to exit codes.
"""

from __future__ import annotations

import json
import logging
from typing import List, Sequence

from common.errors import UsageError
from versioning.models import PackageResolution, SyntheticVersion

logger = logging.getLogger(__name__)

_LABEL_WIDTH = 12
_DIVIDER = "─" * 40


def split_arguments(args: Sequence[str], expected: int = 2) -> List[str]:
    """Join then re-split on whitespace so one quoted argument also works."""
    tokens = " ".join(args).split()
    if len(tokens) != expected:
        raise UsageError(
            f"invalid input: expected {expected} arguments, got {len(tokens)} in {tokens!r}"
        )
    return tokens


def _line(label: str, value: str) -> str:
    return f"{(label + ':').rjust(_LABEL_WIDTH)}  {value}"


def render_resolution_text(result: PackageResolution) -> str:
    lines = [
        "Package Info",
        _DIVIDER,
        _line("Registry", result.package.registry_type.value),
        _line("Package", result.package.raw_name),
        _line("Version", result.package.raw_version),
        "",
        "Resolved to the following",
        _DIVIDER,
        _line("Module", result.urls["module"]),
        _line("Plugin", result.urls["plugin"]),
        _line("Homepage", result.urls["homepage"]),
        _line("Synthetic", result.synthetic.version),
        "",
    ]
    return "\n".join(lines)


def render_resolution_json(result: PackageResolution) -> str:
    parsed = result.parsed
    payload = {
        "version": result.synthetic.version,
        "registry": result.package.registry_type.value,
        "module": {
            "remote": parsed.module.remote,
            "owner": parsed.module.owner,
            "name": parsed.module.name,
        },
        "plugin": {
            "owner": parsed.plugin.owner,
            "name": parsed.plugin.name,
            "version": result.spec.plugin_version,
            "revision": result.spec.plugin_revision,
        },
        "commit": result.commit.commit_id,
        "urls": result.urls,
    }
    return json.dumps(payload, indent=2)


def render_synthetic_text(result: SyntheticVersion) -> str:
    lines = [_line("Version", result.version)]
    if result.command:
        lines.append(_line("Command", result.command))
    lines.append(_line("Hint", result.hint))
    return "\n".join(lines)


def render_synthetic_json(result: SyntheticVersion) -> str:
    return json.dumps(result.to_dict(), indent=2)


def run_resolve(args, service) -> str:
    """``sdk resolve <package> <version>``: returns the rendered output."""
    package_name, version = split_arguments(getattr(args, "ARGS", None) or [])
    result = service.resolve_package(package_name, version)
    if getattr(args, "OUTPUT_FORMAT", "text") == "json":
        return render_resolution_json(result)
    return render_resolution_text(result)


def run_version(args, service) -> str:
    """``sdk version <plugin-ref> <module-ref>``: returns the rendered output."""
    plugin_ref, module_ref = split_arguments(getattr(args, "ARGS", None) or [])
    result = service.synthesize(plugin_ref, module_ref)
    if getattr(args, "OUTPUT_FORMAT", "json") == "text":
        return render_synthetic_text(result)
    return render_synthetic_json(result)


SDK_COMMANDS = {
    "resolve": run_resolve,
    "version": run_version,
}
