"""Runtime configuration for remote access.

Collects the remote host, bearer token and tunables into one explicit value
that is threaded into the registry client and resolvers. Precedence:
CLI flag > config file > defaults; the token comes from ``BUF_TOKEN`` or,
failing that, the ``~/.netrc`` entry for the remote.
"""

from __future__ import annotations

import logging
import netrc
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants
from common.errors import UsageError
from versioning.parser import normalize_remote

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RemoteConfig:
    """Explicit configuration for talking to one registry remote."""

    remote: str = Constants.DEFAULT_REMOTE
    token: Optional[str] = None
    page_size: int = Constants.PAGE_SIZE
    max_workers: int = Constants.MAX_WORKERS
    timeout: float = Constants.REQUEST_TIMEOUT


def token_from_netrc(remote: str, netrc_path: Optional[str] = None) -> Optional[str]:
    """Return the password stored for ``machine <remote>`` in a netrc file.

    Missing or unreadable files yield None; the reason is logged at DEBUG.
    """
    try:
        parsed = netrc.netrc(netrc_path)
    except (OSError, netrc.NetrcParseError) as exc:
        logger.debug("failed to parse .netrc: %s", exc)
        return None
    entry = parsed.authenticators(remote)
    if not entry or not entry[2]:
        logger.debug("no password found in .netrc for %s", remote)
        return None
    return entry[2]


def load_config_file(path: str) -> Dict[str, Any]:
    """Load tunables from a YAML (or JSON) config file."""
    if not os.path.isfile(path):
        raise UsageError(f"config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise UsageError(f"failed to read config file {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise UsageError(f"config file {path} must contain a mapping")
    return data


def _positive_int(data: Mapping[str, Any], key: str, default: int) -> int:
    value = data.get(key, default)
    try:
        value = int(value)
    except (TypeError, ValueError) as exc:
        raise UsageError(f"config value {key!r} must be an integer, got {value!r}") from exc
    if value <= 0:
        raise UsageError(f"config value {key!r} must be positive, got {value}")
    return value


def load_remote_config(
    remote: Optional[str] = None,
    config_path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    netrc_path: Optional[str] = None,
) -> RemoteConfig:
    """Build the RemoteConfig for this invocation.

    Args:
        remote: ``--remote`` flag value, if given.
        config_path: ``--config`` file path, if given.
        environ: Environment mapping (defaults to ``os.environ``).
        netrc_path: netrc file to consult (defaults to ``~/.netrc``).
    """
    environ = os.environ if environ is None else environ
    file_data = load_config_file(config_path) if config_path else {}

    resolved_remote = normalize_remote(str(remote or file_data.get("remote") or Constants.DEFAULT_REMOTE))
    if not resolved_remote:
        raise UsageError("remote must not be empty")

    token = (environ.get(Constants.ENV_BUF_TOKEN) or "").strip() or None
    if token is None:
        token = token_from_netrc(resolved_remote, netrc_path)

    timeout = file_data.get("timeout", Constants.REQUEST_TIMEOUT)
    try:
        timeout = float(timeout)
    except (TypeError, ValueError) as exc:
        raise UsageError(f"config value 'timeout' must be a number, got {timeout!r}") from exc

    config = RemoteConfig(
        remote=resolved_remote,
        token=token,
        page_size=_positive_int(file_data, "page_size", Constants.PAGE_SIZE),
        max_workers=_positive_int(file_data, "max_workers", Constants.MAX_WORKERS),
        timeout=timeout,
    )
    logger.debug(
        "Remote config: remote=%s authenticated=%s page_size=%d max_workers=%d",
        config.remote, bool(config.token), config.page_size, config.max_workers,
    )
    return config
