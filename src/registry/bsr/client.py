"""Buf Schema Registry client: labels, label history, commits, curated plugins."""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional

from constants import Constants, RegistryType
from common.errors import RemoteError
from common.logging_utils import extra_context, is_debug_enabled
from common.timestamps import parse_rfc3339
from versioning.models import CommitRecord, CuratedPlugin, Label, ModuleIdentity, PluginIdentity

import registry.bsr as bsr_pkg

logger = logging.getLogger(__name__)

_COMMIT_ID_RE = re.compile(r"^[0-9a-f]{32}$")

_REGISTRY_TYPES = {
    "PLUGIN_REGISTRY_TYPE_GO": RegistryType.GO,
    "PLUGIN_REGISTRY_TYPE_NPM": RegistryType.NPM,
    "PLUGIN_REGISTRY_TYPE_MAVEN": RegistryType.MAVEN,
}


def parse_registry_type(value: Any) -> Optional[RegistryType]:
    """Map a curated plugin registry type onto a supported RegistryType.

    Accepts the enum name (``PLUGIN_REGISTRY_TYPE_NPM``) or the short form
    (``npm``). Unsupported ecosystems map to None.
    """
    if not isinstance(value, str) or not value:
        return None
    upper = value.upper()
    if upper in _REGISTRY_TYPES:
        return _REGISTRY_TYPES[upper]
    return _REGISTRY_TYPES.get(f"PLUGIN_REGISTRY_TYPE_{upper}")


def is_draft_ref(ref: Optional[str]) -> bool:
    """True when ``ref`` names a label other than the default label.

    Empty refs, the default label and commit ids are not drafts.
    """
    if not ref or ref == Constants.DEFAULT_LABEL:
        return False
    return not _COMMIT_ID_RE.match(ref.lower())


def _commit_from_json(data: Dict[str, Any], *, is_draft: bool, operation: str) -> CommitRecord:
    commit_id = data.get("id")
    created_at = parse_rfc3339(data.get("createTime"))
    if not commit_id or created_at is None:
        raise RemoteError(operation, "commit is missing id or createTime")
    if len(commit_id) < Constants.SHORT_COMMIT_LENGTH:
        raise RemoteError(operation, f"commit id {commit_id!r} is too short")
    return CommitRecord(commit_id=commit_id, created_at=created_at, is_draft=is_draft)


class BSRClient:
    """Lightweight Connect JSON client for the registry API.

    Takes its remote, token and tunables from an explicit RemoteConfig.
    """

    def __init__(self, config):
        self.config = config

    def _get_headers(self, remote: str) -> Dict[str, str]:
        """Get request headers; the token is only sent to the configured remote."""
        headers = {}
        if self.config.token and remote == self.config.remote:
            headers["Authorization"] = f"Bearer {self.config.token}"
        return headers

    def _call(self, remote: str, service: str, method: str, payload: Dict[str, Any], context: str) -> Dict[str, Any]:
        url = f"https://{remote}/{service}/{method}"
        return bsr_pkg.connect_post(
            url,
            payload,
            context=context,
            headers=self._get_headers(remote),
            timeout=self.config.timeout,
        )

    def list_labels(self, module: ModuleIdentity) -> List[Label]:
        """List unarchived labels of ``module``, newest created first.

        Args:
            module: Module to list labels for.

        Returns:
            Labels in the order returned by the registry.
        """
        context = f"failed to list labels for {module.owner}/{module.name}"
        data = self._call(
            module.remote,
            Constants.LABEL_SERVICE,
            "ListLabels",
            {
                "resourceRef": {"name": {"owner": module.owner, "module": module.name}},
                "archiveFilter": "ARCHIVE_FILTER_UNARCHIVED_ONLY",
                "pageSize": self.config.page_size,
                "order": "ORDER_CREATE_TIME_DESC",
            },
            context,
        )
        labels = []
        for item in data.get("labels") or []:
            if not item.get("id"):
                continue
            labels.append(Label(
                id=item["id"],
                name=item.get("name", ""),
                create_time=parse_rfc3339(item.get("createTime")),
            ))
        if is_debug_enabled(logger):
            logger.debug(
                "Listed labels",
                extra=extra_context(
                    event="function_exit",
                    component="bsr_client",
                    action="list_labels",
                    target=str(module),
                    count=len(labels),
                )
            )
        return labels

    def list_label_history(self, module: ModuleIdentity, label: Label) -> List[CommitRecord]:
        """List commits ``label`` of ``module`` has pointed at, newest first."""
        context = f"failed to list label history for {label.name or label.id}"
        data = self._call(
            module.remote,
            Constants.LABEL_SERVICE,
            "ListLabelHistory",
            {
                "pageSize": self.config.page_size,
                "labelRef": {"id": label.id},
                "order": "ORDER_DESC",
            },
            context,
        )
        is_draft = is_draft_ref(label.name)
        commits = []
        for value in data.get("values") or []:
            commit = value.get("commit")
            if not commit:
                continue
            commits.append(_commit_from_json(commit, is_draft=is_draft, operation=context))
        return commits

    def get_commit(self, module: ModuleIdentity, ref: Optional[str] = None) -> CommitRecord:
        """Resolve ``ref`` (label name or commit id; None for latest) to a commit."""
        context = f"failed to get commit {module.owner}/{module.name}:{ref or Constants.LATEST}"
        name = {"owner": module.owner, "module": module.name}
        if ref:
            name["ref"] = ref
        data = self._call(
            module.remote,
            Constants.COMMIT_SERVICE,
            "GetCommits",
            {"resourceRefs": [{"name": name}]},
            context,
        )
        commits = data.get("commits") or []
        if not commits:
            raise RemoteError(context, "no commit returned")
        return _commit_from_json(commits[0], is_draft=is_draft_ref(ref), operation=context)

    def get_curated_plugin(self, plugin: PluginIdentity, version: Optional[str] = None) -> CuratedPlugin:
        """Fetch the latest curated release of ``plugin`` (optionally pinned to ``version``)."""
        context = f"failed to get plugin {plugin.owner}/{plugin.name}:{version or Constants.LATEST}"
        payload: Dict[str, Any] = {"owner": plugin.owner, "name": plugin.name}
        if version:
            payload["version"] = version
        data = self._call(
            plugin.remote, Constants.PLUGIN_CURATION_SERVICE, "GetLatestCuratedPlugin", payload, context
        )
        info = data.get("plugin")
        if not info or not info.get("version"):
            raise RemoteError(context, "plugin response is missing a version")
        raw_type = info.get("registryType")
        try:
            revision = int(info.get("revision") or 0)
        except (TypeError, ValueError) as exc:
            raise RemoteError(context, f"invalid plugin revision {info.get('revision')!r}") from exc
        return CuratedPlugin(
            version=info["version"],
            revision=revision,
            registry_type=parse_registry_type(raw_type),
            raw_registry_type=raw_type,
        )
