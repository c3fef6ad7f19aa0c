"""Tests for the registry API client mapping."""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from cli_config import RemoteConfig
from constants import RegistryType
from common.errors import RemoteError
from registry.bsr import BSRClient, parse_registry_type
from registry.bsr.client import is_draft_ref
from versioning.models import Label, ModuleIdentity, PluginIdentity

MODULE = ModuleIdentity("acme", "petapis")
COMMIT_ID = "a1b2c3d4e5f60718293a4b5c6d7e8f90"


def _client(token="secret"):
    return BSRClient(RemoteConfig(remote="buf.build", token=token, page_size=50))


class TestListLabels:
    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_request_and_mapping(self, mock_post):
        mock_post.return_value = {"labels": [
            {"id": "l1", "name": "main", "createTime": "2024-01-01T00:00:00Z"},
            {"name": "no-id"},
            {"id": "l2", "name": "demo"},
        ]}

        labels = _client().list_labels(MODULE)

        assert [label.id for label in labels] == ["l1", "l2"]
        assert labels[0].create_time == datetime(2024, 1, 1, tzinfo=timezone.utc)
        url, payload = mock_post.call_args[0]
        assert url == "https://buf.build/buf.registry.module.v1.LabelService/ListLabels"
        assert payload == {
            "resourceRef": {"name": {"owner": "acme", "module": "petapis"}},
            "archiveFilter": "ARCHIVE_FILTER_UNARCHIVED_ONLY",
            "pageSize": 50,
            "order": "ORDER_CREATE_TIME_DESC",
        }
        kwargs = mock_post.call_args[1]
        assert kwargs["headers"] == {"Authorization": "Bearer secret"}
        assert "acme/petapis" in kwargs["context"]

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_anonymous_without_token(self, mock_post):
        mock_post.return_value = {}
        assert _client(token=None).list_labels(MODULE) == []
        assert mock_post.call_args[1]["headers"] == {}

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_token_not_sent_to_other_remote(self, mock_post):
        mock_post.return_value = {}
        _client().list_labels(ModuleIdentity("acme", "petapis", remote="buf.example.com"))
        assert mock_post.call_args[0][0].startswith("https://buf.example.com/")
        assert mock_post.call_args[1]["headers"] == {}


class TestListLabelHistory:
    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_commits_marked_draft_for_non_default_label(self, mock_post):
        mock_post.return_value = {"values": [
            {"commit": {"id": COMMIT_ID, "createTime": "2024-03-05T07:09:11.123456789Z"}},
            {},
        ]}

        commits = _client().list_label_history(MODULE, Label(id="l2", name="feature-x"))

        assert len(commits) == 1
        assert commits[0].commit_id == COMMIT_ID
        assert commits[0].created_at == datetime(2024, 3, 5, 7, 9, 11, 123456, tzinfo=timezone.utc)
        assert commits[0].is_draft is True
        assert mock_post.call_args[0][1] == {"pageSize": 50, "labelRef": {"id": "l2"}, "order": "ORDER_DESC"}

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_main_label_not_draft(self, mock_post):
        mock_post.return_value = {"values": [
            {"commit": {"id": COMMIT_ID, "createTime": "2024-03-05T07:09:11Z"}},
        ]}
        commits = _client().list_label_history(MODULE, Label(id="l1", name="main"))
        assert commits[0].is_draft is False

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_malformed_commit(self, mock_post):
        mock_post.return_value = {"values": [{"commit": {"id": COMMIT_ID}}]}
        with pytest.raises(RemoteError):
            _client().list_label_history(MODULE, Label(id="l1", name="main"))


class TestGetCommit:
    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_latest_omits_ref(self, mock_post):
        mock_post.return_value = {"commits": [{"id": COMMIT_ID, "createTime": "2024-03-05T07:09:11Z"}]}

        commit = _client().get_commit(MODULE)

        assert commit.commit_id == COMMIT_ID
        assert commit.is_draft is False
        assert mock_post.call_args[0][1] == {
            "resourceRefs": [{"name": {"owner": "acme", "module": "petapis"}}]
        }

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_label_ref_is_draft(self, mock_post):
        mock_post.return_value = {"commits": [{"id": COMMIT_ID, "createTime": "2024-03-05T07:09:11Z"}]}
        commit = _client().get_commit(MODULE, "feature-x")
        assert commit.is_draft is True
        assert mock_post.call_args[0][1]["resourceRefs"][0]["name"]["ref"] == "feature-x"

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_empty_response(self, mock_post):
        mock_post.return_value = {"commits": []}
        with pytest.raises(RemoteError):
            _client().get_commit(MODULE, "main")

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_short_commit_id_rejected(self, mock_post):
        mock_post.return_value = {"commits": [{"id": "abc", "createTime": "2024-03-05T07:09:11Z"}]}
        with pytest.raises(RemoteError):
            _client().get_commit(MODULE)


class TestGetCuratedPlugin:
    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_mapping(self, mock_post):
        mock_post.return_value = {"plugin": {
            "version": "v1.4.2", "revision": 3, "registryType": "PLUGIN_REGISTRY_TYPE_NPM",
        }}

        plugin = _client().get_curated_plugin(PluginIdentity("bufbuild", "es"), "v1.4.2")

        assert plugin.version == "v1.4.2"
        assert plugin.revision == 3
        assert plugin.registry_type is RegistryType.NPM
        url, payload = mock_post.call_args[0]
        assert url.endswith("/buf.alpha.registry.v1alpha1.PluginCurationService/GetLatestCuratedPlugin")
        assert payload == {"owner": "bufbuild", "name": "es", "version": "v1.4.2"}

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_latest_omits_version(self, mock_post):
        mock_post.return_value = {"plugin": {"version": "v1.0.0", "registryType": "PLUGIN_REGISTRY_TYPE_SWIFT"}}
        plugin = _client().get_curated_plugin(PluginIdentity("apple", "swift"))
        assert mock_post.call_args[0][1] == {"owner": "apple", "name": "swift"}
        assert plugin.revision == 0
        assert plugin.registry_type is None
        assert plugin.raw_registry_type == "PLUGIN_REGISTRY_TYPE_SWIFT"

    @patch("registry.bsr.client.bsr_pkg.connect_post")
    def test_missing_version(self, mock_post):
        mock_post.return_value = {"plugin": {}}
        with pytest.raises(RemoteError):
            _client().get_curated_plugin(PluginIdentity("bufbuild", "es"))


class TestHelpers:
    def test_parse_registry_type(self):
        assert parse_registry_type("PLUGIN_REGISTRY_TYPE_GO") is RegistryType.GO
        assert parse_registry_type("maven") is RegistryType.MAVEN
        assert parse_registry_type("PLUGIN_REGISTRY_TYPE_PYTHON") is None
        assert parse_registry_type(None) is None

    def test_is_draft_ref(self):
        assert is_draft_ref(None) is False
        assert is_draft_ref("main") is False
        assert is_draft_ref(COMMIT_ID) is False
        assert is_draft_ref("feature-x") is True
