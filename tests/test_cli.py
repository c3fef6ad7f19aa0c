"""Tests for the command-line entry point."""

import io
import json
from datetime import datetime, timezone

import pytest

import remotever
from cli_sdk import split_arguments
from constants import ExitCodes, RegistryType
from common.errors import RemoteError, UsageError
from versioning.models import CommitRecord, CuratedPlugin, Label

COMMIT_ID = "a1b2c3d4e5f60718293a4b5c6d7e8f90"
CREATED = datetime(2024, 3, 5, 7, 9, 11, tzinfo=timezone.utc)


class StubClient:
    """Registry client double built by the CLI's client factory."""

    fail_with = None

    def __init__(self, config):
        self.config = config

    def list_labels(self, module):
        if self.fail_with:
            raise self.fail_with
        return [Label(id="l1", name="main")]

    def list_label_history(self, module, label):
        return [CommitRecord(COMMIT_ID, CREATED, False)]

    def get_curated_plugin(self, plugin, version):
        return CuratedPlugin("v1.4.2", 3, RegistryType.NPM, "PLUGIN_REGISTRY_TYPE_NPM")

    def get_commit(self, module, ref):
        return CommitRecord(COMMIT_ID, CREATED, False)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("BUF_TOKEN", "test-token")
    monkeypatch.setenv("HOME", str(tmp_path))
    StubClient.fail_with = None


def _run(argv):
    out, err = io.StringIO(), io.StringIO()
    code = remotever.run(argv, client_factory=StubClient, stdout=out, stderr=err)
    return code, out.getvalue(), err.getvalue()


class TestSplitArguments:
    def test_two_arguments(self):
        assert split_arguments(["a", "b"]) == ["a", "b"]

    def test_single_quoted_argument(self):
        assert split_arguments(["a  b"]) == ["a", "b"]

    @pytest.mark.parametrize("args", [[], ["a"], ["a", "b", "c"]])
    def test_wrong_count(self, args):
        with pytest.raises(UsageError):
            split_arguments(args)


class TestResolveCommand:
    def test_text_output(self):
        code, out, err = _run(["sdk", "resolve", "@buf/acme_petapis.bufbuild_connect-es",
                               "v1.0.0-main-a1b2c3d4e5f6.3"])
        assert code == ExitCodes.SUCCESS.value
        assert err == ""
        assert "Package Info" in out
        assert f"https://buf.build/acme/petapis/docs/{COMMIT_ID}" in out
        assert "https://buf.build/bufbuild/connect-es?version=v1.0.0" in out

    def test_json_output(self):
        code, out, _ = _run(["sdk", "resolve", "-f", "json",
                             "@buf/acme_petapis.bufbuild_connect-es v1.0.0-main-a1b2c3d4e5f6.3"])
        assert code == 0
        data = json.loads(out)
        assert data["version"] == "v1.0.0-20240305070911-a1b2c3d4e5f6.3"
        assert data["commit"] == COMMIT_ID
        assert data["module"] == {"remote": "buf.build", "owner": "acme", "name": "petapis"}
        assert data["plugin"]["name"] == "connect-es"

    def test_usage_error(self):
        code, out, err = _run(["sdk", "resolve", "@buf/acme_petapis.bufbuild_es"])
        assert code == ExitCodes.USAGE_ERROR.value
        assert out == ""
        assert err.startswith("error: invalid input: expected 2 arguments")

    def test_classification_error(self):
        code, out, err = _run(["sdk", "resolve", "left-pad", "v1.0.0"])
        assert code == ExitCodes.RESOLUTION_ERROR.value
        assert out == ""
        assert "could not determine registry" in err
        assert err.count("\n") == 1

    def test_remote_error(self):
        StubClient.fail_with = RemoteError("failed to list labels for acme/petapis", "unavailable")
        code, out, err = _run(["sdk", "resolve", "@buf/acme_petapis.bufbuild_es",
                               "v1.0.0-main-a1b2c3d4e5f6.3"])
        assert code == ExitCodes.CONNECTION_ERROR.value
        assert out == ""
        assert err == "error: failed to list labels for acme/petapis: unavailable\n"


class TestVersionCommand:
    def test_json_default(self):
        code, out, _ = _run(["sdk", "version", "bufbuild/es:v1.4.2", "acme/petapis:main"])
        assert code == 0
        data = json.loads(out)
        assert set(data) == {"version", "command", "hint"}
        assert data["version"] == "v1.4.2-20240305070911-a1b2c3d4e5f6.3"

    def test_text_format(self):
        code, out, _ = _run(["sdk", "version", "-f", "text", "bufbuild/es", "acme/petapis"])
        assert code == 0
        assert "Version:" in out
        assert "npm install @buf/acme_petapis.bufbuild_es@" in out

    def test_remote_flag_threaded_into_config(self):
        seen = {}

        class RecordingClient(StubClient):
            def __init__(self, config):
                super().__init__(config)
                seen["config"] = config

        out, err = io.StringIO(), io.StringIO()
        code = remotever.run(["--remote", "https://buf.example.com", "sdk", "version",
                              "bufbuild/es", "acme/petapis"],
                             client_factory=RecordingClient, stdout=out, stderr=err)
        assert code == 0
        assert seen["config"].remote == "buf.example.com"
        assert seen["config"].token == "test-token"


class TestMissingSubcommand:
    def test_no_command(self):
        code, out, err = _run([])
        assert code == ExitCodes.USAGE_ERROR.value
        assert "must specify a subcommand" in err

    def test_sdk_without_subcommand(self):
        code, _, err = _run(["sdk"])
        assert code == ExitCodes.USAGE_ERROR.value
        assert "must specify a subcommand" in err
