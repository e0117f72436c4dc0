"""Tests for the self-updater."""

import subprocess

import httpx
import pytest

from streamlauncher.config.schema import UpdateConfig
from streamlauncher.updater import Release, Updater
from streamlauncher.utils.errors import UpdateError


def client_for(payload: dict, status: int = 200) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/repos/owner/project/releases/latest"
        return httpx.Response(status, json=payload)

    return httpx.Client(transport=httpx.MockTransport(handler))


CONFIG = UpdateConfig(repository="owner/project", api_url="https://api.github.com/repos")


class TestUpdater:
    """Tests for Updater."""

    def test_get_latest_release(self) -> None:
        updater = Updater("0.1.0", CONFIG, client=client_for({"tag_name": "v0.2.0", "tarball_url": "https://x/t.tgz"}))

        release = updater.get_latest_release()

        assert release.tag_name == "v0.2.0"
        assert release.version == "0.2.0"

    def test_http_error(self) -> None:
        updater = Updater("0.1.0", CONFIG, client=client_for({"message": "Not Found"}, status=404))

        with pytest.raises(UpdateError, match="Error fetching latest release"):
            updater.get_latest_release()

    def test_already_up_to_date(self) -> None:
        """Test applying the current release is refused without running pip."""
        calls: list = []
        updater = Updater("0.1.0", CONFIG, runner=lambda *a, **k: calls.append(a))

        with pytest.raises(UpdateError, match="Already up to date"):
            updater.apply(Release(tag_name="v0.1.0", tarball_url="https://x/t.tgz"))

        assert calls == []

    def test_apply_runs_pip(self) -> None:
        calls: list = []

        def runner(args, **kwargs):
            calls.append(args)
            return subprocess.CompletedProcess(args, 0, "", "")

        updater = Updater("0.1.0", CONFIG, runner=runner)
        updater.apply(Release(tag_name="v0.2.0", tarball_url="https://x/t.tgz"))

        assert calls[0][1:] == ["-m", "pip", "install", "--upgrade", "https://x/t.tgz"]
        assert updater.current_version == "0.2.0"

    def test_pip_failure(self) -> None:
        updater = Updater(
            "0.1.0",
            CONFIG,
            runner=lambda args, **kwargs: subprocess.CompletedProcess(args, 1, "", "no network"),
        )

        with pytest.raises(UpdateError, match="no network"):
            updater.apply(Release(tag_name="v0.2.0", tarball_url="https://x/t.tgz"))
