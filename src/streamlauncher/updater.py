"""Self-update from the project's GitHub releases."""

import logging
import subprocess
import sys
from collections.abc import Callable

import httpx
from pydantic import BaseModel, ValidationError

from streamlauncher.config.schema import UpdateConfig
from streamlauncher.utils.errors import UpdateError

logger = logging.getLogger(__name__)


class Release(BaseModel):
    """Subset of the GitHub release payload."""

    tag_name: str
    tarball_url: str | None = None
    html_url: str | None = None

    @property
    def version(self) -> str:
        return self.tag_name.removeprefix("v")


class Updater:
    """Checks for and installs the latest release."""

    def __init__(
        self,
        current_version: str,
        config: UpdateConfig | None = None,
        client: httpx.Client | None = None,
        runner: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ):
        self.current_version = current_version
        self.config = config or UpdateConfig()
        self._client = client
        self._runner = runner

    @property
    def latest_url(self) -> str:
        return f"{self.config.api_url.rstrip('/')}/{self.config.repository}/releases/latest"

    def get_latest_release(self) -> Release:
        """Fetch the latest published release.

        Raises:
            UpdateError: If the release cannot be fetched or parsed
        """
        headers = {"Accept": "application/vnd.github+json"}
        try:
            if self._client is not None:
                response = self._client.get(self.latest_url, headers=headers)
            else:
                with httpx.Client(timeout=15.0, follow_redirects=True) as client:
                    response = client.get(self.latest_url, headers=headers)
            response.raise_for_status()
            return Release.model_validate(response.json())
        except httpx.HTTPError as e:
            raise UpdateError(f"Error fetching latest release: {e}") from e
        except (ValueError, ValidationError) as e:
            raise UpdateError(f"Unexpected release data: {e}") from e

    def is_current(self, release: Release) -> bool:
        return release.version == self.current_version.removeprefix("v")

    def apply(self, release: Release) -> None:
        """Install ``release`` into the running interpreter's environment.

        Raises:
            UpdateError: If already up to date or the install fails
        """
        if self.is_current(release):
            raise UpdateError("Already up to date")
        if not release.tarball_url:
            raise UpdateError(f"Release {release.tag_name} has no source archive")

        command = [sys.executable, "-m", "pip", "install", "--upgrade", release.tarball_url]
        logger.info(f"Installing {release.tag_name}")
        try:
            result = self._runner(command, capture_output=True, text=True, check=False)
        except OSError as e:
            raise UpdateError(f"Failed to run pip: {e}") from e
        if result.returncode != 0:
            raise UpdateError(
                f"pip install failed: {result.stderr.strip() or result.returncode}"
            )
        self.current_version = release.version
