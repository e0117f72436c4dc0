"""OAuth credentials for the YouTube Data API.

The credentials directory holds the OAuth client secrets downloaded from the
Google Cloud console (``credentials.json``) and the cached user token
(``youtube_token.json``).
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from streamlauncher.utils.errors import AuthenticationError

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/youtube"]
CLIENT_SECRETS_FILENAME = "credentials.json"
TOKEN_FILENAME = "youtube_token.json"


def _run_installed_app_flow(secrets_file: Path) -> Credentials:
    flow = InstalledAppFlow.from_client_secrets_file(str(secrets_file), SCOPES)
    return flow.run_local_server(port=0, open_browser=True)


def save_token(token_file: Path, credentials: Credentials) -> None:
    """Cache the token so later runs need no browser."""
    token_file.parent.mkdir(parents=True, exist_ok=True)
    token_file.write_text(credentials.to_json())
    token_file.chmod(0o600)
    logger.info(f"Saved credential file to: {token_file}")


def load_credentials(
    credentials_dir: Path,
    interactive: bool = True,
    flow_runner: Callable[[Path], Credentials] | None = None,
) -> Credentials:
    """Load, refresh or obtain OAuth credentials.

    Args:
        credentials_dir: Directory with credentials.json and the token cache
        interactive: Allow the browser-based authorization flow. Detached
            runs (cron, Task Scheduler) pass False.
        flow_runner: Replacement for the installed-app flow (testing)

    Returns:
        Valid credentials

    Raises:
        AuthenticationError: If no valid credentials can be obtained
    """
    token_file = credentials_dir / TOKEN_FILENAME
    credentials: Credentials | None = None

    if token_file.exists():
        try:
            credentials = Credentials.from_authorized_user_file(str(token_file), SCOPES)
        except (ValueError, OSError) as e:
            logger.warning(f"Ignoring unreadable token file {token_file}: {e}")

    if credentials is not None and credentials.valid:
        return credentials

    if credentials is not None and credentials.expired and credentials.refresh_token:
        try:
            credentials.refresh(Request())
            save_token(token_file, credentials)
            return credentials
        except RefreshError as e:
            logger.warning(f"Token refresh failed: {e}")

    if not interactive:
        raise AuthenticationError(
            f"No valid token in {token_file}. "
            "Run `streamlauncher auth` once in a terminal to authorize."
        )

    secrets_file = credentials_dir / CLIENT_SECRETS_FILENAME
    if not secrets_file.exists():
        raise AuthenticationError(
            f"Unable to read credentials file ({secrets_file}). "
            "Please ensure credentials.json exists"
        )

    try:
        credentials = (flow_runner or _run_installed_app_flow)(secrets_file)
    except (GoogleAuthError, ValueError, OSError) as e:
        raise AuthenticationError(f"Unable to retrieve token: {e}") from e

    save_token(token_file, credentials)
    logger.info("Authorized with YouTube API")
    return credentials


def build_youtube_service(credentials: Credentials) -> Any:
    """Build a YouTube Data API v3 client."""
    return build("youtube", "v3", credentials=credentials, cache_discovery=False)
