"""Tests for OAuth credential loading."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from streamlauncher.broadcast.auth import CLIENT_SECRETS_FILENAME, TOKEN_FILENAME, load_credentials
from streamlauncher.utils.errors import AuthenticationError


def fake_credentials(valid: bool = True, expired: bool = False, refresh_token: str | None = None) -> MagicMock:
    credentials = MagicMock(valid=valid, expired=expired, refresh_token=refresh_token)
    credentials.to_json.return_value = '{"token": "t"}'
    return credentials


class TestLoadCredentials:
    """Tests for load_credentials."""

    def test_valid_cached_token(self, tmp_path: Path) -> None:
        """Test a valid cached token is returned without any flow."""
        (tmp_path / TOKEN_FILENAME).write_text("{}")
        cached = fake_credentials()
        flow = MagicMock()

        with patch("streamlauncher.broadcast.auth.Credentials") as credentials_cls:
            credentials_cls.from_authorized_user_file.return_value = cached
            result = load_credentials(tmp_path, flow_runner=flow)

        assert result is cached
        flow.assert_not_called()

    def test_expired_token_is_refreshed_and_saved(self, tmp_path: Path) -> None:
        """Test an expired token with a refresh token is refreshed and cached."""
        (tmp_path / TOKEN_FILENAME).write_text("{}")
        cached = fake_credentials(valid=False, expired=True, refresh_token="r")

        with patch("streamlauncher.broadcast.auth.Credentials") as credentials_cls:
            credentials_cls.from_authorized_user_file.return_value = cached
            result = load_credentials(tmp_path, interactive=False)

        assert result is cached
        cached.refresh.assert_called_once()
        assert (tmp_path / TOKEN_FILENAME).read_text() == '{"token": "t"}'

    def test_non_interactive_without_token_fails(self, tmp_path: Path) -> None:
        """Test unattended runs never start the browser flow."""
        flow = MagicMock()

        with pytest.raises(AuthenticationError, match="streamlauncher auth"):
            load_credentials(tmp_path, interactive=False, flow_runner=flow)

        flow.assert_not_called()

    def test_missing_client_secrets(self, tmp_path: Path) -> None:
        """Test a missing credentials.json is reported."""
        with pytest.raises(AuthenticationError, match="credentials.json"):
            load_credentials(tmp_path, flow_runner=MagicMock())

    def test_interactive_flow_saves_token(self, tmp_path: Path) -> None:
        """Test the authorization flow result is cached with private permissions."""
        (tmp_path / CLIENT_SECRETS_FILENAME).write_text("{}")
        obtained = fake_credentials()
        flow = MagicMock(return_value=obtained)

        result = load_credentials(tmp_path, flow_runner=flow)

        assert result is obtained
        flow.assert_called_once_with(tmp_path / CLIENT_SECRETS_FILENAME)
        token_file = tmp_path / TOKEN_FILENAME
        assert token_file.exists()
        assert token_file.stat().st_mode & 0o077 == 0
