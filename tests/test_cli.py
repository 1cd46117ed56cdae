"""
Tests for the live-client CLI commands that need no server.
"""

from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from live_client.cli import _token_provider, app
from live_client.components.api.history import NotificationPage
from live_shared.auth import EnvTokenProvider, FileTokenProvider
from live_shared.config.settings import settings
from live_shared.utils.exceptions import ApiError
from tests.conftest import make_notification

runner = CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup():
    # setup_logging would replace the root handlers for the rest of the session
    with patch("live_client.cli.setup_logging"):
        yield


class TestConfigCommand:
    def test_token_is_masked(self, monkeypatch):
        monkeypatch.setattr(settings, "access_token", "supersecrettoken")

        result = runner.invoke(app, ["config"])

        assert result.exit_code == 0
        assert "supers..." in result.output
        assert "supersecrettoken" not in result.output


class TestHistoryCommand:
    def test_prints_table(self):
        page = NotificationPage(
            notifications=[make_notification(1, title="Matched with Acme")],
            total_count=1,
        )
        with patch(
            "live_client.cli.NotificationHistoryClient.fetch_notifications",
            new=AsyncMock(return_value=page),
        ):
            result = runner.invoke(app, ["history", "--token", "abc"])

        assert result.exit_code == 0
        assert "Matched with Acme" in result.output

    def test_api_error_exits_nonzero(self):
        with patch(
            "live_client.cli.NotificationHistoryClient.fetch_notifications",
            new=AsyncMock(side_effect=ApiError("Not authenticated", code="UNAUTHORIZED")),
        ):
            result = runner.invoke(app, ["history", "--token", "abc"])

        assert result.exit_code == 1
        assert "Not authenticated" in result.output

    def test_token_file_supplies_the_token(self, tmp_path):
        token_file = tmp_path / "access.token"
        token_file.write_text("file-token\n", encoding="utf-8")
        page = NotificationPage(notifications=[], total_count=0)

        with patch("live_client.cli.NotificationHistoryClient") as client_cls:
            client = client_cls.return_value.__aenter__.return_value
            client.fetch_notifications = AsyncMock(return_value=page)
            result = runner.invoke(
                app, ["history", "--token", "ignored", "--token-file", str(token_file)]
            )

        assert result.exit_code == 0
        provider = client_cls.call_args.args[1]
        assert isinstance(provider, FileTokenProvider)
        assert provider.get_access_token() == "file-token"


class TestTokenFileOption:
    def test_provider_selection(self, tmp_path):
        token_file = tmp_path / "access.token"

        assert isinstance(_token_provider(None, token_file), FileTokenProvider)
        assert isinstance(_token_provider("abc", token_file), FileTokenProvider)
        assert _token_provider("abc").get_access_token() == "abc"
        assert isinstance(_token_provider(None), EnvTokenProvider)

    def test_ping_with_missing_token_file_fails(self, tmp_path):
        result = runner.invoke(app, ["ping", "--token-file", str(tmp_path / "absent.token")])

        assert result.exit_code == 1
        assert "Connection failed" in result.output

    def test_ping_with_empty_token_file_fails(self, tmp_path):
        token_file = tmp_path / "empty.token"
        token_file.write_text("\n", encoding="utf-8")

        result = runner.invoke(app, ["ping", "--token-file", str(token_file)])

        assert result.exit_code == 1
        assert "Connection failed" in result.output
