"""End-to-end command tests: CliRunner in front, httpx.MockTransport behind."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest

from fizzy_cli import __version__
from fizzy_cli.app import app

BASE = "http://fizzy.test"


def _page(data: Any, next_url: Optional[str] = None) -> httpx.Response:
    headers = {}
    if next_url is not None:
        headers["Link"] = f'<{next_url}>; rel="next"'
    return httpx.Response(200, json=data, headers=headers)


def _cards(request: httpx.Request) -> httpx.Response:
    if request.url.params.get("page") == "2":
        return _page([{"number": 2, "title": "Add feature"}])
    return _page([{"number": 1, "title": "Fix bug"}], f"{BASE}/897362094/cards?page=2")


# ---------------------------------------------------------------------------
# Root options
# ---------------------------------------------------------------------------


class TestRoot:
    def test_version(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == f"fizzy-cli {__version__}"

    def test_json_and_plain_conflict(self, cli_runner, logged_in) -> None:
        result = cli_runner.invoke(app, ["--json", "--plain", "board", "list"])
        assert result.exit_code == 2
        assert "cannot be used together" in result.stderr

    def test_unknown_option_is_usage_error(self, cli_runner, logged_in) -> None:
        result = cli_runner.invoke(app, ["card", "list", "--bogus"])
        assert result.exit_code == 2

    def test_invalid_config_file(self, cli_runner, isolated_config) -> None:
        isolated_config.parent.mkdir(parents=True)
        isolated_config.write_text("{broken")
        result = cli_runner.invoke(app, ["config", "show"])
        assert result.exit_code == 1
        assert "Invalid config" in result.stderr

    def test_help_command(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["help", "card"])
        assert result.exit_code == 0
        assert "list" in result.stdout

    def test_help_nested_command(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["help", "card", "list"])
        assert result.exit_code == 0
        assert "--all" in result.stdout

    def test_help_unknown_command(self, cli_runner, isolated_config) -> None:
        result = cli_runner.invoke(app, ["help", "widgets"])
        assert result.exit_code == 2
        assert "unknown command" in result.stderr


# ---------------------------------------------------------------------------
# Credentials and account checks
# ---------------------------------------------------------------------------


class TestPreconditions:
    def test_missing_credentials(self, cli_runner, isolated_config, mock_api) -> None:
        seen = mock_api(lambda request: _page([]))
        result = cli_runner.invoke(app, ["--account", "1", "board", "list"])
        assert result.exit_code == 2
        assert "missing credentials" in result.stderr
        assert "Usage:" in result.stderr
        assert seen == []

    def test_missing_account(self, cli_runner, isolated_config, mock_api) -> None:
        seen = mock_api(lambda request: _page([]))
        result = cli_runner.invoke(app, ["--token", "t", "board", "list"])
        assert result.exit_code == 2
        assert "missing account slug" in result.stderr
        assert "board list" in result.stderr
        assert seen == []

    def test_flags_override_config(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: _page([]))
        result = cli_runner.invoke(
            app, ["--account", "/555/", "--token", "flag-tok", "tag", "list"]
        )
        assert result.exit_code == 0
        assert seen[0].url.path == "/555/tags"
        assert seen[0].headers["authorization"] == "Bearer flag-tok"

    def test_env_account(self, cli_runner, logged_in, mock_api, monkeypatch) -> None:
        monkeypatch.setenv("FIZZY_ACCOUNT", "777")
        seen = mock_api(lambda request: _page([]))
        cli_runner.invoke(app, ["tag", "list"])
        assert seen[0].url.path == "/777/tags"


# ---------------------------------------------------------------------------
# Card listing and pagination
# ---------------------------------------------------------------------------


class TestCardList:
    def test_all_plain_two_pages(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(_cards)
        result = cli_runner.invoke(app, ["--plain", "card", "list", "--all"])
        assert result.exit_code == 0, result.stderr
        lines = result.stdout.splitlines()
        assert len(lines) == 2
        assert lines[0].split("\t")[:2] == ["1", "Fix bug"]
        assert lines[1].split("\t")[:2] == ["2", "Add feature"]

    def test_all_json(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(_cards)
        result = cli_runner.invoke(app, ["--json", "card", "list", "--all"])
        assert result.exit_code == 0
        titles = [card["title"] for card in json.loads(result.stdout)]
        assert titles == ["Fix bug", "Add feature"]

    def test_first_page_only_without_all(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(_cards)
        result = cli_runner.invoke(app, ["card", "list"])
        assert result.exit_code == 0
        assert len(seen) == 1
        assert result.stdout.splitlines()[0].split() == ["#", "TITLE", "STATUS", "BOARD", "LAST_ACTIVE"]

    def test_filters_become_query_params(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: _page([]))
        result = cli_runner.invoke(
            app,
            [
                "card", "list",
                "--board-id", "b1", "--board-id", "b2",
                "--tag-id", "t1",
                "--term", "login",
                "--indexed-by", "closed",
                "--sorted-by", "newest",
            ],
        )
        assert result.exit_code == 0
        params = seen[0].url.params
        assert params.get_list("board_ids[]") == ["b1", "b2"]
        assert params.get_list("tag_ids[]") == ["t1"]
        assert params.get_list("terms[]") == ["login"]
        assert params["indexed_by"] == "closed"
        assert params["sorted_by"] == "newest"
        assert "assignment_status" not in params

    def test_pagination_loop(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(lambda request: _page([{"number": 1}], f"{BASE}/897362094/cards"))
        result = cli_runner.invoke(app, ["card", "list", "--all"])
        assert result.exit_code == 1
        assert "pagination loop" in result.stderr


# ---------------------------------------------------------------------------
# Error reporting
# ---------------------------------------------------------------------------


class TestErrors:
    def test_not_found(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(lambda request: httpx.Response(404, content=b'{"error":"not found"}'))
        result = cli_runner.invoke(app, ["card", "get", "999"])
        assert result.exit_code == 1
        assert "not found" in result.stderr
        assert "status 404" in result.stderr
        assert result.stdout == ""

    def test_network_failure(self, cli_runner, logged_in, mock_api) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        mock_api(handler)
        result = cli_runner.invoke(app, ["board", "list"])
        assert result.exit_code == 1
        assert "connection refused" in result.stderr

    def test_redirect_loop(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(lambda request: httpx.Response(302, headers={"Location": str(request.url)}))
        result = cli_runner.invoke(app, ["board", "list"])
        assert result.exit_code == 1
        assert "redirects" in result.stderr
        assert "Unexpected error" not in result.stderr

    def test_malformed_body(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(lambda request: httpx.Response(200, content=b"<html>"))
        result = cli_runner.invoke(app, ["board", "list"])
        assert result.exit_code == 1
        assert "invalid JSON" in result.stderr


# ---------------------------------------------------------------------------
# Config, account and auth
# ---------------------------------------------------------------------------


class TestConfigCommands:
    def test_set_without_flags_leaves_file_untouched(self, cli_runner, logged_in: Path) -> None:
        before = logged_in.read_bytes()
        result = cli_runner.invoke(app, ["config", "set"])
        assert result.exit_code == 2
        assert "at least one of --base-url or --account" in result.stderr
        assert logged_in.read_bytes() == before

    def test_set_without_flags_creates_nothing(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set"])
        assert result.exit_code == 2
        assert not isolated_config.exists()

    def test_set_values(self, cli_runner, logged_in: Path) -> None:
        result = cli_runner.invoke(
            app, ["config", "set", "--base-url", "https://fizzy.example.com", "--account", "/42/"]
        )
        assert result.exit_code == 0
        assert result.stdout == "Config updated.\n"
        saved = json.loads(logged_in.read_text())
        assert saved["base_url"] == "https://fizzy.example.com"
        assert saved["account"] == "42"
        assert saved["token"] == "tok-123"

    def test_show_text(self, cli_runner, logged_in: Path) -> None:
        result = cli_runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert result.stdout.splitlines() == [
            f"Config path: {logged_in}",
            "Base URL: http://fizzy.test",
            "Account: 897362094",
            "Token set: true",
            "Session token set: false",
        ]
        assert "tok-123" not in result.stdout

    def test_show_json(self, cli_runner, logged_in: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "config", "show"])
        assert json.loads(result.stdout) == {
            "base_url": "http://fizzy.test",
            "account": "897362094",
            "token_set": True,
            "session_token_set": False,
            "config_path": str(logged_in),
        }


class TestAccountCommands:
    def test_set(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["account", "set", "/897362094"])
        assert result.exit_code == 0
        assert result.stdout == "Default account set to 897362094\n"
        assert json.loads(isolated_config.read_text())["account"] == "897362094"

    def test_set_blank(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["account", "set", "/"])
        assert result.exit_code == 2

    def test_list(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(
            lambda request: httpx.Response(
                200, json={"accounts": [{"slug": "/1", "name": "Acme", "user": {"name": "Ann"}}]}
            )
        )
        result = cli_runner.invoke(app, ["--plain", "account", "list"])
        assert result.exit_code == 0
        assert seen[0].url.path == "/my/identity"
        assert result.stdout == "1\tAcme\tAnn\n"


class TestAuthCommands:
    def test_login_with_token_flag(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["auth", "login", "--token", "abc"])
        assert result.exit_code == 0
        assert result.stdout == f"Token saved to {isolated_config}\n"
        saved = json.loads(isolated_config.read_text())
        assert saved["token"] == "abc"
        assert saved["session_token"] == ""

    def test_login_token_from_stdin(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["auth", "login"], input="piped-token\n")
        assert result.exit_code == 0
        assert json.loads(isolated_config.read_text())["token"] == "piped-token"

    def test_login_empty_token(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["auth", "login"], input="")
        assert result.exit_code == 2
        assert "token is required" in result.stderr

    def test_token_and_email_conflict(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["auth", "login", "--token", "a", "--email", "e@x.io"])
        assert result.exit_code == 2

    def test_magic_link(self, cli_runner, isolated_config: Path, mock_api) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/session":
                return httpx.Response(201, json={"pending_authentication_token": "pend"})
            return httpx.Response(200, json={"session_token": "sess"})

        seen = mock_api(handler)
        result = cli_runner.invoke(
            app, ["auth", "login", "--email", "me@example.com", "--code", "123456"]
        )
        assert result.exit_code == 0, result.stderr
        assert [r.url.path for r in seen] == ["/session", "/session/magic_link"]
        saved = json.loads(isolated_config.read_text())
        assert saved["session_token"] == "sess"
        assert saved["token"] == ""

    def test_magic_link_needs_code_without_tty(
        self, cli_runner, isolated_config: Path, mock_api
    ) -> None:
        mock_api(lambda request: httpx.Response(201, json={"pending_authentication_token": "p"}))
        result = cli_runner.invoke(app, ["auth", "login", "--email", "me@example.com"])
        assert result.exit_code == 2
        assert "--code is required" in result.stderr

    def test_logout(self, cli_runner, logged_in: Path) -> None:
        result = cli_runner.invoke(app, ["auth", "logout"])
        assert result.exit_code == 0
        saved = json.loads(logged_in.read_text())
        assert saved["token"] == ""
        assert saved["account"] == "897362094"

    def test_status_not_logged_in(self, cli_runner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["auth", "status"])
        assert result.exit_code == 0
        assert result.stdout == "Not logged in (no credentials configured).\n"

    def test_status(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(
            lambda request: httpx.Response(
                200, json={"accounts": [{"slug": "/1", "name": "Acme", "user": {"name": "Ann"}}]}
            )
        )
        result = cli_runner.invoke(app, ["auth", "status"])
        assert result.exit_code == 0
        lines = result.stdout.splitlines()
        assert lines[0] == "Authenticated using personal access token. Accessible accounts:"
        assert lines[1].split() == ["SLUG", "NAME", "USER"]
        assert lines[2].split() == ["1", "Acme", "Ann"]


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------


class TestMutations:
    def test_board_create(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(
            lambda request: httpx.Response(201, headers={"Location": "/897362094/boards/b1"})
        )
        result = cli_runner.invoke(
            app, ["board", "create", "--name", " Ops ", "--no-all-access", "--auto-postpone-days", "7"]
        )
        assert result.exit_code == 0, result.stderr
        assert result.stdout == "Board created: /897362094/boards/b1\n"
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {
            "board": {"name": "Ops", "all_access": False, "auto_postpone_period": 7}
        }

    def test_board_create_requires_name(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: httpx.Response(201))
        result = cli_runner.invoke(app, ["board", "create"])
        assert result.exit_code == 2
        assert "--name is required" in result.stderr
        assert seen == []

    def test_board_update_nothing(self, cli_runner, logged_in) -> None:
        result = cli_runner.invoke(app, ["board", "update", "b1"])
        assert result.exit_code == 2
        assert "no fields to update" in result.stderr

    def test_board_update_users(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: httpx.Response(204))
        result = cli_runner.invoke(
            app, ["board", "update", "b1", "--all-access", "--user-id", "u1", "--user-id", "u2"]
        )
        assert result.exit_code == 0
        assert result.stdout == "Board updated.\n"
        assert json.loads(seen[0].content) == {
            "board": {"all_access": True, "user_ids": ["u1", "u2"]}
        }

    def test_card_create_json_mode(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(
            lambda request: httpx.Response(201, headers={"Location": "/897362094/cards/5"})
        )
        result = cli_runner.invoke(
            app,
            ["--json", "card", "create", "--board-id", "b1", "--title", "Hello", "--tag-id", "t1"],
        )
        assert result.exit_code == 0
        assert seen[0].url.path == "/897362094/boards/b1/cards"
        assert json.loads(seen[0].content) == {"card": {"title": "Hello", "tag_ids": ["t1"]}}
        assert json.loads(result.stdout) == {"status": 201, "location": "/897362094/cards/5"}

    def test_card_create_with_image(self, cli_runner, logged_in, mock_api, tmp_path) -> None:
        image = tmp_path / "shot.png"
        image.write_bytes(b"\x89PNG")
        seen = mock_api(lambda request: httpx.Response(201))
        result = cli_runner.invoke(
            app,
            [
                "card", "create", "--board-id", "b1", "--title", "Hello",
                "--tag-id", "t1", "--image", str(image),
            ],
        )
        assert result.exit_code == 0, result.stderr
        body = seen[0].content
        assert seen[0].headers["content-type"].startswith("multipart/form-data")
        assert b'name="card[title]"' in body
        assert b'name="card[tag_ids][]"' in body
        assert b'name="card[image]"; filename="shot.png"' in body

    def test_card_create_missing_image(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(lambda request: httpx.Response(201))
        result = cli_runner.invoke(
            app, ["card", "create", "--board-id", "b1", "--title", "x", "--image", "nope.png"]
        )
        assert result.exit_code == 1
        assert "cannot read nope.png" in result.stderr

    def test_card_update_echoes_json(self, cli_runner, logged_in, mock_api) -> None:
        mock_api(lambda request: httpx.Response(200, json={"number": 5, "title": "New"}))
        result = cli_runner.invoke(app, ["--json", "card", "update", "5", "--title", "New"])
        assert json.loads(result.stdout) == {"number": 5, "title": "New"}

    @pytest.mark.parametrize(
        ("action", "method", "suffix", "message"),
        [
            ("close", "POST", "/closure", "Card closed."),
            ("reopen", "DELETE", "/closure", "Card reopened."),
            ("not-now", "POST", "/not_now", "Card moved to Not Now."),
            ("untriage", "DELETE", "/triage", "Card moved back to triage."),
            ("watch", "POST", "/watch", "Subscribed to card."),
            ("unwatch", "DELETE", "/watch", "Unsubscribed from card."),
            ("delete", "DELETE", "", "Card deleted."),
        ],
    )
    def test_card_actions(
        self, cli_runner, logged_in, mock_api, action, method, suffix, message
    ) -> None:
        seen = mock_api(lambda request: httpx.Response(204))
        result = cli_runner.invoke(app, ["card", action, "42"])
        assert result.exit_code == 0, result.stderr
        assert seen[0].method == method
        assert seen[0].url.path == f"/897362094/cards/42{suffix}"
        assert result.stdout == f"{message}\n"

    def test_card_tag_strips_hash(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: httpx.Response(204))
        result = cli_runner.invoke(app, ["card", "tag", "42", "--title", "#bug"])
        assert result.exit_code == 0
        assert json.loads(seen[0].content) == {"tag_title": "bug"}

    def test_card_triage(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: httpx.Response(204))
        result = cli_runner.invoke(app, ["card", "triage", "42", "--column-id", "col1"])
        assert result.stdout == "Card moved into column.\n"
        assert json.loads(seen[0].content) == {"column_id": "col1"}

    def test_card_assign_requires_assignee(self, cli_runner, logged_in) -> None:
        result = cli_runner.invoke(app, ["card", "assign", "42"])
        assert result.exit_code == 2
        assert "--assignee-id is required" in result.stderr
        assert "Usage:" in result.stderr
        assert "card assign" in result.stderr

    def test_comment_create(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: httpx.Response(201))
        result = cli_runner.invoke(app, ["comment", "create", "42", "--body", "Looks good"])
        assert result.stdout == "Comment created.\n"
        assert seen[0].url.path == "/897362094/cards/42/comments"
        assert json.loads(seen[0].content) == {"comment": {"body": "Looks good"}}

    def test_column_requires_board(self, cli_runner, logged_in) -> None:
        result = cli_runner.invoke(app, ["column", "list"])
        assert result.exit_code == 2
        assert "--board-id is required" in result.stderr

    def test_user_update_with_avatar(self, cli_runner, logged_in, mock_api, tmp_path) -> None:
        avatar = tmp_path / "me.jpg"
        avatar.write_bytes(b"JPEG")
        seen = mock_api(lambda request: httpx.Response(204))
        result = cli_runner.invoke(app, ["user", "update", "u1", "--avatar", str(avatar)])
        assert result.exit_code == 0
        assert b'name="user[avatar]"; filename="me.jpg"' in seen[0].content

    def test_notification_unread_filter(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: _page([{"id": "n1", "read": False, "title": "Hi"}]))
        result = cli_runner.invoke(app, ["--plain", "notification", "list", "--unread"])
        assert seen[0].url.params["unread"] == "true"
        assert result.stdout == "n1\tno\tHi\t\t\n"

    def test_notification_read_all(self, cli_runner, logged_in, mock_api) -> None:
        seen = mock_api(lambda request: httpx.Response(204))
        result = cli_runner.invoke(app, ["--json", "notification", "read-all"])
        assert seen[0].url.path == "/897362094/notifications/bulk_reading"
        assert json.loads(result.stdout) == {"status": 204}
