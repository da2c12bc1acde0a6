"""Tests for the CLI entry point."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from main import build_query, main, parse_args


class TestParseArgs:
    def test_search_defaults(self) -> None:
        args = parse_args(["search"])
        assert args.command == "search"
        assert args.remote is False
        assert args.details is False
        assert args.config is None

    def test_search_flags(self) -> None:
        args = parse_args(["search", "-k", "help desk", "--remote", "--contract", "--details"])
        query = build_query(args)
        assert query["keyword"] == "help desk"
        assert query["require_remote"] is True
        assert query["require_contract"] is True
        assert query["fetch_details"] is True

    def test_replay_has_no_details_flag(self) -> None:
        args = parse_args(["replay", "page.html"])
        assert build_query(args)["fetch_details"] is False

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            parse_args([])


class TestMain:
    def test_replay_prints_result(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        payload = tmp_path / "body.json"
        payload.write_text(json.dumps({"elements": [{"title": "Help Desk Technician"}]}))

        main(["replay", str(payload), "--limit", "5"])

        data = json.loads(capsys.readouterr().out)
        assert data["returned"] == 1
        assert data["params"]["limit"] == 5

    def test_replay_missing_file_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["replay", str(tmp_path / "missing.html")])
        assert exc_info.value.code == 1

    def test_missing_config_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["search", "--config", str(tmp_path / "nope.yaml")])
        assert exc_info.value.code == 1

    def test_search_error_status_exits(self, capsys: pytest.CaptureFixture[str]) -> None:
        error = (502, {"error": "upstream_failed", "detail": "down"})
        with patch("main.handle_search", new=AsyncMock(return_value=error)):
            with pytest.raises(SystemExit) as exc_info:
                main(["search"])
        assert exc_info.value.code == 1
        assert json.loads(capsys.readouterr().out)["error"] == "upstream_failed"
