# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for the pagestate CLI (engine calls patched out)."""

from __future__ import annotations

import json
import logging
from unittest.mock import AsyncMock, patch

import pytest
import structlog

from pagestate.cli import main
from pagestate.errors import UpstreamError

_ENV_VARS = (
    "PAGESTATE_API_URL",
    "PAGESTATE_AJAX_URL",
    "PAGESTATE_API_TOKEN",
    "THEME_DIR",
    "PAGESTATE_TIMEOUT",
    "PAGESTATE_LOG_LEVEL",
    "PAGESTATE_JSON_LOGS",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    old_handlers, old_level = root.handlers[:], root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()


class TestLoad:
    def test_prints_payload(self, tmp_path, capsys):
        payload = {"state": {"app": {}}, "themeText": {}, "placeholders": []}
        with patch("pagestate.cli._load", new=AsyncMock(return_value=payload)) as mock_load:
            main(
                [
                    "load",
                    "/shoes",
                    "--query",
                    "?price_from=1",
                    "--api-url",
                    "https://api.test",
                    "--theme-dir",
                    str(tmp_path),
                ]
            )
        assert json.loads(capsys.readouterr().out) == payload
        config, args = mock_load.call_args.args
        assert config.api_base_url == "https://api.test"
        assert args.query == "?price_from=1"
        assert args.locale == "en"

    def test_env_config(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("PAGESTATE_API_URL", "https://env.test")
        monkeypatch.setenv("THEME_DIR", str(tmp_path))
        with patch("pagestate.cli._load", new=AsyncMock(return_value={})) as mock_load:
            main(["load", "/"])
        assert mock_load.call_args.args[0].api_base_url == "https://env.test"

    def test_output_file(self, tmp_path, capsys):
        out = tmp_path / "state.json"
        with patch("pagestate.cli._load", new=AsyncMock(return_value={"state": 1})):
            main(["load", "/", "--api-url", "https://a.test", "--theme-dir", str(tmp_path), "-o", str(out)])
        assert json.loads(out.read_text(encoding="utf-8")) == {"state": 1}

    def test_missing_config_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["load", "/shoes"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Error: API base URL is not configured" in err
        assert "Hint:" in err

    def test_upstream_error_exits(self, tmp_path, capsys):
        error = UpstreamError("Page response code = 500", status=500, service="sitemap")
        with patch("pagestate.cli._load", new=AsyncMock(side_effect=error)):
            with pytest.raises(SystemExit) as exc_info:
                main(["load", "/shoes", "--api-url", "https://a.test", "--theme-dir", str(tmp_path), "--problem-json"])
        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Page response code = 500" in err
        problem = json.loads(err.strip().splitlines()[-1])
        assert problem["status"] == 502
        assert problem["instance"] == "/shoes"


class TestClassify:
    def test_theme_dir_not_required(self, capsys):
        ref = {"type": "404", "resource": None, "path": "/x"}
        with patch("pagestate.cli._classify", new=AsyncMock(return_value=ref)):
            main(["classify", "/x", "--api-url", "https://a.test"])
        assert json.loads(capsys.readouterr().out) == ref
