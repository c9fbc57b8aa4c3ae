"""Tests for main.py helper functions and commands."""
import os
from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest
import typer
from typer.testing import CliRunner

from briefing_bot.models.plan import RunKind, RunWindow
from briefing_bot.pipeline.models import RunResult

REQUIRED_ENV = {
    "TELEGRAM_BOT_TOKEN": "test_token",
    "TELEGRAM_CHAT_ID": "12345",
    "ANTHROPIC_API_KEY": "test_anthropic",
    "YOUTUBE_API_KEY": "test_youtube",
}


def test_validate_env_vars_success():
    """Test env var validation with all required vars present."""
    from main import validate_env_vars

    with patch.dict(os.environ, REQUIRED_ENV):
        # Should not raise
        validate_env_vars()


def test_validate_env_vars_missing_youtube_key():
    """Test env var validation fails when YOUTUBE_API_KEY missing."""
    from main import validate_env_vars

    env = {k: v for k, v in REQUIRED_ENV.items() if k != "YOUTUBE_API_KEY"}
    with patch.dict(os.environ, env, clear=True):
        with pytest.raises(SystemExit):
            validate_env_vars()


def test_load_and_validate_config_success(tmp_path, monkeypatch):
    """Test successful config loading and validation."""
    from main import load_and_validate_config

    data_dir = tmp_path / "recs"
    config_file = tmp_path / "settings.yaml"
    config_file.write_text(f'storage:\n  data_dir: "{data_dir}"\n')
    monkeypatch.chdir(tmp_path)

    with patch.dict(os.environ, REQUIRED_ENV):
        settings = load_and_validate_config(config_file)

    assert settings.telegram.bot_token == "test_token"
    assert data_dir.is_dir()


def test_load_and_validate_config_missing_file(tmp_path, monkeypatch):
    """Test config loading fails on a missing file."""
    from main import load_and_validate_config

    monkeypatch.chdir(tmp_path)
    with patch.dict(os.environ, REQUIRED_ENV):
        with pytest.raises(SystemExit):
            load_and_validate_config(tmp_path / "missing.yaml")


def test_print_run_result_failure_exits():
    """A failed run exits non-zero."""
    from main import print_run_result

    with pytest.raises(typer.Exit):
        print_run_result(None)


def test_print_run_result_success():
    """A successful run prints without raising."""
    from main import print_run_result

    seoul = ZoneInfo("Asia/Seoul")
    window = RunWindow(
        start=datetime(2026, 1, 27, 23, 0, tzinfo=seoul),
        end=datetime(2026, 1, 28, 5, 30, tzinfo=seoul),
    )
    print_run_result(RunResult(kind=RunKind.FULL, window=window, item_count=3, delivered=True))


def test_briefing_rejects_invalid_date():
    """The briefing command validates --date before loading config."""
    from main import app

    result = CliRunner().invoke(app, ["briefing", "--date", "28-01-2026"])

    assert result.exit_code == 2
