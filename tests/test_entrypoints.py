import os
import signal
import subprocess
import sys
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from telegram.ext import ApplicationBuilder, InlineQueryHandler, MessageHandler

from streamfinder import cli
from streamfinder.__main__ import post_shutdown, register_handlers
from streamfinder.config import AppConfig
from streamfinder.services.tmdb_client import TMDBClient, TMDBStatusError
from streamfinder.workflows.cli_search import MEDIA_TYPE_PROMPT

ROOT = Path(__file__).resolve().parent.parent


def test_register_handlers_adds_inline_and_help_handlers():
    application = ApplicationBuilder().token("123456:TEST-TOKEN").build()

    register_handlers(application)

    handlers = application.handlers[0]
    assert any(isinstance(h, InlineQueryHandler) for h in handlers)
    assert any(isinstance(h, MessageHandler) for h in handlers)
    assert application.error_handlers


@pytest.mark.asyncio
async def test_post_shutdown_closes_tmdb_client(mocker):
    application = ApplicationBuilder().token("123456:TEST-TOKEN").build()
    client = TMDBClient("token")
    close_mock = mocker.patch.object(client, "aclose", AsyncMock())
    application.bot_data["TMDB_CLIENT"] = client

    await post_shutdown(application)

    close_mock.assert_awaited_once()


@pytest.mark.asyncio
async def test_run_cli_reports_tmdb_errors(mocker, capsys):
    mocker.patch(
        "streamfinder.cli.get_configuration",
        return_value=AppConfig(tmdb_token="token"),
    )
    mocker.patch(
        "streamfinder.cli.CliSearchFlow.run",
        AsyncMock(side_effect=TMDBStatusError(401, "https://api.themoviedb.org/3/search/movie")),
    )

    exit_code = await cli.run_cli()

    assert exit_code == 1
    assert "Status code: 401" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_run_cli_success(mocker):
    mocker.patch(
        "streamfinder.cli.get_configuration",
        return_value=AppConfig(tmdb_token="token"),
    )
    run_mock = mocker.patch("streamfinder.cli.CliSearchFlow.run", AsyncMock())

    assert await cli.run_cli() == 0
    run_mock.assert_awaited_once()


@pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX signals")
def test_ctrl_c_at_prompt_exits_with_130(tmp_path):
    env = dict(os.environ, TMDB_TOKEN="token", PYTHONPATH=str(ROOT))
    process = subprocess.Popen(
        [sys.executable, "-m", "streamfinder.cli"],
        cwd=tmp_path,
        env=env,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.DEVNULL,
    )
    try:
        # Block until the first prompt is shown; stdin stays open.
        prompt = process.stdout.read(len(MEDIA_TYPE_PROMPT))
        assert prompt.decode() == MEDIA_TYPE_PROMPT

        process.send_signal(signal.SIGINT)
        assert process.wait(timeout=10) == 130
    finally:
        if process.poll() is None:
            process.kill()
            process.wait()
        process.stdin.close()
        process.stdout.close()
