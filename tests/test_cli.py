import json
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from handlerchain import __version__
from handlerchain.cli.commands import app
from handlerchain.core.models import MiddlewareArgs

runner = CliRunner()


async def tag_alpha(args: MiddlewareArgs) -> None:
    args.context["alpha"] = args.get("name", "anon")
    await args.next()


def tag_beta(args: MiddlewareArgs) -> None:
    args.context["beta"] = "yes"
    args.next()


async def stop_here(args: MiddlewareArgs) -> None:
    args.context["stopped"] = True


async def advance_twice(args: MiddlewareArgs) -> None:
    await args.next()
    await args.next()


async def explode(args: MiddlewareArgs) -> None:
    raise RuntimeError("kaboom")


def _ref(name: str) -> str:
    return f"{__name__}:{name}"


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    monkeypatch.setenv("HANDLERCHAIN_HOME", str(tmp_path))
    yield tmp_path
    # the run command swaps loguru sinks onto the runner's captured stderr
    logger.remove()
    logger.add(sys.stderr)


def test_version() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_run_chain_prints_context() -> None:
    result = runner.invoke(
        app,
        ["run", _ref("tag_alpha"), _ref("tag_beta"), "--arg", "name=ada", "--context", "team=T1"],
    )

    assert result.exit_code == 0, result.stdout
    assert "Ran 2 handler(s)" in result.stdout
    assert "✓" in result.stdout
    assert "'ada'" in result.stdout
    assert "team" in result.stdout


def test_run_short_circuit_reports_halt() -> None:
    result = runner.invoke(app, ["run", _ref("stop_here"), _ref("tag_alpha")])

    assert result.exit_code == 0
    assert "halted" in result.stdout
    assert "alpha" not in result.stdout


def test_run_duplicate_next_exits_2() -> None:
    result = runner.invoke(app, ["run", _ref("advance_twice")])

    assert result.exit_code == 2
    assert "slack_bolt_middleware_next_error" in result.stdout


def test_run_handler_failure_exits_1() -> None:
    result = runner.invoke(app, ["run", _ref("explode")])

    assert result.exit_code == 1
    assert "kaboom" in result.stdout


def test_run_bad_handler_path_exits_1() -> None:
    result = runner.invoke(app, ["run", "not_a_path"])

    assert result.exit_code == 1
    assert "module:attribute" in result.stdout


def test_run_with_telemetry_prints_metrics(tmp_path: Path) -> None:
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"telemetry": {"enabled": True}}), encoding="utf-8")

    result = runner.invoke(app, ["run", _ref("tag_alpha"), "--config", str(config)])

    assert result.exit_code == 0
    assert "chain_handlers_invoked_total" in result.stdout


def test_config_command_prints_settings(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text(json.dumps({"drainUnawaited": False}), encoding="utf-8")

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 0
    assert '"drainUnawaited": false' in result.stdout


def test_config_command_rejects_invalid_file(tmp_path: Path) -> None:
    (tmp_path / "config.json").write_text("{", encoding="utf-8")

    result = runner.invoke(app, ["config"])

    assert result.exit_code == 1
