"""Tests for invoking the external deploy command."""
import pytest

from fnpack.deploy import deploy, deploy_argv
from fnpack.errors import DeployFailure
from fnpack.model import CommandResult
from fnpack.settings import Settings


def test_deploy_argv_appends_subcommand_and_flags():
    settings = Settings(deploy_command=("npx", "inngest-cli"))
    assert deploy_argv(["--prod", "--verbose"], settings) == [
        "npx", "inngest-cli", "deploy", "--prod", "--verbose",
    ]


def test_deploy_forwards_output(tmp_path, fake_runner, capsys):
    runner = fake_runner({"npx": CommandResult(argv=[], exit_code=0, output="Deploying...\nDone")})

    result = deploy(["--prod"], cwd=tmp_path, runner=runner)

    assert result.ok
    assert runner.calls[0]["argv"][-2:] == ["deploy", "--prod"]
    assert runner.calls[0]["cwd"] == tmp_path
    assert capsys.readouterr().out.splitlines() == ["Deploying...", "Done"]


def test_deploy_non_zero_exit_raises(tmp_path, fake_runner):
    runner = fake_runner({"npx": 3})

    with pytest.raises(DeployFailure) as exc:
        deploy([], cwd=tmp_path, runner=runner)

    assert exc.value.exit_code == 3
    assert exc.value.reason is None


def test_deploy_spawn_error_raises(tmp_path, fake_runner):
    runner = fake_runner({"npx": CommandResult(argv=[], exit_code=None, error=FileNotFoundError("npx"))})

    with pytest.raises(DeployFailure) as exc:
        deploy([], cwd=tmp_path, runner=runner)

    assert exc.value.exit_code is None
    assert "FileNotFoundError" in exc.value.reason
