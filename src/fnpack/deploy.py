# deploy.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from .errors import DeployFailure
from .model import CommandResult
from .process import CommandRunner, SubprocessRunner
from .settings import Settings
from .ui.console import Console, get_console


def deploy_argv(flags: Sequence[str], settings: Settings) -> list[str]:
    return [*settings.deploy_command, "deploy", *flags]


def deploy(
    flags: Sequence[str] = (),
    *,
    cwd: str | Path | None = None,
    runner: CommandRunner | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
) -> CommandResult:
    """
    Run the deploy command, forwarding its output line by line.

    Raises:
        DeployFailure: the command could not start, timed out or exited non-zero
    """
    settings = settings or Settings()
    runner = runner or SubprocessRunner()
    console = console or get_console()

    argv = deploy_argv(flags, settings)
    console.print_debug(f"Running: {' '.join(argv)}")
    result = runner.run(
        argv,
        cwd=cwd if cwd is not None else os.getcwd(),
        timeout=settings.deploy_timeout,
        on_output=console.print_output,
    )

    if result.error is not None:
        raise DeployFailure(result.exit_code, reason=f"{type(result.error).__name__}: {result.error}")
    if result.exit_code != 0:
        raise DeployFailure(result.exit_code)
    return result
