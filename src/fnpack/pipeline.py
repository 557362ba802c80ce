# pipeline.py
# bundle -> read config -> Dockerfile -> rewrite config -> inngest.json
#        -> run.py -> deploy -> cleanup
# Any exception stops the pipeline where it is raised.

from __future__ import annotations

import os
from pathlib import Path
from typing import Sequence

from . import bundler
from .cleanup import cleanup
from .config import DOCKERFILE_NAME, read_config, update_config, write_config_file
from .deploy import deploy
from .dockerfile import create_dockerfile
from .launcher import DEFAULT_STEP_ID, write_run_script
from .model import Artifacts
from .process import CommandRunner, SubprocessRunner
from .settings import Settings
from .ui.console import Console, get_console


def package(
    entry: str | Path,
    flags: Sequence[str] = (),
    *,
    cwd: str | Path | None = None,
    runner: CommandRunner | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
) -> Artifacts:
    """
    Package the function at `entry` for a Docker runtime and deploy it.

    Generated files land in `cwd`. On success the Dockerfile, config file
    and launcher are deleted again; the bundle is kept. When the deploy
    command fails, DeployFailure propagates and nothing is deleted.
    """
    cwd_p = Path(cwd if cwd is not None else os.getcwd()).resolve()
    runner = runner or SubprocessRunner()
    settings = settings or Settings()
    console = console or get_console()

    console.print_package_started(str(entry), list(flags))

    bundle = bundler.build(entry, cwd=cwd_p)
    console.print_debug(f"Bundled {entry} -> {bundle}")

    config = read_config(bundle)
    step_id = config.step_ids[0] if config.step_ids else DEFAULT_STEP_ID

    dockerfile = create_dockerfile(bundle, cwd=cwd_p, runner=runner, settings=settings, console=console)
    update_config(config, DOCKERFILE_NAME)
    config_file = write_config_file(config, cwd=cwd_p)
    launcher = write_run_script(cwd_p, step_id=step_id, bundle_name=bundle.name)

    artifacts = Artifacts(
        bundle=bundle,
        dockerfile=dockerfile,
        config_file=config_file,
        launcher=launcher,
    )

    deploy(flags, cwd=cwd_p, runner=runner, settings=settings, console=console)

    cleanup(artifacts.auxiliary())
    return artifacts
