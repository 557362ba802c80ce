# dockerfile.py
from __future__ import annotations

import os
import re
import shlex
from pathlib import Path
from typing import Sequence

from .bundler import read_requirements
from .config import DOCKERFILE_NAME
from .launcher import RUN_SCRIPT_NAME
from .process import CommandRunner, SubprocessRunner
from .settings import Settings
from .ui.console import Console, get_console

_VERSION_PREFIX = re.compile(r"^(?:python\s+)?v?", re.IGNORECASE)

DOCKERFILE_TEMPLATE = """FROM python:{version}-slim
WORKDIR /opt/
{install}COPY {bundle_name} {run_script} /opt/
ENTRYPOINT ["python", "./{run_script}"]"""

INSTALL_TEMPLATE = "RUN pip install --no-cache-dir {requirements}\n"


def parse_version(output: str) -> str:
    """'Python 3.12.1' / 'v3.12.1' / '3.12.1' -> '3.12.1'"""
    lines = output.strip().splitlines()
    if not lines:
        return ""
    return _VERSION_PREFIX.sub("", lines[0].strip(), count=1).strip()


def python_version(runner: CommandRunner, settings: Settings, console: Console | None = None) -> str:
    """
    Version of the host Python, used to pick the base image.
    Any failure falls back to settings.default_python_version.
    """
    result = runner.run([settings.python_bin, "--version"], timeout=settings.version_timeout)
    if result.ok:
        version = parse_version(result.output)
        if version:
            return version
    (console or get_console()).print_debug(
        f"Could not detect Python version ({result.error or result.exit_code}), "
        f"using {settings.default_python_version}"
    )
    return settings.default_python_version


def render_dockerfile(version: str, bundle_name: str, requirements: Sequence[str] = ()) -> str:
    """
    Four lines for a pure-Python bundle; packages with compiled code
    that could not be bundled add a `RUN pip install` line.
    """
    install = ""
    if requirements:
        install = INSTALL_TEMPLATE.format(requirements=" ".join(shlex.quote(r) for r in requirements))
    return DOCKERFILE_TEMPLATE.format(
        version=version,
        install=install,
        bundle_name=bundle_name,
        run_script=RUN_SCRIPT_NAME,
    )


def create_dockerfile(
    bundle: str | Path,
    *,
    cwd: str | Path | None = None,
    runner: CommandRunner | None = None,
    settings: Settings | None = None,
    console: Console | None = None,
) -> Path:
    """Write Dockerfile.fnpack for `bundle` into `cwd` and return its path."""
    settings = settings or Settings()
    version = python_version(runner or SubprocessRunner(), settings, console)
    requirements = read_requirements(bundle) if Path(bundle).exists() else []
    contents = render_dockerfile(version, Path(bundle).name, requirements)
    dockerfile = Path(cwd if cwd is not None else os.getcwd()) / DOCKERFILE_NAME
    dockerfile.write_text(contents, encoding="utf-8")
    return dockerfile
