# settings.py
from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

DEFAULT_DEPLOY_COMMAND = "npx inngest-cli"
DEFAULT_PYTHON_BIN = "python3"
DEFAULT_PYTHON_VERSION = "3.11.9"
DEFAULT_VERSION_TIMEOUT = 10.0


@dataclass(frozen=True)
class Settings:
    deploy_command: Tuple[str, ...] = tuple(shlex.split(DEFAULT_DEPLOY_COMMAND))
    python_bin: str = DEFAULT_PYTHON_BIN
    default_python_version: str = DEFAULT_PYTHON_VERSION
    version_timeout: Optional[float] = DEFAULT_VERSION_TIMEOUT
    deploy_timeout: Optional[float] = None
    debug: bool = False


def _truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _seconds(value: str | None, default: Optional[float]) -> Optional[float]:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Expected a number of seconds, got: {value!r}") from None


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from FNPACK_* environment variables."""
    env = os.environ if environ is None else environ

    deploy_command = tuple(shlex.split(env.get("FNPACK_DEPLOY_COMMAND", DEFAULT_DEPLOY_COMMAND)))
    if not deploy_command:
        raise ValueError("FNPACK_DEPLOY_COMMAND must not be empty")

    return Settings(
        deploy_command=deploy_command,
        python_bin=env.get("FNPACK_PYTHON_BIN", DEFAULT_PYTHON_BIN),
        default_python_version=env.get("FNPACK_DEFAULT_PYTHON_VERSION", DEFAULT_PYTHON_VERSION),
        version_timeout=_seconds(env.get("FNPACK_VERSION_TIMEOUT"), DEFAULT_VERSION_TIMEOUT),
        deploy_timeout=_seconds(env.get("FNPACK_DEPLOY_TIMEOUT"), None),
        debug=_truthy(env.get("FNPACK_DEBUG")),
    )
