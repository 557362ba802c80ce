# config.py
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import BaseModel, ValidationError

from .errors import ContractError, UnsupportedStepFunctions
from .loader import FunctionHandle, load_function
from .model import DockerRuntime, FunctionConfig

CONFIG_FILENAME = "inngest.json"
DOCKERFILE_NAME = "Dockerfile.fnpack"
STEP_PATH = "file://."

# Real values are only known once deployed.
PLACEHOLDER_ORIGIN = "https://placeholder.com"
PLACEHOLDER_NAME = "placeholder"


def _as_mapping(raw: Any) -> Any:
    if isinstance(raw, BaseModel):
        return raw.model_dump()
    return raw


def extract_config(fn: FunctionHandle) -> FunctionConfig:
    """Ask a loaded function for its config and validate its shape."""
    raw = _as_mapping(fn.get_config(PLACEHOLDER_ORIGIN, PLACEHOLDER_NAME))
    if not isinstance(raw, Mapping):
        raise ContractError(
            f"get_config() must return a mapping, got {type(raw).__name__}",
            artifact=str(fn.artifact),
        )
    try:
        config = FunctionConfig.model_validate(dict(raw))
    except ValidationError as e:
        raise ContractError(
            "get_config() returned an invalid config",
            artifact=str(fn.artifact),
            errors=e.error_count(),
        ) from e

    if len(config.steps) > 1:
        raise UnsupportedStepFunctions(config.step_ids)
    return config


def read_config(artifact: str | Path) -> FunctionConfig:
    """Load the bundled function at `artifact` and return its config."""
    return extract_config(load_function(artifact))


def update_config(config: FunctionConfig, dockerfile_name: str = DOCKERFILE_NAME) -> FunctionConfig:
    """Point every step at the generated Dockerfile. Mutates and returns `config`."""
    runtime = DockerRuntime(dockerfile=f"./{dockerfile_name}")
    for step in config.steps.values():
        step.path = STEP_PATH
        step.runtime = runtime.to_dict()
    return config


def write_config_file(config: FunctionConfig, cwd: str | Path | None = None) -> Path:
    filename = Path(cwd if cwd is not None else os.getcwd()) / CONFIG_FILENAME
    filename.write_text(json.dumps(config.model_dump(mode="json"), indent=2), encoding="utf-8")
    return filename
