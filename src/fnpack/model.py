# model.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class StepDescriptor(BaseModel):
    """One step of a function: where its code lives and how it runs."""
    model_config = ConfigDict(extra="allow")

    path: str
    runtime: Dict[str, Any]


class FunctionConfig(BaseModel):
    """
    Declarative config returned by a function's get_config().

    Only `steps` is interpreted; any other keys (id, name, triggers, ...)
    are kept as-is and written back out with the rewritten steps.
    """
    model_config = ConfigDict(extra="allow")

    steps: Dict[str, StepDescriptor]

    @property
    def step_ids(self) -> List[str]:
        return list(self.steps)


@dataclass(frozen=True)
class DockerRuntime:
    """
    Runtime descriptor pointing a step at a generated Dockerfile.

    This is the container runtime variant; the deploy CLI reads it as
    type "docker".
    """
    dockerfile: str
    type: str = "docker"

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.type, "dockerfile": self.dockerfile}


@dataclass
class CommandResult:
    """Outcome of one subprocess call. Never raised, always returned."""
    argv: List[str]
    exit_code: Optional[int]
    output: str = ""
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.exit_code == 0


@dataclass
class Artifacts:
    """Files produced by one packaging run."""
    bundle: Path
    dockerfile: Path
    config_file: Path
    launcher: Path

    def auxiliary(self) -> List[Path]:
        # the bundle stays on disk after a deploy
        return [self.dockerfile, self.config_file, self.launcher]
