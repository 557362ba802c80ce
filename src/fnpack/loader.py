# loader.py
from __future__ import annotations

import runpy
import sys
import zipfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, Iterator

from .errors import ContractError

RUN_NAME = "fnpack_function"
DEFAULT_EXPORT = "default"
REQUIRED_CAPABILITIES = ("get_config", "run_step")


@contextmanager
def _on_sys_path(artifact: Path) -> Iterator[None]:
    """
    Keep the artifact importable while its code runs, so imports done
    lazily inside get_config()/run_step() resolve against the bundle.
    """
    entry = str(artifact if zipfile.is_zipfile(artifact) else artifact.parent)
    sys.path.insert(0, entry)
    try:
        yield
    finally:
        try:
            sys.path.remove(entry)
        except ValueError:
            pass


@dataclass
class FunctionHandle:
    """A loaded function artifact that satisfies the get_config/run_step contract."""
    artifact: Path
    target: Any

    def get_config(self, origin: str, name: str) -> Any:
        with _on_sys_path(self.artifact):
            return self.target.get_config(origin, name)

    def run_step(self, step_id: str, data: Any) -> Any:
        with _on_sys_path(self.artifact):
            return self.target.run_step(step_id, data)


def _select_target(namespace: Dict[str, Any]) -> Any:
    """
    Prefer the `default` export; fall back to module-level
    get_config()/run_step() functions.
    """
    if DEFAULT_EXPORT in namespace:
        return namespace[DEFAULT_EXPORT]
    return SimpleNamespace(**{k: namespace[k] for k in REQUIRED_CAPABILITIES if k in namespace})


def load_function(artifact: str | Path) -> FunctionHandle:
    """
    Load a bundled function from a .pyz (or plain .py) file.

    The artifact runs under a fixed module name, so a
    `if __name__ == "__main__":` block in the entry file does not fire.

    Raises:
        ContractError: artifact cannot be executed, or its export lacks
            callable get_config / run_step
    """
    path = Path(artifact).expanduser().resolve()
    if not path.exists():
        raise ContractError(f"Function artifact not found: {path}")

    try:
        with _on_sys_path(path):
            namespace = runpy.run_path(str(path), run_name=RUN_NAME)
    except Exception as e:
        raise ContractError(
            f"Failed to load function artifact: {e}",
            artifact=str(path),
            error_type=type(e).__name__,
        ) from e

    target = _select_target(namespace)
    missing = [cap for cap in REQUIRED_CAPABILITIES if not callable(getattr(target, cap, None))]
    if missing:
        raise ContractError(
            "Function does not export " + ", ".join(f"{m}()" for m in missing),
            artifact=str(path),
            hint="Expose `default` with get_config(origin, name) and run_step(step_id, data)",
        )
    return FunctionHandle(artifact=path, target=target)
