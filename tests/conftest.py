"""Pytest configuration and shared fixtures."""
import sys
import textwrap
from pathlib import Path

import pytest

root = Path(__file__).resolve().parent.parent
if str(root / "src") not in sys.path:
    sys.path.insert(0, str(root / "src"))

from fnpack.model import CommandResult  # noqa: E402
from fnpack.ui.console import Console, set_console  # noqa: E402


SINGLE_STEP_FUNCTION = '''
class Function:
    def get_config(self, origin, name):
        return {
            "name": "hello",
            "origin": origin,
            "placeholder_name": name,
            "triggers": [{"event": "demo/hello"}],
            "steps": {"step": {"path": "file://./hello.py", "runtime": {"type": "http"}}},
        }

    def run_step(self, step_id, data):
        return {"step": step_id, "data": data}


default = Function()
'''

MULTI_STEP_FUNCTION = '''
class Function:
    def get_config(self, origin, name):
        return {
            "steps": {
                "first": {"path": "file://.", "runtime": {"type": "http"}},
                "second": {"path": "file://.", "runtime": {"type": "http"}},
            },
        }

    def run_step(self, step_id, data):
        return None


default = Function()
'''


def write_module(directory: Path, name: str, source: str) -> Path:
    path = directory / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(source), encoding="utf-8")
    return path


class FakeRunner:
    """CommandRunner double: records calls and replays canned results."""

    def __init__(self, results=None, on_run=None):
        # results: {program name: CommandResult or exit code}
        self.results = results or {}
        self.on_run = on_run
        self.calls = []

    def run(self, argv, *, cwd=None, timeout=None, on_output=None):
        argv = [str(a) for a in argv]
        self.calls.append({"argv": argv, "cwd": cwd, "timeout": timeout})
        if self.on_run is not None:
            self.on_run(argv)

        result = self.results.get(argv[0], 0)
        if isinstance(result, int):
            result = CommandResult(argv=argv, exit_code=result)
        if on_output is not None:
            for line in result.output.splitlines():
                on_output(line)
        return result


@pytest.fixture
def fake_runner():
    return FakeRunner


@pytest.fixture(autouse=True)
def _reset_console():
    set_console(Console())
    yield
    set_console(Console())


@pytest.fixture
def function_file(tmp_path):
    return write_module(tmp_path, "hello.py", SINGLE_STEP_FUNCTION)


@pytest.fixture
def make_module():
    return write_module


@pytest.fixture
def multi_step_source():
    return MULTI_STEP_FUNCTION
