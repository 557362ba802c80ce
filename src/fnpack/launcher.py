# launcher.py
# run.py is the container entrypoint: `python ./run.py '<json>'` prints one
# JSON envelope line ({"status": ..., "body": ...}) to stdout.

from __future__ import annotations

import json
import os
from pathlib import Path
from string import Template

from .bundler import BUNDLE_NAME

RUN_SCRIPT_NAME = "run.py"
DEFAULT_STEP_ID = "step"

RUN_SCRIPT_TEMPLATE = Template('''import asyncio
import inspect
import json
import os
import runpy
import sys
import traceback

STEP_ID = $step_id
BUNDLE = os.path.join(os.path.dirname(os.path.abspath(__file__)), $bundle_name)


def emit(payload):
    print(json.dumps(payload, default=str))


def main():
    try:
        data = json.loads(sys.argv[-1])
    except ValueError:
        emit({"status": 500, "body": "Failed to parse args"})
        sys.exit(1)

    try:
        # stays on sys.path so imports inside run_step resolve from the bundle
        sys.path.insert(0, BUNDLE)
        namespace = runpy.run_path(BUNDLE, run_name="fnpack_function")
        fn = namespace.get("default")
        run_step = getattr(fn, "run_step", None) or namespace["run_step"]
        result = run_step(STEP_ID, data)
        if inspect.isawaitable(result):
            result = asyncio.run(result)
        if isinstance(result, dict) and "status" in result:
            emit(result)
        else:
            emit({"status": 200, "body": result})
    except Exception as e:
        error = traceback.format_exc() or str(e)
        emit({"status": 500, "body": error, "error": error})
        sys.exit(1)


if __name__ == "__main__":
    main()
''')


def render_run_script(step_id: str = DEFAULT_STEP_ID, bundle_name: str = BUNDLE_NAME) -> str:
    # json.dumps gives a valid Python string literal for any str
    return RUN_SCRIPT_TEMPLATE.substitute(
        step_id=json.dumps(step_id),
        bundle_name=json.dumps(bundle_name),
    )


def write_run_script(
    cwd: str | Path | None = None,
    step_id: str = DEFAULT_STEP_ID,
    bundle_name: str = BUNDLE_NAME,
) -> Path:
    filename = Path(cwd if cwd is not None else os.getcwd()) / RUN_SCRIPT_NAME
    filename.write_text(render_run_script(step_id, bundle_name), encoding="utf-8")
    return filename
