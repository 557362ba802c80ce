# process.py
# Every subprocess fnpack starts (version query, deploy) goes through a
# CommandRunner so tests can swap in a fake one.

from __future__ import annotations

import subprocess
import threading
from pathlib import Path
from typing import Callable, List, Optional, Protocol, Sequence

from .model import CommandResult

OutputHandler = Callable[[str], None]


class CommandRunner(Protocol):
    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: str | Path | None = None,
        timeout: float | None = None,
        on_output: OutputHandler | None = None,
    ) -> CommandResult:
        ...


class SubprocessRunner:
    """
    Run a command to completion and report how it went.

    stderr is merged into stdout. When `on_output` is given, every line is
    handed to it as soon as it is read. Spawn errors and timeouts are
    returned in CommandResult.error instead of raised.
    """

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: str | Path | None = None,
        timeout: float | None = None,
        on_output: OutputHandler | None = None,
    ) -> CommandResult:
        args = [str(a) for a in argv]
        try:
            proc = subprocess.Popen(
                args,
                cwd=str(cwd) if cwd is not None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            # FileNotFoundError, PermissionError, ...
            return CommandResult(argv=args, exit_code=None, error=e)

        timed_out = threading.Event()
        timer: Optional[threading.Timer] = None
        if timeout is not None:
            def _kill() -> None:
                timed_out.set()
                proc.kill()

            timer = threading.Timer(timeout, _kill)
            timer.daemon = True
            timer.start()

        lines: List[str] = []
        try:
            assert proc.stdout is not None
            for line in proc.stdout:
                line = line.rstrip("\n")
                lines.append(line)
                if on_output is not None:
                    on_output(line)
            exit_code = proc.wait()
        finally:
            if timer is not None:
                timer.cancel()
            if proc.stdout is not None:
                proc.stdout.close()

        output = "\n".join(lines)
        if timed_out.is_set():
            return CommandResult(
                argv=args,
                exit_code=exit_code,
                output=output,
                error=subprocess.TimeoutExpired(args, timeout, output=output),
            )
        return CommandResult(argv=args, exit_code=exit_code, output=output)
