"""Console output formatting utilities for fnpack."""

from __future__ import annotations

import sys
from typing import Optional


class Console:
    """Centralized console output formatting."""

    def __init__(self, debug: bool = False):
        """
        Initialize console formatter.

        Args:
            debug: If True, show detailed output including stack traces
        """
        self.debug = debug

    def print_package_started(self, entry: str, flags: list[str]) -> None:
        """Print packaging start information (debug only)."""
        self.print_debug(f"Entry point: {entry}")
        if flags:
            self.print_debug(f"Deploy flags: {' '.join(flags)}")

    def print_output(self, line: str) -> None:
        """Forward one line of child process output."""
        print(line, flush=True)

    def print_bundle_failure(self, reason: str) -> None:
        """Print bundling failure message."""
        print("Failed to bundle function")
        if reason:
            print(reason)

    def print_deploy_failure(self, reason: object) -> None:
        """
        Print deploy failure message.

        Args:
            reason: Exit code of the deploy command, or the spawn error
        """
        print("Deployment failed!")
        print(reason)

    def print_error(
        self,
        title: str,
        message: str,
        details: Optional[list[str]] = None,
        suggestion: Optional[str] = None,
    ) -> None:
        """
        Print structured error message.

        Args:
            title: Error title
            message: Main error message
            details: Optional list of detail lines
            suggestion: Optional suggestion for user
        """
        print(f"\nERROR: {title}", file=sys.stderr)
        print(f"{message}", file=sys.stderr)
        if details:
            for detail in details:
                print(f"  {detail}", file=sys.stderr)
        if suggestion:
            print(f"\n{suggestion}", file=sys.stderr)

    def print_exception(self, exc: BaseException) -> None:
        """Print exception, with full traceback only in debug mode."""
        if self.debug:
            import traceback
            traceback.print_exception(type(exc), exc, exc.__traceback__)
        else:
            print(f"Error: {exc}", file=sys.stderr)

    def print_info(self, message: str) -> None:
        """Print informational message."""
        print(message)

    def print_debug(self, message: str) -> None:
        """Print debug message (only if debug mode enabled)."""
        if self.debug:
            print(f"[DEBUG] {message}", file=sys.stderr)


# Global console instance (will be initialized by CLI)
_console: Optional[Console] = None


def get_console() -> Console:
    """Get the global console instance."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global console instance."""
    global _console
    _console = console
