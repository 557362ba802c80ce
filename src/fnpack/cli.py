# cli.py
from __future__ import annotations

import sys
from typing import List, Optional, Sequence, Tuple

import click

from .errors import BundleError, ContractError, DeployFailure
from .pipeline import package
from .settings import load_settings
from .ui.console import Console, get_console, set_console

FLAG_PREFIX = "--"


def split_args(args: Sequence[str]) -> Tuple[Optional[str], List[str]]:
    """
    Split raw CLI tokens into (entry, passthrough flags).

    Every token starting with `--` goes to the deploy command verbatim;
    the first other token is the entry-point file.
    """
    flags = [a for a in args if a.startswith(FLAG_PREFIX)]
    entry = next((a for a in args if not a.startswith(FLAG_PREFIX)), None)
    return entry, flags


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_extra_args": True,
        # --help belongs to the deploy command too
        "help_option_names": [],
    }
)
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(args):
    """fnpack: bundle a Python function into a Docker image and deploy it."""
    try:
        settings = load_settings()
    except ValueError as e:
        get_console().print_error("Invalid configuration", str(e))
        sys.exit(1)

    console = Console(debug=settings.debug)
    set_console(console)

    entry, flags = split_args(args)
    if entry is None:
        console.print_error(
            "No entry point given",
            "Pass the function's entry-point file.",
            suggestion="Usage:\n  fnpack my_function.py [--deploy-flag ...]",
        )
        sys.exit(1)

    try:
        package(entry, flags, settings=settings, console=console)
    except BundleError as e:
        console.print_bundle_failure(e.message)
        console.print_debug(str(e))
        sys.exit(1)
    except ContractError as e:
        details = {k: v for k, v in e.details.items() if k != "hint"}
        console.print_error(
            "Function contract not satisfied",
            e.message,
            details=[f"{k}: {v}" for k, v in details.items()],
            suggestion=e.details.get("hint"),
        )
        console.print_debug(str(e))
        sys.exit(1)
    except DeployFailure as e:
        console.print_deploy_failure(e.reason or e.exit_code)
        sys.exit(1)
    except KeyboardInterrupt:
        console.print_info("\nInterrupted by user")
        sys.exit(130)
    except Exception as e:
        console.print_exception(e)
        sys.exit(1)


if __name__ == "__main__":
    cli()
