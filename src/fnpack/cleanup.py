# cleanup.py
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable


def cleanup(filenames: Iterable[str | Path]) -> None:
    """Delete generated files concurrently. The first failure is re-raised."""
    paths = [Path(f) for f in filenames]
    if not paths:
        return
    with ThreadPoolExecutor(max_workers=len(paths)) as pool:
        futures = [pool.submit(p.unlink) for p in paths]
        # wait for all deletions before surfacing an error
        errors = [f.exception() for f in futures]
    for err in errors:
        if err is not None:
            raise err
