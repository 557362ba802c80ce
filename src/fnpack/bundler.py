# bundler.py
from __future__ import annotations

import importlib.machinery
import importlib.metadata
import modulefinder
import os
import site
import sys
import sysconfig
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set

from .errors import BundleError

BUNDLE_NAME = "bundle.pyz"
REQUIREMENTS_NAME = "requirements.txt"

_EXTENSION_SUFFIXES = tuple(importlib.machinery.EXTENSION_SUFFIXES)
_SKIP_DIRS = {"__pycache__"}


@dataclass
class BundleContents:
    """What goes into bundle.pyz: archive name -> source file, plus pip requirements."""
    sources: Dict[str, Path] = field(default_factory=dict)
    requirements: List[str] = field(default_factory=list)


def _resolve_entry(filename: str | Path, cwd: Path) -> Path:
    entry = (cwd / filename).resolve()
    if not entry.exists():
        raise BundleError(f"Entry point not found: {entry}", entry=str(filename))
    if entry.is_dir():
        raise BundleError("Directory entry points are not supported", entry=str(filename))
    if entry.suffix != ".py":
        raise BundleError(f"Entry point must be a .py file, got: {entry.name}", entry=str(filename))
    return entry


def _is_within(path: Path, base: Path) -> bool:
    return path == base or base in path.parents


def _stdlib_dirs() -> List[Path]:
    paths = sysconfig.get_paths()
    return [Path(paths[k]).resolve() for k in ("stdlib", "platstdlib") if k in paths]


def _site_dirs() -> List[Path]:
    dirs: List[str] = []
    paths = sysconfig.get_paths()
    dirs += [paths[k] for k in ("purelib", "platlib") if k in paths]
    if hasattr(site, "getsitepackages"):
        dirs += site.getsitepackages()
    if site.ENABLE_USER_SITE:
        dirs.append(site.getusersitepackages())
    return [Path(d).resolve() for d in dirs]


def _library_roots(entry_root: Path) -> List[Path]:
    """
    Directories whose modules are vendored into the bundle, most specific
    first: site-packages, then other sys.path entries that are not part of
    the standard library (editable installs, PYTHONPATH).
    """
    stdlib = _stdlib_dirs()
    roots: List[Path] = []
    for d in _site_dirs():
        if d not in roots:
            roots.append(d)
    for entry in sys.path:
        p = Path(entry or os.getcwd()).resolve()
        if not p.is_dir() or p in roots or p == entry_root:
            continue
        if any(_is_within(p, s) for s in stdlib):
            continue
        roots.append(p)
    # nested roots (e.g. a project dir containing its venv) must match last
    return sorted(roots, key=lambda r: len(r.parts), reverse=True)


def _is_extension(path: Path) -> bool:
    return path.name.endswith(_EXTENSION_SUFFIXES)


def _has_extensions(package_dir: Path) -> bool:
    return any(_is_extension(p) for p in package_dir.rglob("*") if p.is_file())


def _package_files(package_dir: Path, base: Path) -> Dict[str, Path]:
    files: Dict[str, Path] = {}
    for p in package_dir.rglob("*"):
        if not p.is_file() or _SKIP_DIRS.intersection(p.relative_to(base).parts):
            continue
        if p.suffix == ".pyc":
            continue
        files[p.relative_to(base).as_posix()] = p
    return files


def _requirement(top_level: str) -> str:
    dists = importlib.metadata.packages_distributions().get(top_level)
    if not dists:
        raise BundleError(
            f"Module {top_level!r} contains compiled code and does not belong to an installed distribution",
            module=top_level,
        )
    dist = dists[0]
    return f"{dist}=={importlib.metadata.version(dist)}"


def collect_sources(entry: Path) -> BundleContents:
    """
    Work out everything `entry` needs at runtime.

    The entry itself is stored as __main__.py so the archive runs with
    `python bundle.pyz` and loads with runpy.run_path. Modules from the
    entry's directory tree are stored under their relative paths.
    Third-party packages found on the host are vendored whole when they
    are pure Python; packages with compiled extensions cannot be imported
    from a zip, so they become pinned requirements instead.
    """
    root = entry.parent
    library_roots = _library_roots(root)
    excludes = sorted(getattr(sys, "stdlib_module_names", ()))
    finder = modulefinder.ModuleFinder(path=[str(root), *sys.path], excludes=excludes)
    try:
        finder.run_script(str(entry))
    except SyntaxError as e:
        raise BundleError(f"Syntax error in {e.filename}:{e.lineno}: {e.msg}") from e
    except (ImportError, OSError) as e:
        raise BundleError(str(e)) from e

    contents = BundleContents(sources={"__main__.py": entry})
    seen_top_level: Set[str] = set()
    requirements: Set[str] = set()

    for name, module in finder.modules.items():
        if name == "__main__" or not module.__file__:
            continue
        path = Path(module.__file__).resolve()
        base = next((r for r in library_roots if _is_within(path, r)), None)

        # a venv inside the project still counts as third-party
        if _is_within(path, root) and (base is None or _is_within(root, base)):
            if path.suffix == ".py":
                contents.sources[path.relative_to(root).as_posix()] = path
            continue

        if base is None:
            # standard library / interpreter builtins
            continue

        top_level = path.relative_to(base).parts[0]
        if top_level in seen_top_level:
            continue
        seen_top_level.add(top_level)
        top_name = top_level.split(".")[0]

        top_path = base / top_level
        if top_path.is_dir():
            if _has_extensions(top_path):
                requirements.add(_requirement(top_name))
            else:
                contents.sources.update(_package_files(top_path, base))
        elif _is_extension(top_path):
            requirements.add(_requirement(top_name))
        else:
            contents.sources[top_level] = top_path

    contents.requirements = sorted(requirements)
    return contents


def read_requirements(bundle: str | Path) -> List[str]:
    """Pinned requirements recorded in a bundle (empty when it has none)."""
    with zipfile.ZipFile(bundle) as zf:
        if REQUIREMENTS_NAME not in zf.namelist():
            return []
        text = zf.read(REQUIREMENTS_NAME).decode("utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def build(filename: str | Path, cwd: str | Path | None = None) -> Path:
    """
    Bundle a function's entry-point file into <cwd>/bundle.pyz.

    Raises:
        BundleError: entry is missing, a directory, not Python, or does not compile
    """
    cwd_p = Path(cwd if cwd is not None else os.getcwd()).resolve()
    entry = _resolve_entry(filename, cwd_p)
    contents = collect_sources(entry)

    output = cwd_p / BUNDLE_NAME
    try:
        with zipfile.ZipFile(output, "w", zipfile.ZIP_DEFLATED) as zf:
            for arcname in sorted(contents.sources):
                zf.write(contents.sources[arcname], arcname)
            if contents.requirements:
                zf.writestr(REQUIREMENTS_NAME, "\n".join(contents.requirements) + "\n")
    except OSError as e:
        raise BundleError(f"Could not write {output}: {e}") from e
    return output
