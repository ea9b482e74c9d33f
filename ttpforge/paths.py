"""Path resolution helpers and environment formatting."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping

logger = logging.getLogger(__name__)


def _go_join(*parts: str) -> str:
    """Join non-empty elements with the separator and normalise the result."""
    nonempty = [p for p in parts if p]
    if not nonempty:
        return ""
    return os.path.normpath(os.sep.join(nonempty))


def _relative_to(base: str, target: str) -> str | None:
    """Return ``target`` relative to ``base``, or None when not computable."""
    if os.path.isabs(base) != os.path.isabs(target):
        return None
    try:
        return os.path.relpath(target, base or os.curdir)
    except ValueError:
        return None


def _home_dir() -> str:
    home = os.path.expanduser("~")
    if not home or home == "~":
        raise OSError("could not determine the user's home directory")
    return home


def fetch_abs(path: str, workdir: str) -> str:
    """Return the absolute form of ``path`` resolved against ``workdir``.

    ``~/`` expands to the home directory; absolute paths are kept; other
    paths are resolved relative to ``workdir``.
    """
    if path == "":
        raise ValueError("empty path provided")

    if path.startswith("~/"):
        base = _home_dir()
        path = path[2:]
    elif os.path.isabs(path):
        base = ""
    else:
        base = workdir
        rel = _relative_to(workdir, path)
        if rel is not None:
            path = rel

    full = os.path.abspath(_go_join(base, path) or os.curdir)
    logger.debug("Full path: %s", full)
    return full


def find_file_path(path: str, workdir: str, fs_root: str | None = None) -> str:
    """Locate an existing file and return its path.

    With ``fs_root`` the file is looked up beneath that directory and the
    path joined from ``workdir`` and ``path`` is returned. Otherwise the
    path is made absolute and checked on the real filesystem.
    Raises :class:`FileNotFoundError` if nothing is found.
    """
    logger.debug("Attempting to find file path %s in %s", path, workdir)

    if fs_root is not None:
        fs_path = _go_join(workdir, path)
        os.stat(_go_join(fs_root, fs_path))
        return fs_path

    windows = sys.platform == "win32"
    if path.startswith("~/") or (windows and path.startswith("%USERPROFILE%")):
        if windows:
            path = path.replace("%USERPROFILE%", "~", 1)
    elif windows:
        path = path.lower()

    abs_path = fetch_abs(path, workdir)
    try:
        os.stat(abs_path)
    except FileNotFoundError:
        pass
    except OSError:
        return abs_path
    else:
        logger.debug("File found in absolute path %s", abs_path)
        return abs_path

    raise FileNotFoundError(f"invalid path {path} provided")


def fetch_env(environ: Mapping[str, str]) -> list[str]:
    """Format an environment mapping as ``KEY=VALUE`` strings."""
    return [f"{key}={value}" for key, value in environ.items()]