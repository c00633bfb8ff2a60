"""File system path helpers: the running executable's location and path joining."""

from __future__ import annotations

import os
import sys
import threading

SEPARATOR = os.sep
"""The file system separator used by :func:`combine` and :func:`is_absolute_path`."""

_WINDOWS = os.name == "nt"

_lock = threading.Lock()
_deploy_path = ""
_executable_path = ""


def _locate_executable() -> str:
    if not _WINDOWS:
        try:
            return os.readlink("/proc/self/exe")
        except OSError:
            pass
    if sys.executable:
        return os.path.realpath(sys.executable)
    return ""


def _init_paths() -> None:
    global _deploy_path, _executable_path
    try:
        executable = _locate_executable()
    except (OSError, ValueError):
        executable = ""
    head, sep, _ = executable.rpartition(SEPARATOR)
    _executable_path = executable
    _deploy_path = head + sep if sep else ""


def app_executable_path() -> str:
    """Return the full path of the running executable, or "" if unknown."""
    with _lock:
        if not _executable_path:
            _init_paths()
        return _executable_path


def app_deploy_path() -> str:
    """Return the directory of the running executable, ending in a separator."""
    with _lock:
        if not _deploy_path:
            _init_paths()
        return _deploy_path


def is_absolute_path(path: str) -> bool:
    """Tell whether ``path`` is absolute on this platform.

    On Windows that means a drive letter, a colon and a backslash; elsewhere
    a leading slash.
    """
    if _WINDOWS:
        return len(path) >= 3 and path[1] == ":" and path[2] == SEPARATOR
    return path.startswith(SEPARATOR)


def combine(base: str, *args: str) -> str:
    """Join ``base`` and each of ``args``, adding a separator only where missing."""
    result = base
    for part in args:
        if not result.endswith(SEPARATOR):
            result += SEPARATOR
        result += part
    return result