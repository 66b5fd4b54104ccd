"""
Path normalization and destination directory creation.

Invariants:
    - mkdir_all never removes a directory it did not create
    - The undo callable removes at most one directory tree: the topmost
      component of the chain that was missing before the call
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
import stat
from typing import Callable

from .errors import DestinationError, PathResolutionError

logger = logging.getLogger(__name__)

_SEPARATORS = "/" + os.sep + (os.altsep or "")


def strip_trailing_slashes(path: str) -> str:
    """Remove trailing separators, keeping a bare root intact."""
    stripped = path.rstrip(_SEPARATORS)
    if not stripped and path:
        return path[0]
    return stripped


def make_absolute(input_path: str, output_path: str) -> tuple[str, str]:
    """Resolve both paths against the current working directory.

    Raises:
        PathResolutionError: If a path cannot be made absolute (for example
            when the working directory has been removed).
    """
    resolved = []
    for path in (input_path, output_path):
        try:
            resolved.append(os.path.abspath(os.fspath(path)))
        except (OSError, TypeError, ValueError) as e:
            raise PathResolutionError(f"Cannot resolve path {path!r}: {e}", path=str(path)) from e
    return resolved[0], resolved[1]


def mkdir_all(dir_path: str, mode: int = 0o755) -> Callable[[], None]:
    """Create dir_path and any missing parents.

    Walks up from dir_path to the first component that exists. That
    component must be a directory (symlinks to directories count).

    Args:
        dir_path: Absolute directory path to create
        mode: Permission bits for created directories

    Returns:
        A callable that removes the topmost directory this call created, or
        a no-op if nothing had to be created.

    Raises:
        DestinationError: If a component exists but is not a directory, or
            the directories cannot be created.
    """
    undo_dir = None
    current = dir_path
    while True:
        try:
            st = os.stat(current)
        except FileNotFoundError:
            undo_dir = current
        except OSError as e:
            raise DestinationError(
                f"Cannot stat {current}: {e.strerror}", path=current, errno=e.errno
            ) from e
        else:
            if stat.S_ISDIR(st.st_mode):
                break
            raise DestinationError(
                f"{current} exists but is not a directory",
                path=current,
                errno=errno.ENOTDIR,
            )

        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent

    if undo_dir is None:
        return lambda: None

    try:
        os.makedirs(dir_path, mode=mode, exist_ok=True)
    except OSError as e:
        # makedirs may have created part of the chain before failing
        shutil.rmtree(undo_dir, ignore_errors=True)
        raise DestinationError(
            f"Cannot create directory {dir_path}: {e.strerror}",
            path=e.filename or dir_path,
            errno=e.errno,
        ) from e

    logger.debug("Created destination directory", extra={"path": dir_path, "undo": undo_dir})

    def undo() -> None:
        shutil.rmtree(undo_dir)

    return undo
