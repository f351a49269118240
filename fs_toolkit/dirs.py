"""Directory predicates and relationship checks."""
from __future__ import annotations

import os
import stat
from pathlib import Path

from .errors import ErrorKind, FsError, wrap_os_error


def _stat_dir(dirname: str | Path) -> os.stat_result:
    try:
        info = os.stat(dirname)
    except OSError as exc:
        raise wrap_os_error(exc, dirname) from exc
    if not stat.S_ISDIR(info.st_mode):
        raise FsError(ErrorKind.NOT_A_DIRECTORY, "Not a directory", path=Path(dirname))
    return info


def is_directory(dirname: str | Path) -> bool:
    """Return ``True`` if *dirname* is a directory.

    Raises :class:`FsError` when *dirname* cannot be stat'd.
    """

    try:
        info = os.stat(dirname)
    except OSError as exc:
        raise wrap_os_error(exc, dirname) from exc
    return stat.S_ISDIR(info.st_mode)


def assert_directory(dirname: str | Path) -> None:
    """Raise ``NOT_A_DIRECTORY`` unless *dirname* is an existing directory."""

    try:
        ok = is_directory(dirname)
    except FsError as exc:
        raise FsError(
            ErrorKind.NOT_A_DIRECTORY, "Not a directory", path=Path(dirname), cause=exc.cause
        ) from exc
    if not ok:
        raise FsError(ErrorKind.NOT_A_DIRECTORY, "Not a directory", path=Path(dirname))


def same_directory(dirname1: str | Path, dirname2: str | Path) -> bool:
    """Return ``True`` if both paths refer to the same directory on disk."""

    info1 = _stat_dir(dirname1)
    info2 = _stat_dir(dirname2)
    return os.path.samestat(info1, info2)


def is_subdirectory_of(dirname: str | Path, ancestor: str | Path) -> bool:
    """Return ``True`` if *ancestor* appears in the parent chain of *dirname*.

    Parents are found lexically from the absolute form of *dirname* and compared
    by file identity, so ``a/b`` is a subdirectory of a symlink pointing at ``a``.
    A directory is never a subdirectory of itself. Parents that cannot be
    stat'd are skipped.
    """

    dir_info = _stat_dir(dirname)
    ancestor_info = _stat_dir(ancestor)
    if os.path.samestat(dir_info, ancestor_info):
        return False

    for parent in Path(os.path.abspath(dirname)).parents:
        try:
            parent_info = os.stat(parent)
        except OSError:
            continue
        if os.path.samestat(parent_info, ancestor_info):
            return True
    return False


__all__ = ["assert_directory", "is_directory", "is_subdirectory_of", "same_directory"]
