"""Collision-free destination naming.

A destination is reserved by creating it exclusively. When the requested name
is taken, a counter is inserted before the last dot of the file name and the
next candidate is tried::

    report.pdf -> report(1).pdf -> report(2).pdf -> ...
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO

from .config import DEFAULT_FILE_MODE
from .errors import ErrorKind, FsError, wrap_os_error
from .logger import get_logger, log_event

LOGGER = get_logger("probe")


def insert_counter(filename: str, value: int) -> str:
    """Insert ``(value)`` before the last dot of *filename*.

    Names without a dot get the counter appended. Values below 1 leave the
    name untouched.
    """

    if value < 1:
        return filename

    insert_pos = filename.rfind(".")
    if insert_pos == -1:
        insert_pos = len(filename)
    return f"{filename[:insert_pos]}({value}){filename[insert_pos:]}"


def _exclusive_opener(path: str, flags: int) -> int:
    return os.open(path, flags | getattr(os, "O_BINARY", 0), DEFAULT_FILE_MODE)


def create_exclusive(path: str | Path) -> BinaryIO:
    """Create *path* and return it opened for reading and writing.

    Fails with :class:`FsError` if *path* already exists. The existence check
    and the creation are a single ``O_EXCL`` open. The handle's ``name`` is
    the created path.
    """

    try:
        return open(os.fspath(path), "x+b", opener=_exclusive_opener)
    except OSError as exc:
        raise wrap_os_error(exc, path) from exc


def create_next_file(path: str | Path, max_tries: int) -> BinaryIO:
    """Exclusively create the first free name derived from *path*.

    Attempt 0 uses the name as given, attempts 1 to *max_tries* insert the
    counter. The returned handle's ``name`` is the path that was created.
    """

    base = Path(os.path.normpath(path))
    directory, name = base.parent, base.name

    last_error: OSError | None = None
    for attempt in range(max_tries + 1):
        candidate = directory / insert_counter(name, attempt)
        try:
            handle = create_exclusive(candidate)
        except FsError as exc:
            last_error = exc.cause
            continue
        if attempt:
            log_event(
                LOGGER,
                level=logging.DEBUG,
                action="probe.renamed",
                message=f"Reserved {candidate} after {attempt} collisions",
                extra={"path": str(candidate), "requested": str(base)},
            )
        return handle

    log_event(
        LOGGER,
        level=logging.WARNING,
        action="probe.exhausted",
        message=f"No free name for {base} within {max_tries} tries",
        extra={"path": str(base), "max_tries": max_tries},
    )
    raise FsError(
        ErrorKind.MAX_TRIES_EXCEEDED,
        f"Exceeded maximum number of tries ({max_tries})",
        path=base,
        cause=last_error,
    )


__all__ = ["create_exclusive", "create_next_file", "insert_counter"]
