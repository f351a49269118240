"""Directory walking with subtree pruning and an early halt."""
from __future__ import annotations

import logging
import os
import time
from enum import Enum, auto
from pathlib import Path
from typing import Callable

from .config import WalkRequest
from .dirs import assert_directory
from .errors import ErrorKind, FsError
from .files import read_file_metadata
from .logger import get_logger, log_event
from .models import FileRecord


class WalkAction(Enum):
    """What a visitor wants the walk to do after seeing an entry."""

    CONTINUE = auto()
    SKIP_SUBTREE = auto()
    HALT = auto()


Visitor = Callable[[Path, "os.DirEntry[str] | None"], WalkAction]


def _sort_key(entry: os.DirEntry[str]) -> str:
    # Keying directories with a trailing separator keeps the visit order equal
    # to the lexical order of full paths: "a.txt" comes before "a/b.txt".
    if entry.is_dir(follow_symlinks=False):
        return entry.name + os.sep
    return entry.name


class BoundedWalker:
    """Walks a directory tree in lexical path order and collects regular files."""

    def __init__(self, request: WalkRequest, logger: logging.Logger | None = None) -> None:
        self.request = request
        self.logger = logger or get_logger("walker")

    def walk(self, root: str | Path) -> list[FileRecord]:
        """Return the records of the regular files below *root*."""

        root_path = Path(os.path.normpath(root))
        records: list[FileRecord] = []
        started = time.perf_counter()

        def visit(path: Path, entry: os.DirEntry[str] | None) -> WalkAction:
            if entry is None:
                return WalkAction.CONTINUE
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
                is_file = not is_dir and entry.is_file(follow_symlinks=False)
            except OSError as exc:
                self._skip(path, exc)
                return WalkAction.CONTINUE
            if is_dir:
                if not self.request.include_subdirectories:
                    return WalkAction.SKIP_SUBTREE
                return WalkAction.CONTINUE
            if is_file:
                try:
                    records.append(read_file_metadata(path))
                except FsError as exc:
                    self._skip(path, exc)
            if self.request.limited and len(records) >= self.request.max_files:
                return WalkAction.HALT
            return WalkAction.CONTINUE

        self.traverse(root_path, visit)
        log_event(
            self.logger,
            level=logging.DEBUG,
            action="walk.done",
            message=f"Collected {len(records)} files under {root_path}",
            duration_ms=round((time.perf_counter() - started) * 1000, 3),
            extra={"path": str(root_path), "files": len(records)},
        )
        return records

    def traverse(self, root: Path, visit: Visitor) -> None:
        """Call *visit* for *root* and every entry below it, depth first.

        The root itself is visited with ``entry=None``. Returning
        ``SKIP_SUBTREE`` for a directory keeps its contents from being
        listed; returning ``HALT`` ends the traversal at once. Directories that
        cannot be listed, and entries whose type cannot be read, are skipped.
        """

        pending: list[tuple[Path, os.DirEntry[str] | None]] = [(root, None)]
        while pending:
            path, entry = pending.pop()
            action = visit(path, entry)
            if action is WalkAction.HALT:
                log_event(
                    self.logger,
                    level=logging.DEBUG,
                    action="walk.halt",
                    message=f"Walk of {root} halted at {path}",
                    extra={"path": str(path)},
                )
                return
            if action is WalkAction.SKIP_SUBTREE:
                continue
            if entry is not None and not self._is_dir(path, entry):
                continue

            try:
                with os.scandir(path) as it:
                    entries = list(it)
            except OSError as exc:
                self._skip(path, exc)
                continue

            keyed: list[tuple[str, os.DirEntry[str]]] = []
            for child in entries:
                try:
                    keyed.append((_sort_key(child), child))
                except OSError as exc:
                    self._skip(path / child.name, exc)
            keyed.sort(key=lambda item: item[0])
            for _, child in reversed(keyed):
                pending.append((path / child.name, child))

    def _is_dir(self, path: Path, entry: os.DirEntry[str]) -> bool:
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError as exc:
            self._skip(path, exc)
            return False

    def _skip(self, path: Path, exc: Exception) -> None:
        log_event(
            self.logger,
            level=logging.DEBUG,
            action="walk.skip_entry",
            message=f"Skipping {path}: {exc}",
            extra={"path": str(path)},
        )


def read_directory(dirname: str | Path, options: WalkRequest | None) -> list[FileRecord]:
    """Read the regular files below *dirname*, sorted by lexical path order.

    Subdirectories are only entered when ``options.include_subdirectories`` is
    set. With ``options.max_files`` greater than zero the walk stops once that
    many files are collected; the result is then the first ``max_files``
    records of the full listing. Unreadable entries are ignored.
    """

    if options is None:
        raise FsError(ErrorKind.INVALID_OPTIONS, "No read directory options given")

    assert_directory(dirname)
    return BoundedWalker(options).walk(dirname)


__all__ = ["BoundedWalker", "Visitor", "WalkAction", "read_directory"]
