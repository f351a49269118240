"""Error types raised by fs_toolkit."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ErrorKind(str, Enum):
    """Every failure fs_toolkit reports falls into exactly one of these kinds."""

    NOT_A_DIRECTORY = "not_a_directory"
    NOT_A_REGULAR_FILE = "not_a_regular_file"
    EMPTY_DESTINATION_NAME = "empty_destination_name"
    SOURCE_DESTINATION_IDENTICAL = "source_destination_identical"
    MAX_TRIES_EXCEEDED = "max_tries_exceeded"
    INVALID_OPTIONS = "invalid_options"
    COPY_VERIFICATION_FAILED = "copy_verification_failed"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    IO = "io"


@dataclass(slots=True, eq=False)
class FsError(Exception):
    """Raised by every fs_toolkit operation.

    ``cause`` holds the underlying :class:`OSError` when the failure comes from
    the filesystem layer. It is also chained as ``__cause__`` when raised with
    ``raise ... from``.
    """

    kind: ErrorKind
    message: str
    path: Path | None = None
    cause: OSError | None = None

    def __str__(self) -> str:
        location = f" ({self.path})" if self.path is not None else ""
        reason = f": {self.cause.strerror or self.cause}" if self.cause is not None else ""
        return f"{self.message}{location}{reason}"


def wrap_os_error(exc: OSError, path: str | Path | None = None) -> FsError:
    """Translate an :class:`OSError` into an :class:`FsError`."""

    if isinstance(exc, FileNotFoundError):
        kind = ErrorKind.NOT_FOUND
        message = "No such file or directory"
    elif isinstance(exc, PermissionError):
        kind = ErrorKind.PERMISSION_DENIED
        message = "Permission denied"
    else:
        kind = ErrorKind.IO
        message = "Filesystem operation failed"
    if path is None and isinstance(exc.filename, str):
        path = exc.filename
    return FsError(kind, message, path=Path(path) if path is not None else None, cause=exc)


__all__ = ["ErrorKind", "FsError", "wrap_os_error"]
