"""Regular file helpers: predicates, metadata and copy/move strategies."""
from __future__ import annotations

import hashlib
import logging
import os
import shutil
import stat
from pathlib import Path

from .config import HASH_CHUNK_SIZE
from .errors import ErrorKind, FsError, wrap_os_error
from .logger import get_logger, log_event
from .models import FileRecord
from .probe import create_next_file

LOGGER = get_logger("files")


def is_regular_file(filename: str | Path) -> bool:
    """Return ``True`` if *filename* is a regular file.

    Raises :class:`FsError` when *filename* cannot be stat'd.
    """

    try:
        info = os.stat(filename)
    except OSError as exc:
        raise wrap_os_error(exc, filename) from exc
    return stat.S_ISREG(info.st_mode)


def assert_regular_file(filename: str | Path) -> None:
    """Raise ``NOT_A_REGULAR_FILE`` unless *filename* is an existing regular file."""

    try:
        ok = is_regular_file(filename)
    except FsError as exc:
        raise FsError(
            ErrorKind.NOT_A_REGULAR_FILE, "Not a regular file", path=Path(filename), cause=exc.cause
        ) from exc
    if not ok:
        raise FsError(ErrorKind.NOT_A_REGULAR_FILE, "Not a regular file", path=Path(filename))


def read_file_metadata(filename: str | Path) -> FileRecord:
    """Return the :class:`FileRecord` of the regular file *filename*."""

    try:
        info = os.stat(filename)
    except OSError as exc:
        raise wrap_os_error(exc, filename) from exc
    if not stat.S_ISREG(info.st_mode):
        raise FsError(ErrorKind.NOT_A_REGULAR_FILE, "Not a regular file", path=Path(filename))
    return FileRecord.from_stat(filename, info)


def remove_file(filename: str | Path) -> None:
    try:
        os.remove(filename)
    except OSError as exc:
        raise wrap_os_error(exc, filename) from exc


def copy_file(source: str | Path, destination: str | Path, *, verify: bool = False) -> None:
    """Copy *source* to *destination*, overwriting an existing destination."""

    size = _assert_copyable(source, destination)
    _copy_content(Path(source), Path(destination), size, verify=verify)
    log_event(
        LOGGER,
        level=logging.INFO,
        action="copy.overwrite",
        message=f"Copied {source} -> {destination}",
        bytes_processed=size,
        extra={"source": str(source), "destination": str(destination)},
    )


def move_file(source: str | Path, destination: str | Path, *, verify: bool = False) -> None:
    """Move *source* to *destination*, overwriting an existing destination.

    The file is renamed when possible. Otherwise, for example across volumes,
    it is copied and the source is removed afterwards.
    """

    size = _assert_copyable(source, destination)
    _relocate(Path(source), Path(destination), size, verify=verify)


def copy_file_safe(
    source: str | Path,
    destination: str | Path,
    max_tries: int,
    *,
    verify: bool = False,
) -> Path:
    """Copy *source* to *destination* without overwriting anything.

    If *destination* exists, ``name(1).ext``, ``name(2).ext`` and so on are
    tried, up to *max_tries* counters. Returns the path actually written.
    """

    size = _assert_copyable(source, destination)
    target = _reserve(destination, max_tries)
    try:
        _copy_content(Path(source), target, size, verify=verify)
    except FsError:
        _discard(target)
        raise
    log_event(
        LOGGER,
        level=logging.INFO,
        action="copy.safe",
        message=f"Copied {source} -> {target}",
        bytes_processed=size,
        extra={"source": str(source), "destination": str(target)},
    )
    return target


def move_file_safe(
    source: str | Path,
    destination: str | Path,
    max_tries: int,
    *,
    verify: bool = False,
) -> Path:
    """Move *source* to *destination* without overwriting anything.

    Destination naming follows :func:`copy_file_safe`. Returns the new path.
    """

    size = _assert_copyable(source, destination)
    target = _reserve(destination, max_tries)
    try:
        _relocate(Path(source), target, size, verify=verify)
    except FsError:
        if Path(source).exists():
            _discard(target)
        raise
    return target


def _assert_copyable(source: str | Path, destination: str | Path) -> int:
    """Validate a copy or move and return the size of *source*."""

    try:
        src_info = os.stat(source)
    except OSError as exc:
        raise wrap_os_error(exc, source) from exc
    if not stat.S_ISREG(src_info.st_mode):
        raise FsError(ErrorKind.NOT_A_REGULAR_FILE, "Not a regular file", path=Path(source))

    # Path("") renders as ".", so look at the final component instead.
    if not Path(destination).name.strip():
        raise FsError(ErrorKind.EMPTY_DESTINATION_NAME, "Destination name cannot be empty")

    try:
        dest_info = os.stat(destination)
    except OSError:
        return src_info.st_size
    if not stat.S_ISREG(dest_info.st_mode):
        raise FsError(ErrorKind.NOT_A_REGULAR_FILE, "Not a regular file", path=Path(destination))
    if os.path.samestat(src_info, dest_info):
        raise FsError(
            ErrorKind.SOURCE_DESTINATION_IDENTICAL,
            "Cannot copy a file onto itself",
            path=Path(source),
        )
    return src_info.st_size


def _reserve(destination: str | Path, max_tries: int) -> Path:
    handle = create_next_file(destination, max_tries)
    target = Path(handle.name)
    try:
        handle.close()
    except OSError as exc:
        _discard(target)
        raise wrap_os_error(exc, target) from exc
    return target


def _discard(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        log_event(
            LOGGER,
            level=logging.WARNING,
            action="copy.cleanup_failed",
            message=f"Could not remove partial file {path}: {exc}",
            extra={"path": str(path)},
        )


def _relocate(source: Path, destination: Path, size: int, *, verify: bool) -> None:
    try:
        os.replace(source, destination)
    except OSError as exc:
        log_event(
            LOGGER,
            level=logging.INFO,
            action="move.rename_fallback",
            message=f"Rename failed ({exc}), copying {source} -> {destination}",
            extra={"source": str(source), "destination": str(destination)},
        )
    else:
        log_event(
            LOGGER,
            level=logging.INFO,
            action="move.rename",
            message=f"Moved {source} -> {destination}",
            bytes_processed=size,
            extra={"source": str(source), "destination": str(destination)},
        )
        return

    _copy_content(source, destination, size, verify=verify)
    remove_file(source)
    log_event(
        LOGGER,
        level=logging.INFO,
        action="move.copy_and_delete",
        message=f"Moved {source} -> {destination}",
        bytes_processed=size,
        extra={"source": str(source), "destination": str(destination)},
    )


def _copy_content(source: Path, destination: Path, size: int, *, verify: bool) -> None:
    """Copy the bytes of *source* into *destination*, truncating it first."""

    try:
        shutil.copyfile(source, destination)
    except OSError as exc:
        log_event(
            LOGGER,
            level=logging.ERROR,
            action="copy.error",
            message=f"Error copying {source} to {destination}: {exc}",
            bytes_processed=size,
            extra={"source": str(source), "destination": str(destination)},
        )
        raise wrap_os_error(exc) from exc

    if not verify:
        return

    try:
        matches = _calculate_sha256(source) == _calculate_sha256(destination)
    except OSError as exc:
        raise wrap_os_error(exc) from exc
    if not matches:
        _discard(destination)
        log_event(
            LOGGER,
            level=logging.ERROR,
            action="copy.failed_verification",
            message=f"Verification failed for {source}. Hashes do not match. Destination file removed.",
            bytes_processed=size,
            extra={"source": str(source), "destination": str(destination)},
        )
        raise FsError(
            ErrorKind.COPY_VERIFICATION_FAILED,
            "SHA-256 verification failed",
            path=source,
        )


def _calculate_sha256(file_path: Path) -> str:
    sha256 = hashlib.sha256()
    with file_path.open("rb") as f:
        while chunk := f.read(HASH_CHUNK_SIZE):
            sha256.update(chunk)
    return sha256.hexdigest()


__all__ = [
    "assert_regular_file",
    "copy_file",
    "copy_file_safe",
    "is_regular_file",
    "move_file",
    "move_file_safe",
    "read_file_metadata",
    "remove_file",
]
