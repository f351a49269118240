"""Core dataclasses shared across fs_toolkit modules."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Metadata of one regular file, as read by :func:`fs_toolkit.files.read_file_metadata`."""

    name: str
    extension: str
    directory: Path
    full_path: Path
    size_bytes: int

    @classmethod
    def from_stat(cls, path: str | Path, stat_result: os.stat_result) -> "FileRecord":
        """Build a record for *path* using an already fetched ``stat`` result."""

        full_path = Path(os.path.normpath(path))
        return cls(
            name=full_path.name,
            extension=full_path.suffix,
            directory=full_path.parent,
            full_path=full_path,
            size_bytes=stat_result.st_size,
        )


__all__ = ["FileRecord"]
