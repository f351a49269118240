"""Configuration and option structures for fs_toolkit."""

from __future__ import annotations

from dataclasses import dataclass

from .errors import ErrorKind, FsError

# Permission bits given to files created by fs_toolkit, before the umask.
DEFAULT_FILE_MODE = 0o644

HASH_CHUNK_SIZE = 8192


@dataclass(frozen=True)
class WalkRequest:
    """Options that control a single directory walk."""

    include_subdirectories: bool = False
    # 0 means every file is collected.
    max_files: int = 0

    def __post_init__(self) -> None:
        if self.max_files < 0:
            raise FsError(
                ErrorKind.INVALID_OPTIONS,
                f"max_files must be zero or positive, got {self.max_files}",
            )

    @property
    def limited(self) -> bool:
        return self.max_files > 0


__all__ = ["DEFAULT_FILE_MODE", "HASH_CHUNK_SIZE", "WalkRequest"]
