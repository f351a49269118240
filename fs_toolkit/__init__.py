"""fs_toolkit package exports."""

from .config import WalkRequest
from .dirs import assert_directory, is_directory, is_subdirectory_of, same_directory
from .errors import ErrorKind, FsError
from .files import (
    assert_regular_file,
    copy_file,
    copy_file_safe,
    is_regular_file,
    move_file,
    move_file_safe,
    read_file_metadata,
    remove_file,
)
from .logger import configure_logging, log_event
from .models import FileRecord
from .probe import create_exclusive, create_next_file, insert_counter
from .walker import BoundedWalker, WalkAction, read_directory

__all__ = [
    "BoundedWalker",
    "ErrorKind",
    "FileRecord",
    "FsError",
    "WalkAction",
    "WalkRequest",
    "assert_directory",
    "assert_regular_file",
    "configure_logging",
    "copy_file",
    "copy_file_safe",
    "create_exclusive",
    "create_next_file",
    "insert_counter",
    "is_directory",
    "is_regular_file",
    "is_subdirectory_of",
    "log_event",
    "move_file",
    "move_file_safe",
    "read_directory",
    "read_file_metadata",
    "remove_file",
    "same_directory",
]
