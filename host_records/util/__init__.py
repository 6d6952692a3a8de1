"""Utility module for host-records."""

from .fs import (
    path_exists,
    is_readable,
    is_writable,
    is_directory,
    get_parent_directory,
    list_directory,
    read_file,
    write_text_file,
    write_new_file,
)

__all__ = [
    "path_exists",
    "is_readable",
    "is_writable",
    "is_directory",
    "get_parent_directory",
    "list_directory",
    "read_file",
    "write_text_file",
    "write_new_file",
]
