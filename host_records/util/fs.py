"""Filesystem access primitives that report failures as Result values."""

import os

from host_records.models import ErrorKind, Result


def _os_failure(exc: BaseException, prefix: str) -> Result:
    """Convert an exception raised by an OS call into a failed Result."""
    return Result.failure(ErrorKind.from_os_error(exc), f"{prefix}: {exc}")


def path_exists(path: str) -> Result:
    """
    Check whether a path is present on disk.

    Args:
        path: Filesystem path to check

    Returns:
        Successful Result if the path exists. Failure kinds:
        INVALID_ARGUMENT for an empty path, NOT_FOUND when absent, and the
        mapped kind for any other stat error (e.g. PERMISSION_DENIED on a
        parent directory that cannot be searched).
    """
    if not path:
        return Result.failure(ErrorKind.INVALID_ARGUMENT, "Path must not be empty")

    try:
        os.stat(path)
    except (FileNotFoundError, NotADirectoryError):
        return Result.failure(ErrorKind.NOT_FOUND, f"Path does not exist: {path}")
    except (OSError, ValueError) as e:
        return _os_failure(e, f"Could not stat {path}")

    return Result.success()


def is_readable(path: str) -> Result:
    """Check that the path exists and the current process may read it."""
    exists = path_exists(path)
    if not exists:
        return exists

    if os.access(path, os.R_OK):
        return Result.success()
    return Result.failure(ErrorKind.PERMISSION_DENIED, "Path is not readable.")


def is_writable(path: str) -> Result:
    """Check that the path exists and the current process may write it."""
    exists = path_exists(path)
    if not exists:
        return exists

    if os.access(path, os.W_OK):
        return Result.success()
    return Result.failure(ErrorKind.PERMISSION_DENIED, "Path is not writable.")


def is_directory(path: str) -> Result:
    """Succeed only if the path resolves to a directory."""
    exists = path_exists(path)
    if not exists:
        return exists

    if os.path.isdir(path):
        return Result.success()
    return Result.failure(ErrorKind.NOT_A_DIRECTORY, "Path is not a directory")


def get_parent_directory(path: str) -> Result:
    """
    Get the directory that contains a non-directory path.

    Args:
        path: Path to a file (it does not need to exist)

    Returns:
        Successful Result with the parent path as value, or an
        IS_A_DIRECTORY failure (with no value) if ``path`` is itself a
        directory.
    """
    if not path:
        return Result.failure(ErrorKind.INVALID_ARGUMENT, "Path must not be empty")

    if is_directory(path):
        return Result.failure(ErrorKind.IS_A_DIRECTORY, f"Path is a directory: {path}")
    return Result.success(os.path.dirname(path))


def list_directory(path: str) -> Result:
    """
    List the immediate children of a directory.

    Args:
        path: Directory to list

    Returns:
        Successful Result whose value is a tuple of full child paths in
        the order the OS returns them (no ordering is guaranteed).
    """
    exists = path_exists(path)
    if not exists:
        if exists.error == ErrorKind.NOT_FOUND:
            return Result.failure(ErrorKind.NOT_FOUND, f"Directory not found: {path}")
        return exists

    if not os.path.isdir(path):
        return Result.failure(
            ErrorKind.NOT_A_DIRECTORY,
            f"Supplied path is not a directory: {path}"
        )

    try:
        with os.scandir(path) as entries:
            children = tuple(entry.path for entry in entries)
    except OSError as e:
        return _os_failure(e, f"Could not list {path}")

    return Result.success(children)


def read_file(path: str) -> Result:
    """
    Read a whole file into memory.

    Args:
        path: File to read

    Returns:
        Successful Result with the file content as bytes. Fails if the path
        does not exist, cannot be opened, or yields fewer bytes than its
        reported size.
    """
    exists = path_exists(path)
    if not exists:
        return exists

    try:
        with open(path, "rb") as f:
            expected = os.fstat(f.fileno()).st_size
            content = f.read()
    except OSError as e:
        return _os_failure(e, "Could not open file for reading")

    if len(content) < expected:
        return Result.failure(
            ErrorKind.IO_ERROR,
            f"Could not read file: got {len(content)} of {expected} bytes"
        )

    return Result.success(content)


def write_text_file(
    path: str,
    content: str | bytes,
    permissions: int = 0o600,
    force_permissions: bool = True
) -> Result:
    """
    Append content to a file, creating it if needed.

    The file is opened in append mode, so existing content is kept. The
    permission bits are applied again after opening because a file that
    already existed may carry looser bits than requested. This happens
    whatever ``force_permissions`` says; the flag only records that the
    caller expects it.

    The write is not atomic: a failure after a partial write leaves the
    partial content on disk.

    Args:
        path: File to write
        content: Text (encoded as UTF-8) or raw bytes
        permissions: POSIX mode bits for the file (e.g. 0o644)
        force_permissions: Intent flag, bits are always reapplied

    Returns:
        Successful Result, or a failure if the file cannot be created, its
        permissions cannot be changed, or fewer bytes were written than
        requested.
    """
    data = content.encode("utf-8") if isinstance(content, str) else content

    try:
        fd = os.open(path, os.O_CREAT | os.O_APPEND | os.O_WRONLY, permissions)
    except (OSError, ValueError) as e:
        return _os_failure(e, "Could not create file")

    try:
        try:
            os.chmod(path, permissions)
        except OSError as e:
            return _os_failure(e, "Failed to change permissions")

        try:
            written = os.write(fd, data)
        except OSError as e:
            return _os_failure(e, "Failed to write contents")

        if written != len(data):
            return Result.failure(
                ErrorKind.IO_ERROR,
                f"Failed to write contents: wrote {written} of {len(data)} bytes"
            )
    finally:
        os.close(fd)

    return Result.success()


def write_new_file(path: str, content: str | bytes, permissions: int = 0o600) -> Result:
    """Write a file that must not exist yet, since write_text_file appends."""
    if path_exists(path):
        return Result.failure(
            ErrorKind.ALREADY_EXISTS,
            f"Refusing to append to existing file: {path}"
        )
    return write_text_file(path, content, permissions, True)
