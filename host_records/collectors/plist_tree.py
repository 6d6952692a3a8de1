"""Read-only tree access over parsed property lists."""

import logging
import plistlib
from datetime import datetime
from typing import Any, Protocol

from host_records.models import ErrorKind, Result
from host_records.util.fs import read_file

logger = logging.getLogger(__name__)


class StructuredTree(Protocol):
    """Hierarchical document addressed by dotted key paths."""

    def get(self, key_path: str) -> str | None:
        ...

    def children(self, key_path: str = "") -> list[tuple[str, "StructuredTree"]]:
        ...


class PlistTree:
    """
    StructuredTree view over the object returned by ``plistlib``.

    Dictionaries are addressed by key and arrays by index, joined with
    dots (``"CFBundleURLTypes.0.CFBundleURLName"``). The wrapped data is
    never modified.
    """

    def __init__(self, data: Any):
        self._data = data

    def _node(self, key_path: str) -> Any:
        node = self._data
        if not key_path:
            return node

        for part in key_path.split("."):
            if isinstance(node, dict):
                if part not in node:
                    return None
                node = node[part]
            elif isinstance(node, list):
                if not part.isdecimal() or int(part) >= len(node):
                    return None
                node = node[int(part)]
            else:
                return None
        return node

    def get(self, key_path: str) -> str | None:
        """
        Get a scalar value as a string.

        Returns:
            The value, or None if the path is missing or names a
            container or binary data
        """
        return _scalar_to_str(self._node(key_path))

    def children(self, key_path: str = "") -> list[tuple[str, "PlistTree"]]:
        """List (key, subtree) pairs of a dictionary or array node."""
        node = self._node(key_path)
        if isinstance(node, dict):
            return [(str(key), PlistTree(value)) for key, value in node.items()]
        if isinstance(node, list):
            return [(str(index), PlistTree(value)) for index, value in enumerate(node)]
        return []


def _scalar_to_str(value: Any) -> str | None:
    # bool is checked before int because it is a subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    return None


def parse_plist(content: bytes) -> Result:
    """
    Parse XML or binary property list content.

    Args:
        content: Raw plist bytes

    Returns:
        Successful Result with a PlistTree, or PARSE_ERROR carrying the
        parser's message. The top-level object must be a dictionary.
    """
    try:
        data = plistlib.loads(content)
    except Exception as e:
        # plistlib reports malformed content through many exception types
        # (ExpatError, InvalidFileException, AttributeError on bad dates, ...)
        logger.debug("Property list decoding failed: %s", e)
        return Result.failure(ErrorKind.PARSE_ERROR, f"Could not parse property list: {e}")

    if not isinstance(data, dict):
        return Result.failure(
            ErrorKind.PARSE_ERROR,
            f"Property list root is a {type(data).__name__}, expected a dictionary"
        )

    return Result.success(PlistTree(data))


def load_plist(path: str) -> Result:
    """Read and parse a property list file."""
    content = read_file(path)
    if not content:
        return content
    return parse_plist(content.value)
