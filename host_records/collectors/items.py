"""Collectors for discovering application bundles to read."""

import logging
import os
from pathlib import Path

from host_records.collectors.bundle import info_plist_path
from host_records.util.fs import is_directory, list_directory, path_exists

logger = logging.getLogger(__name__)


def default_search_dirs() -> list[str]:
    """Standard application directories: system-wide and the user's own."""
    return [
        "/Applications",
        str(Path.home() / "Applications"),
    ]


def collect_info_plist_paths(search_dirs: list[str]) -> list[str]:
    """
    Collect the Info.plist paths of all .app bundles in the given directories.

    Only immediate children are inspected. Directories that are missing or
    cannot be listed are skipped.

    Args:
        search_dirs: Directories to look in (``~`` is expanded)

    Returns:
        Sorted list of Info.plist paths
    """
    plists = []

    for search_dir in search_dirs:
        listing = list_directory(os.path.expanduser(search_dir))
        if not listing:
            logger.debug("Skipping %s: %s", search_dir, listing)
            continue

        for child in listing.value:
            if not child.endswith(".app") or not is_directory(child):
                continue

            plist = info_plist_path(child)
            if path_exists(plist):
                plists.append(plist)
            else:
                logger.debug("No Info.plist in %s", child)

    # Sort for deterministic output
    plists.sort()
    return plists
