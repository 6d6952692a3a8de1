"""Collectors for locating and reading OS-resident files."""

from .bundle import PathComponents, extract_bundle_name, extract_bundle_path, get_path_components
from .items import collect_info_plist_paths, default_search_dirs
from .plist_tree import PlistTree, StructuredTree, load_plist, parse_plist

__all__ = [
    "PathComponents",
    "extract_bundle_name",
    "extract_bundle_path",
    "get_path_components",
    "collect_info_plist_paths",
    "default_search_dirs",
    "PlistTree",
    "StructuredTree",
    "load_plist",
    "parse_plist",
]
