"""Application bundle metadata records."""

import logging

from host_records.collectors.bundle import get_path_components
from host_records.collectors.items import collect_info_plist_paths
from host_records.collectors.plist_tree import StructuredTree, load_plist
from host_records.config import Config
from host_records.models import AppMetadataRow, ErrorKind, Result

logger = logging.getLogger(__name__)

# Row field -> Info.plist key
INFO_PLIST_KEYS = {
    "bundle_executable": "CFBundleExecutable",
    "bundle_identifier": "CFBundleIdentifier",
    "bundle_name": "CFBundleName",
    "bundle_short_version": "CFBundleShortVersionString",
    "bundle_version": "CFBundleVersion",
    "bundle_package_type": "CFBundlePackageType",
    "compiler": "DTCompiler",
    "development_region": "CFBundleDevelopmentRegion",
    "display_name": "CFBundleDisplayName",
    "info_string": "CFBundleGetInfoString",
    "minimum_system_version": "LSMinimumSystemVersion",
    "category": "LSApplicationCategoryType",
    "applescript_enabled": "NSAppleScriptEnabled",
    "copyright": "NSHumanReadableCopyright",
}


def extract_app_metadata(plist_path: str, tree: StructuredTree) -> AppMetadataRow:
    """
    Build an application row from an Info.plist path and its parsed tree.

    The ``name`` and ``path`` fields come only from ``plist_path``; every
    other field is looked up in ``tree`` and is an empty string when the
    key is absent.

    Args:
        plist_path: Path of the form ``.../<Name>.app/Contents/Info.plist``
        tree: Parsed Info.plist content

    Returns:
        AppMetadataRow with all 16 fields set

    Example:
        >>> row = extract_app_metadata("/Applications/Foo.app/Contents/Info.plist", PlistTree({}))
        >>> row.name, row.path, row.bundle_identifier
        ('Foo.app', '/Applications/Foo.app', '')
    """
    fields = {"name": "", "path": ""}

    components = get_path_components(plist_path)
    if components:
        fields["name"] = components.value.bundle_name
        fields["path"] = components.value.bundle_root_path
    else:
        logger.debug("Cannot derive bundle from %s: %s", plist_path, components.message)

    for field_name, key in INFO_PLIST_KEYS.items():
        fields[field_name] = tree.get(key) or ""

    return AppMetadataRow(**fields)


def load_app_metadata(plist_path: str) -> Result:
    """
    Read an Info.plist file and build its application row.

    Returns:
        Successful Result with an AppMetadataRow, the read/parse failure,
        or PARSE_ERROR if the tree could not be queried
    """
    tree = load_plist(plist_path)
    if not tree:
        return tree

    try:
        row = extract_app_metadata(plist_path, tree.value)
    except Exception as e:
        logger.error("Failed to read keys from %s: %s", plist_path, e)
        return Result.failure(ErrorKind.PARSE_ERROR, f"Could not read property list keys: {e}")

    return Result.success(row)


def scan_applications(config: Config | None = None) -> list[AppMetadataRow]:
    """
    Enumerate application bundles and read their metadata.

    Scans the configured application directories (by default /Applications
    and ~/Applications) for .app bundles. Bundles whose Info.plist cannot
    be read or parsed are logged and skipped.

    Args:
        config: Configuration providing ``app_dirs``

    Returns:
        List of AppMetadataRow, ordered by Info.plist path
    """
    config = config or Config()
    rows = []

    for plist_path in collect_info_plist_paths(config.app_dirs):
        result = load_app_metadata(plist_path)
        if result:
            rows.append(result.value)
        else:
            logger.warning("Skipping %s: %s", plist_path, result)

    return rows
