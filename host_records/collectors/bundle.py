"""Bundle name and path derivation from Info.plist paths."""

from typing import NamedTuple

from host_records.models import ErrorKind, Result

INFO_PLIST_SUFFIX = "/Contents/Info.plist"


class PathComponents(NamedTuple):
    """Bundle name and bundle root derived from an Info.plist path."""

    bundle_name: str
    bundle_root_path: str


def get_path_components(plist_path: str) -> Result:
    """
    Split ``.../<Name>.app/Contents/Info.plist`` into its bundle parts.

    Only ``/`` separates segments, so bundle names may contain spaces.

    Args:
        plist_path: Path to an Info.plist inside an application bundle

    Returns:
        Successful Result with a PathComponents value, or INVALID_ARGUMENT
        if the path does not have the expected shape.

    Example:
        >>> get_path_components("/Applications/Foo Bar.app/Contents/Info.plist").value
        PathComponents(bundle_name='Foo Bar.app', bundle_root_path='/Applications/Foo Bar.app')
    """
    if not plist_path.endswith(INFO_PLIST_SUFFIX):
        return Result.failure(
            ErrorKind.INVALID_ARGUMENT,
            f"Path does not end with {INFO_PLIST_SUFFIX}: {plist_path}"
        )

    bundle_root = plist_path[:-len(INFO_PLIST_SUFFIX)]
    bundle_name = bundle_root.rsplit("/", 1)[-1]
    if not bundle_name:
        return Result.failure(
            ErrorKind.INVALID_ARGUMENT,
            f"No bundle directory before {INFO_PLIST_SUFFIX}: {plist_path}"
        )

    return Result.success(PathComponents(bundle_name, bundle_root))


def extract_bundle_name(plist_path: str) -> Result:
    """Return the ``<Name>.app`` segment of an Info.plist path."""
    components = get_path_components(plist_path)
    if not components:
        return components
    return Result.success(components.value.bundle_name)


def extract_bundle_path(plist_path: str) -> Result:
    """Return the full path of the bundle that holds an Info.plist."""
    components = get_path_components(plist_path)
    if not components:
        return components
    return Result.success(components.value.bundle_root_path)


def info_plist_path(bundle_path: str) -> str:
    """Build the Info.plist path inside a bundle directory."""
    return bundle_path.rstrip("/") + INFO_PLIST_SUFFIX
