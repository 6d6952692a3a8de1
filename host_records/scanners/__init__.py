"""Scanners that turn OS-resident files into records."""

from .apps import extract_app_metadata, load_app_metadata, scan_applications
from .tomcat import extract_credentials, extract_credentials_from_path, scan_tomcat_users

__all__ = [
    "extract_app_metadata",
    "load_app_metadata",
    "scan_applications",
    "extract_credentials",
    "extract_credentials_from_path",
    "scan_tomcat_users",
]
