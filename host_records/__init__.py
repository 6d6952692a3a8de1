"""Fixed-schema records from application bundles and service configuration files."""

__version__ = "0.1.0"
