"""Configuration file management for host-records."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from host_records.collectors.items import default_search_dirs
from host_records.models import Result
from host_records.util.fs import path_exists, write_new_file


def default_tomcat_users_files() -> list[str]:
    """Common install locations of tomcat-users.xml."""
    return [
        "/usr/local/tomcat/conf/tomcat-users.xml",
        "/opt/tomcat/conf/tomcat-users.xml",
        "/etc/tomcat/tomcat-users.xml",
        "/usr/local/opt/tomcat/libexec/conf/tomcat-users.xml",
    ]


@dataclass
class Config:
    """Configuration for host-records."""

    # Application discovery
    app_dirs: list[str] = field(default_factory=default_search_dirs)

    # Tomcat users files read by the tomcat command when no path is given
    tomcat_users_files: list[str] = field(default_factory=default_tomcat_users_files)

    # Mode bits for files written with --out
    output_mode: int = 0o600

    # Root logger level when --verbose is not given
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if isinstance(self.output_mode, bool) or not isinstance(self.output_mode, int):
            raise ValueError(f"output_mode must be an integer, got {self.output_mode!r}")
        if not 0 <= self.output_mode <= 0o7777:
            raise ValueError(f"output_mode out of range: {oct(self.output_mode)}")

        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"Invalid log level '{self.log_level}'")


def load_config(config_path: Path | str | None = None) -> Config:
    """
    Load configuration from file.

    Args:
        config_path: Path to config file. If None, checks default locations:
            1. ~/.host-records.yaml
            2. ~/.host-records.yml
            3. ~/.config/host-records/config.yaml
            4. ~/.config/host-records/config.yml

    Returns:
        Config object with loaded settings (or defaults if no config found)
    """
    if config_path:
        path = Path(config_path).expanduser()
        if not path_exists(str(path)):
            raise FileNotFoundError(f"Config file not found: {path}")
        config_file = path
    else:
        default_paths = [
            Path.home() / ".host-records.yaml",
            Path.home() / ".host-records.yml",
            Path.home() / ".config" / "host-records" / "config.yaml",
            Path.home() / ".config" / "host-records" / "config.yml",
        ]

        config_file = None
        for path in default_paths:
            if path_exists(str(path)):
                config_file = path
                break

        if not config_file:
            return Config()

    try:
        with open(config_file, 'r') as f:
            data = yaml.safe_load(f) or {}
        return Config(**data)
    except Exception as e:
        raise ValueError(f"Failed to load config from {config_file}: {e}") from e


def save_example_config(output_path: Path | str) -> Result:
    """
    Save an example configuration file with all options documented.

    Args:
        output_path: Where to save the example config

    Returns:
        Result of the write; an existing file is left untouched
        (ALREADY_EXISTS) since writes append
    """
    example = """# host-records configuration file
# Place at ~/.host-records.yaml or ~/.config/host-records/config.yaml

# Directories searched for .app bundles (immediate children only)
app_dirs:
  - /Applications
  - ~/Applications

# tomcat-users.xml files read when `host-records tomcat` gets no paths
tomcat_users_files:
  - /usr/local/tomcat/conf/tomcat-users.xml
  - /opt/tomcat/conf/tomcat-users.xml

# Permission bits for report files written with --out
output_mode: 0600

# DEBUG, INFO, WARNING, ERROR
log_level: WARNING
"""

    path = Path(output_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return write_new_file(str(path), example, 0o644)
