"""Data models for host-records."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ConfigDict


class ErrorKind(str, Enum):
    """Failure categories reported by filesystem and extractor operations."""

    INVALID_ARGUMENT = "InvalidArgument"
    NOT_FOUND = "NotFound"
    PERMISSION_DENIED = "PermissionDenied"
    ALREADY_EXISTS = "AlreadyExists"
    NOT_A_DIRECTORY = "NotADirectory"
    IS_A_DIRECTORY = "IsADirectory"
    IO_ERROR = "IoError"
    PARSE_ERROR = "ParseError"

    @classmethod
    def from_os_error(cls, exc: BaseException) -> "ErrorKind":
        """Map an OS-level exception to an error kind."""
        if isinstance(exc, FileNotFoundError):
            return cls.NOT_FOUND
        if isinstance(exc, PermissionError):
            return cls.PERMISSION_DENIED
        if isinstance(exc, FileExistsError):
            return cls.ALREADY_EXISTS
        if isinstance(exc, NotADirectoryError):
            return cls.NOT_A_DIRECTORY
        if isinstance(exc, IsADirectoryError):
            return cls.IS_A_DIRECTORY
        if isinstance(exc, ValueError):
            return cls.INVALID_ARGUMENT
        return cls.IO_ERROR


class Result(BaseModel):
    """Outcome of an operation: a value on success, a kind and message on failure."""

    model_config = ConfigDict(frozen=True)

    ok: bool = Field(description="Whether the operation succeeded")
    value: Any = Field(default=None, description="Payload of a successful operation")
    error: ErrorKind | None = Field(default=None, description="Failure category")
    message: str = Field(default="OK", description="Diagnostic text")

    @classmethod
    def success(cls, value: Any = None) -> "Result":
        """Create a successful result carrying an optional value."""
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "Result":
        """Create a failed result; failures never carry a value."""
        return cls(ok=False, error=kind, message=message)

    def __bool__(self) -> bool:
        """Allow using result in boolean context (True if successful)."""
        return self.ok

    def __str__(self) -> str:
        if self.ok:
            return self.message
        return f"{self.error.value}: {self.message}"


class AppMetadataRow(BaseModel):
    """Application bundle metadata read from an Info.plist file."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        json_schema_extra={
            "example": {
                "name": "Photo Booth.app",
                "path": "/Applications/Photo Booth.app",
                "bundle_executable": "Photo Booth",
                "bundle_identifier": "com.apple.PhotoBooth",
                "bundle_name": "",
                "bundle_short_version": "6.0",
                "bundle_version": "517",
                "bundle_package_type": "APPL",
                "compiler": "com.apple.compilers.llvm.clang.1_0",
                "development_region": "English",
                "display_name": "",
                "info_string": "",
                "minimum_system_version": "10.7.0",
                "category": "public.app-category.entertainment",
                "applescript_enabled": "",
                "copyright": ""
            }
        }
    )

    name: str = Field(default="", description="Bundle directory name, e.g. 'Foo.app'")
    path: str = Field(default="", description="Full path to the .app bundle")
    bundle_executable: str = Field(default="", description="CFBundleExecutable")
    bundle_identifier: str = Field(default="", description="CFBundleIdentifier")
    bundle_name: str = Field(default="", description="CFBundleName")
    bundle_short_version: str = Field(default="", description="CFBundleShortVersionString")
    bundle_version: str = Field(default="", description="CFBundleVersion")
    bundle_package_type: str = Field(default="", description="CFBundlePackageType")
    compiler: str = Field(default="", description="DTCompiler")
    development_region: str = Field(default="", description="CFBundleDevelopmentRegion")
    display_name: str = Field(default="", description="CFBundleDisplayName")
    info_string: str = Field(default="", description="CFBundleGetInfoString")
    minimum_system_version: str = Field(default="", description="LSMinimumSystemVersion")
    category: str = Field(default="", description="LSApplicationCategoryType")
    applescript_enabled: str = Field(default="", description="NSAppleScriptEnabled")
    copyright: str = Field(default="", description="NSHumanReadableCopyright")

    def as_row(self) -> dict[str, str]:
        """Return the ordered field-name to value mapping."""
        return self.model_dump()


class CredentialPair(BaseModel):
    """A user entry from a Tomcat users file."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    username: str = Field(description="Value of the 'username' attribute")
    password: str = Field(description="Value of the 'password' attribute")

    def as_row(self) -> dict[str, str]:
        return self.model_dump()
