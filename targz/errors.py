"""
Error types for targz.

This module defines all exception types raised by compress():
- TargzError: Base exception
- PathResolutionError: A path could not be made absolute
- FilesystemAccessError: stat, listing, readlink or read failed
- SourceError: The source directory is missing or not a directory
- DestinationError: The destination parent chain could not be created
- ArchiveWriteError: The tar encoder, gzip stream or output file failed

Invariants:
    - All errors inherit from TargzError
    - The underlying OSError/TarError is chained as __cause__
    - Errors include the offending path in details
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class TargzError(Exception):
    """Base exception for all targz errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "TARGZ_ERROR"
        self.details = details or {}


class PathResolutionError(TargzError):
    """A source or destination path could not be made absolute."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="PATH_RESOLUTION_ERROR",
            details={"path": path},
        )
        self.path = path


class FilesystemAccessError(TargzError):
    """Reading the source tree failed.

    Raised when:
    - A directory cannot be listed
    - An entry cannot be stat'ed
    - A symlink target cannot be read
    - A regular file cannot be opened or read
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
        code: str = "FILESYSTEM_ACCESS_ERROR",
    ) -> None:
        super().__init__(
            message,
            code=code,
            details={"path": path, "operation": operation},
        )
        self.path = path
        self.operation = operation


class SourceError(FilesystemAccessError):
    """The source directory does not exist, is unreadable or is not a directory."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: str = "stat",
    ) -> None:
        super().__init__(message, path=path, operation=operation, code="SOURCE_ERROR")


class DestinationError(TargzError):
    """The destination's parent directory chain could not be created.

    Attributes:
        path: The component that blocked creation
        errno: errno of the failure (ENOTDIR for a non-directory component)
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        errno: Optional[int] = None,
    ) -> None:
        super().__init__(
            message,
            code="DESTINATION_ERROR",
            details={"path": path, "errno": errno},
        )
        self.path = path
        self.errno = errno


class ArchiveWriteError(TargzError):
    """The tar encoder, the gzip stream or the output file rejected a write or close."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
    ) -> None:
        super().__init__(
            message,
            code="ARCHIVE_WRITE_ERROR",
            details={"path": path, "operation": operation},
        )
        self.path = path
        self.operation = operation
