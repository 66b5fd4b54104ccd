"""
targz - create .tar.gz archives from directory trees.

Usage:
    >>> from targz import compress
    >>> compress("path/to/the/directory/to/compress", "my_archive.tar.gz")

This creates ./my_archive.tar.gz containing the folder "compress" (the last
component of the input path) and everything below it.

Invariants:
    - compress() is the only operation; it either returns an ArchiveSummary
      or raises a TargzError subclass
    - A failed compress() leaves no archive and no directories it created
    - The output is a standard tar.gz readable by any tar/gzip tool
"""

from .archiver import ArchiveSummary, compress
from .errors import (
    ArchiveWriteError,
    DestinationError,
    FilesystemAccessError,
    PathResolutionError,
    SourceError,
    TargzError,
)

__version__ = "1.0.0"

__all__ = [
    "compress",
    "ArchiveSummary",
    "TargzError",
    "PathResolutionError",
    "FilesystemAccessError",
    "SourceError",
    "DestinationError",
    "ArchiveWriteError",
    "__version__",
]
