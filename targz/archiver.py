"""
Directory archiver for targz.

compress() walks a source directory and writes every entry into a gzip
compressed tar archive in a single pass:

    os.scandir -> tarfile.TarFile -> gzip.GzipFile -> destination file

Archive format:
    <basename(source)>/                 directory entry
    <basename(source)>/<relative path>  one entry per file, directory or link

Invariants:
    - Entry names are relative to the source's parent and use "/"
    - Symlinks are recorded with their target and never followed
    - Sockets are skipped, they have no tar representation
    - Every directory gets a header entry before its children
    - On failure the destination file and any directories created for it
      are removed; pre-existing directories are left alone

How to change safely:
    - Keep the close order tar -> gzip -> file, each layer wraps the next
    - Register new rollback actions on the ExitStack before doing the work
      they undo
"""

from __future__ import annotations

import gzip
import logging
import os
import stat
import tarfile
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Callable

from .errors import ArchiveWriteError, FilesystemAccessError, SourceError, TargzError
from .paths import make_absolute, mkdir_all, strip_trailing_slashes

logger = logging.getLogger(__name__)


@dataclass
class ArchiveSummary:
    """Result of a successful compress() call.

    Attributes:
        source: Absolute path of the archived directory
        destination: Absolute path of the written archive
        entries: Number of entries written to the archive
        files: Regular files written (with content)
        directories: Directory entries written, including the source itself
        symlinks: Symbolic link entries written
        content_bytes: Total size of regular file content
        skipped: Entries left out (sockets, the archive itself)
    """

    source: str
    destination: str
    entries: int = 0
    files: int = 0
    directories: int = 0
    symlinks: int = 0
    content_bytes: int = 0
    skipped: int = 0


class _SourceReader:
    """Read-only view of a source file that reports read errors as FilesystemAccessError.

    Any OSError escaping tar.addfile() is then a write failure on the
    archive side.
    """

    def __init__(self, fileobj: Any, path: str) -> None:
        self._fileobj = fileobj
        self._path = path

    def read(self, size: int = -1) -> bytes:
        try:
            data = self._fileobj.read(size)
        except OSError as e:
            raise FilesystemAccessError(
                f"Cannot read {self._path}: {e.strerror}",
                path=self._path,
                operation="read",
            ) from e
        # tarfile asks for exactly the bytes still owed by the header
        if size > 0 and len(data) < size:
            raise FilesystemAccessError(
                f"{self._path} shrank while being archived",
                path=self._path,
                operation="read",
            )
        return data


def compress(input_path: str | os.PathLike, output_path: str | os.PathLike) -> ArchiveSummary:
    """Create a .tar.gz archive at output_path from the directory at input_path.

    Only the last component of input_path appears in the archive, so
    compressing "/a/b/D" yields entries "D", "D/...". Missing parent
    directories of output_path are created.

    Args:
        input_path: Directory to archive
        output_path: Archive file to write

    Returns:
        ArchiveSummary with the resolved paths and entry counts

    Raises:
        PathResolutionError: If either path cannot be made absolute
        DestinationError: If the destination's parents cannot be created
        SourceError: If the source is missing or not a directory
        FilesystemAccessError: If reading the source tree fails
        ArchiveWriteError: If writing or closing the archive fails

    Example:
        >>> summary = compress("path/to/the/directory/to/compress", "my_archive.tar.gz")
        >>> summary.entries
        12
    """
    source, destination = make_absolute(strip_trailing_slashes(os.fspath(input_path)), output_path)

    with ExitStack() as rollback:
        undo_dir = mkdir_all(os.path.dirname(destination))
        rollback.callback(_best_effort, undo_dir, "remove created directory", destination)

        summary = _write_archive(source, destination, rollback)

        rollback.pop_all()

    logger.info(
        "Archive written",
        extra={
            "source": summary.source,
            "destination": summary.destination,
            "entries": summary.entries,
            "content_bytes": summary.content_bytes,
            "skipped": summary.skipped,
        },
    )
    return summary


def _write_archive(source: str, destination: str, rollback: ExitStack) -> ArchiveSummary:
    """Open the output layers and write the whole source tree through them."""
    try:
        st = os.stat(source)
    except OSError as e:
        raise SourceError(f"Cannot access source {source}: {e.strerror}", path=source) from e
    if not stat.S_ISDIR(st.st_mode):
        raise SourceError(f"Source {source} is not a directory", path=source)

    try:
        out = open(destination, "wb")
    except OSError as e:
        raise ArchiveWriteError(
            f"Cannot create {destination}: {e.strerror}",
            path=destination,
            operation="create",
        ) from e
    rollback.callback(_best_effort, lambda: os.remove(destination), "remove archive", destination)

    summary = ArchiveSummary(source=source, destination=destination)
    walker = _TreeWriter(source, os.fstat(out.fileno()), summary)

    failure: TargzError | None = None
    try:
        # Exit order is tar, gzip, file: each close flushes into the next layer
        with out, gzip.GzipFile(fileobj=out, mode="wb") as gz, tarfile.open(
            fileobj=gz, mode="w", format=tarfile.PAX_FORMAT
        ) as tar:
            try:
                walker.write_directory(tar, source, stat_path=os.path.realpath(source))
            except TargzError as e:
                failure = e
                raise
    except (OSError, tarfile.TarError) as e:
        if failure is not None:
            # A layer failed to close while unwinding; the first error wins
            logger.warning(
                f"Closing archive failed after an earlier error: {e}",
                extra={"path": destination},
            )
            raise failure
        raise ArchiveWriteError(
            f"Cannot write archive {destination}: {e}",
            path=destination,
            operation="write",
        ) from e

    return summary


class _TreeWriter:
    """Recursive walk of the source tree into an open TarFile."""

    def __init__(
        self,
        source: str,
        destination_stat: os.stat_result,
        summary: ArchiveSummary,
    ) -> None:
        self.source = source
        self.prefix = os.path.dirname(source)
        self.destination_stat = destination_stat
        self.summary = summary

    def write_directory(
        self,
        tar: tarfile.TarFile,
        directory: str,
        stat_path: str | None = None,
    ) -> None:
        self.write_entry(tar, directory, stat_path=stat_path)

        try:
            with os.scandir(directory) as it:
                children = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            if directory == self.source:
                raise SourceError(
                    f"Cannot list source {directory}: {e.strerror}",
                    path=directory,
                    operation="list",
                ) from e
            raise FilesystemAccessError(
                f"Cannot list directory {directory}: {e.strerror}",
                path=directory,
                operation="list",
            ) from e

        for child in children:
            if child.is_dir(follow_symlinks=False):
                self.write_directory(tar, child.path)
            else:
                self.write_entry(tar, child.path)

    def write_entry(self, tar: tarfile.TarFile, path: str, stat_path: str | None = None) -> None:
        """Write one header, plus content for regular files."""
        arcname = PurePath(os.path.relpath(path, self.prefix)).as_posix()
        try:
            # Matched by identity, the destination may be reached through a symlink
            if os.path.samestat(os.lstat(stat_path or path), self.destination_stat):
                self._skip(path, "archive being written")
                return
            # lstat + readlink; returns None for sockets
            info = tar.gettarinfo(stat_path or path, arcname)
        except OSError as e:
            raise FilesystemAccessError(
                f"Cannot read metadata of {path}: {e.strerror}",
                path=path,
                operation="stat",
            ) from e

        if info is None:
            self._skip(path, "unsupported file type")
            return

        if info.isreg():
            try:
                fh = open(path, "rb")
            except OSError as e:
                raise FilesystemAccessError(
                    f"Cannot open {path}: {e.strerror}",
                    path=path,
                    operation="open",
                ) from e
            with fh:
                tar.addfile(info, _SourceReader(fh, path))
            self.summary.files += 1
            self.summary.content_bytes += info.size
        else:
            tar.addfile(info)
            if info.isdir():
                self.summary.directories += 1
            elif info.issym():
                self.summary.symlinks += 1

        self.summary.entries += 1

    def _skip(self, path: str, reason: str) -> None:
        self.summary.skipped += 1
        logger.debug("Skipping entry", extra={"path": path, "reason": reason})


def _best_effort(action: Callable[[], None], description: str, path: str) -> None:
    """Run a rollback action, logging instead of raising if it fails."""
    try:
        action()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(
            f"Rollback step failed: {description}: {e}",
            extra={"path": path},
        )
