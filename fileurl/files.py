"""Filesystem URLs.

A FileUrl is an immutable sequence of path elements owned by the ``File``
scheme. It can be composed, compared and inspected without touching the
disk; filesystem operations go through a ``pathlib.Path`` built on first
use and cached for the lifetime of the value.

Most operations report routine filesystem failures (missing paths,
permissions, cross-device renames) by returning False instead of raising.
"""

from __future__ import annotations

import atexit
import logging
import os
import stat as stat_mod
import tempfile
import threading
from datetime import datetime, timezone
from functools import cached_property
from pathlib import Path
from typing import Any, Iterable, Iterator
from urllib.parse import unquote

from .base import (
    SEPARATOR,
    AbsolutePath,
    RelativePath,
    Scheme,
    check_element,
    split_elements,
)
from .capabilities import StreamReader, StreamWriter, current_capabilities
from .streams import Input, Output

logger = logging.getLogger(__name__)

_WRITE_BITS = stat_mod.S_IWUSR | stat_mod.S_IWGRP | stat_mod.S_IWOTH


# -------------------------------------------------------------------------
# Delete-on-exit registry (process-wide)
# -------------------------------------------------------------------------

_exit_lock = threading.Lock()
_exit_paths: list[str] = []
_exit_hook_installed = False


def _register_exit_path(path: str) -> None:
    global _exit_hook_installed
    with _exit_lock:
        if not _exit_hook_installed:
            atexit.register(_delete_exit_paths)
            _exit_hook_installed = True
        if path not in _exit_paths:
            _exit_paths.append(path)


def _delete_exit_paths() -> None:
    """Delete registered paths, most recently registered first."""
    with _exit_lock:
        paths = list(reversed(_exit_paths))
        _exit_paths.clear()
    for path in paths:
        try:
            if os.path.isdir(path) and not os.path.islink(path):
                os.rmdir(path)
            else:
                os.unlink(path)
        except OSError as exc:
            logger.debug("Delete on exit failed for %s: %s", path, exc)


# -------------------------------------------------------------------------
# Scheme
# -------------------------------------------------------------------------


class FileScheme(Scheme):
    """Factory for FileUrls; the module-level ``File`` is its only instance."""

    name = "file"

    def make_path(self, elements: Iterable[str]) -> FileUrl:
        """Create a FileUrl from path elements (empty elements are dropped)."""
        return FileUrl(self, elements)

    def current_dir(self) -> FileUrl:
        """Return the FileUrl of the process's working directory.

        Raises:
            FileNotFoundError: If the working directory no longer exists.
        """
        return self.make_path(split_elements(os.getcwd()))

    def from_native(self, path: str | os.PathLike[str]) -> FileUrl:
        """Create a FileUrl from a native path, made absolute first."""
        return self.make_path(split_elements(os.path.abspath(os.fspath(path))))

    def __call__(self, path: str | os.PathLike[str]) -> FileUrl:
        return self.from_native(path)

    def parse(self, text: str) -> FileUrl:
        """Parse ``file:///a/b`` (percent-encoded) or ``/a/b``.

        Raises:
            ValueError: For another scheme or a relative path.
        """
        prefix = f"{self.name}://"
        if text.startswith(prefix):
            text = unquote(text[len(prefix):])
        elif "://" in text:
            raise ValueError(f"Not a {self.name} URL: {text!r}")
        if not text.startswith(SEPARATOR):
            raise ValueError(f"Not an absolute path: {text!r}")
        return self.make_path(split_elements(text))


# -------------------------------------------------------------------------
# FileUrl
# -------------------------------------------------------------------------


class FileUrl:
    """An immutable location on the local filesystem.

    Create instances through ``File`` (``File / "tmp"``,
    ``File.current_dir()``, ``File(some_path)``) rather than directly.

    Attributes:
        elements: Path elements from the root, none empty.
        scheme: The owning FileScheme.
    """

    def __init__(self, scheme: FileScheme, elements: Iterable[str]):
        if not isinstance(scheme, FileScheme):
            raise TypeError(f"FileUrl must be created by the file scheme, not {scheme!r}")
        self._scheme = scheme
        self._elements = tuple(check_element(e) for e in elements if e)

    # -------------------------------------------------------------------------
    # Value
    # -------------------------------------------------------------------------

    @property
    def scheme(self) -> FileScheme:
        return self._scheme

    @property
    def elements(self) -> tuple[str, ...]:
        return self._elements

    @property
    def path_string(self) -> str:
        return SEPARATOR + SEPARATOR.join(self._elements)

    @property
    def url(self) -> str:
        return f"{self._scheme.name}://{self.path_string}"

    @cached_property
    def handle(self) -> Path:
        """Native handle for this location, built once and never refreshed."""
        return Path(self.path_string)

    @property
    def parent(self) -> FileUrl:
        """The enclosing directory; the root is its own parent."""
        return self._scheme.make_path(self._elements[:-1])

    @property
    def filename(self) -> str:
        return self._elements[-1] if self._elements else ""

    @property
    def extension(self) -> str | None:
        """Text after the last dot of the filename, or None without a dot.

        A leading-dot name such as ``.gitignore`` yields ``gitignore``.
        """
        name = self.filename
        if "." not in name:
            return None
        return name.rsplit(".", 1)[1]

    def __truediv__(self, other: Any) -> FileUrl:
        if isinstance(other, str):
            return self._scheme.make_path(self._elements + (check_element(other),))
        if isinstance(other, RelativePath):
            kept = self._elements[: max(len(self._elements) - other.ascent, 0)]
            return self._scheme.make_path(kept + other.elements)
        if isinstance(other, AbsolutePath):
            return other.to_url(self._scheme)
        return NotImplemented

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FileUrl):
            return NotImplemented
        return self._scheme is other._scheme and self._elements == other._elements

    def __hash__(self) -> int:
        return hash((self._scheme.name, self._elements))

    def __fspath__(self) -> str:
        return self.path_string

    def __str__(self) -> str:
        return self.path_string

    def __repr__(self) -> str:
        return f"FileUrl({self.path_string!r})"

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def exists(self) -> bool:
        return os.path.exists(self.handle)

    def is_file(self) -> bool:
        return os.path.isfile(self.handle)

    def is_directory(self) -> bool:
        return os.path.isdir(self.handle)

    def readable(self) -> bool:
        return self._access(os.R_OK)

    def writable(self) -> bool:
        return self._access(os.W_OK)

    def _access(self, mode: int) -> bool:
        try:
            return os.access(self.handle, mode)
        except (OSError, ValueError):
            return False

    def hidden(self) -> bool:
        """True for dot-files, or files carrying the Windows hidden attribute."""
        if self.filename.startswith("."):
            return True
        try:
            attributes = getattr(self.handle.stat(), "st_file_attributes", 0)
        except (OSError, ValueError):
            return False
        return bool(attributes & stat_mod.FILE_ATTRIBUTE_HIDDEN)

    def length(self) -> int:
        """Size in bytes; 0 for directories and missing paths."""
        try:
            st = self.handle.stat()
        except (OSError, ValueError):
            return 0
        if stat_mod.S_ISDIR(st.st_mode):
            return 0
        return st.st_size

    def size(self) -> int:
        return self.length()

    def last_modified(self) -> datetime:
        """Modification time in UTC; the epoch for missing paths."""
        try:
            timestamp = self.handle.stat().st_mtime
        except (OSError, ValueError):
            timestamp = 0.0
        return datetime.fromtimestamp(timestamp, tz=timezone.utc)

    # -------------------------------------------------------------------------
    # Attribute changes
    # -------------------------------------------------------------------------

    def set_last_modified(self, when: datetime | float) -> bool:
        """Set the modification time, keeping the access time.

        Args:
            when: A datetime (naive values are local time) or POSIX timestamp.
        """
        timestamp = when.timestamp() if isinstance(when, datetime) else float(when)
        try:
            atime = self.handle.stat().st_atime
            os.utime(self.handle, (atime, timestamp))
        except (OSError, ValueError, OverflowError) as exc:
            logger.debug("Could not set mtime of %s: %s", self.path_string, exc)
            return False
        return True

    def set_writable(self, flag: bool) -> bool:
        """Make this path read-only, or confirm that it is writable.

        Clearing writability removes every write permission bit. Granting
        writability is only possible when the path is already writable.

        Raises:
            PermissionError: If ``flag`` is True and the path is not writable.
        """
        if flag:
            if self.writable():
                return True
            raise PermissionError(f"Can't set writable: {self.path_string}")
        try:
            mode = stat_mod.S_IMODE(self.handle.stat().st_mode)
            os.chmod(self.handle, mode & ~_WRITE_BITS)
        except (OSError, ValueError) as exc:
            logger.debug("Could not make %s read-only: %s", self.path_string, exc)
            return False
        return True

    # -------------------------------------------------------------------------
    # Structure
    # -------------------------------------------------------------------------

    def mkdir(self, make_parents: bool = False) -> bool:
        """Create this path as a directory.

        Fails if it already exists, or if the parent is missing and
        ``make_parents`` is not set.
        """
        try:
            self.handle.mkdir(parents=make_parents)
        except (OSError, ValueError) as exc:
            logger.debug("Could not create directory %s: %s", self.path_string, exc)
            return False
        return True

    def children(self) -> list[FileUrl]:
        """Immediate children in name order; empty for files and missing paths."""
        if not self.is_directory():
            return []
        try:
            names = sorted(os.listdir(self.handle))
        except OSError as exc:
            logger.debug("Could not list %s: %s", self.path_string, exc)
            return []
        return [self / name for name in names]

    def descendants(self) -> Iterator[FileUrl]:
        """Lazily walk the tree below this path, depth-first, pre-order.

        Each directory is yielded before its contents and is listed only when
        the walk reaches it. Symbolic links to directories are followed.
        """
        for child in self.children():
            yield child
            if child.is_directory():
                yield from child.descendants()

    def temp_file(self, prefix: str = "tmp", suffix: str = "") -> FileUrl:
        """Create a new, empty, uniquely named file in this directory.

        Raises:
            OSError: If this is not an existing, writable directory.
        """
        fd, name = tempfile.mkstemp(suffix=suffix, prefix=prefix, dir=self.handle)
        os.close(fd)
        return self._scheme.from_native(name)

    # -------------------------------------------------------------------------
    # Deletion
    # -------------------------------------------------------------------------

    def delete(self, recursive: bool = False) -> bool:
        """Delete this file or directory.

        Without ``recursive`` a non-empty directory is left alone and False
        is returned. With it, the contents are deleted depth-first before the
        directory itself; a child that cannot be deleted does not stop its
        siblings, but leaves the parent non-empty. Links are removed, never
        followed.

        Returns:
            Whether this path itself was deleted.
        """
        if recursive:
            return self._delete_recursively()
        return self._delete_self()

    def _delete_recursively(self) -> bool:
        if self.is_directory() and not os.path.islink(self.handle):
            for child in self.children():
                child._delete_recursively()
        return self._delete_self()

    def _delete_self(self) -> bool:
        try:
            if os.path.isdir(self.handle) and not os.path.islink(self.handle):
                os.rmdir(self.handle)
            else:
                os.unlink(self.handle)
        except (OSError, ValueError) as exc:
            logger.debug("Could not delete %s: %s", self.path_string, exc)
            return False
        return True

    def delete_on_exit(self) -> None:
        """Delete this path when the interpreter exits (best effort)."""
        _register_exit_path(self.path_string)

    # -------------------------------------------------------------------------
    # Relocation
    # -------------------------------------------------------------------------

    def rename_to(self, dest: FileUrl) -> bool:
        """Atomically rename this path to ``dest``."""
        try:
            os.rename(self.handle, dest.handle)
        except (OSError, ValueError) as exc:
            logger.debug("Could not rename %s to %s: %s", self.path_string, dest, exc)
            return False
        return True

    def copy_to(
        self,
        dest: FileUrl,
        reader: StreamReader | None = None,
        writer: StreamWriter | None = None,
    ) -> bool:
        """Copy this file's bytes to ``dest``.

        The byte reader and writer come from the capabilities in scope
        unless given. Copying an empty file reports False.

        Raises:
            MissingCapabilityError: If no byte reader or writer is available.
            ValueError: If the reader and writer handle different element kinds.
        """
        registry = current_capabilities()
        if reader is None:
            reader = registry.reader(type(self), bytes)
        if writer is None:
            writer = registry.writer(type(dest), bytes)
        try:
            count = reader.pump(self, dest, writer)
        except OSError as exc:
            logger.debug("Could not copy %s to %s: %s", self.path_string, dest, exc)
            return False
        return count > 0

    def move_to(self, dest: FileUrl) -> bool:
        """Move this file to ``dest``.

        Renames when possible; otherwise copies and then deletes the source.
        If the copy succeeds but the delete fails, both files remain and
        False is returned.
        """
        if self.rename_to(dest):
            return True
        logger.debug("Rename of %s failed, copying to %s instead", self.path_string, dest)
        return self.copy_to(dest) and self.delete()

    # -------------------------------------------------------------------------
    # Streams
    # -------------------------------------------------------------------------

    def input(self, kind: type = bytes) -> Input:
        """Open this file for reading ``bytes`` or ``str`` elements."""
        return current_capabilities().reader(type(self), kind).input(self)

    def output(self, kind: type = bytes, append: bool = False) -> Output:
        """Open this file for writing ``bytes`` or ``str`` elements."""
        return current_capabilities().writer(type(self), kind).output(self, append=append)


File = FileScheme()
