"""Stream capabilities for URL types.

A capability resolver opens a URL as a byte or character stream. Readers
and writers are registered per ``(url type, element kind)`` where the
element kind is ``bytes`` or ``str``; lookups walk the URL type's MRO so a
subclass inherits the capabilities of its base.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any

from .config import StreamConfig
from .context import current_registry
from .streams import ByteInput, ByteOutput, CharInput, CharOutput, Input, Output

logger = logging.getLogger(__name__)

ELEMENT_KINDS = (bytes, str)


class MissingCapabilityError(LookupError):
    """No reader or writer is registered for a URL type and element kind."""


class StreamReader(ABC):
    """Opens URLs for reading elements of ``kind``."""

    kind: type = bytes

    @abstractmethod
    def input(self, url: Any) -> Input:
        """Open ``url`` for reading."""

    def pump(self, url: Any, dest: Any, writer: StreamWriter) -> int:
        """Copy everything readable from ``url`` to ``dest``.

        Both streams are closed on every exit path.

        Returns:
            Number of elements transferred.

        Raises:
            ValueError: If ``writer`` handles a different element kind.
        """
        if writer.kind is not self.kind:
            raise ValueError(
                f"Cannot pump {self.kind.__name__} elements into a {writer.kind.__name__} writer"
            )
        with self.input(url) as source:
            with writer.output(dest) as sink:
                count = source.pump_to(sink)
        logger.debug("Pumped %d %s elements from %s to %s", count, self.kind.__name__, url, dest)
        return count


class StreamWriter(ABC):
    """Opens URLs for writing elements of ``kind``."""

    kind: type = bytes

    @abstractmethod
    def output(self, url: Any, append: bool = False) -> Output:
        """Open ``url`` for writing, truncating unless ``append`` is set."""


class _FileStreamCapability:
    def __init__(self, config: StreamConfig | None = None):
        self.config = config or StreamConfig()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.config!r})"


class FileStreamByteReader(_FileStreamCapability, StreamReader):
    """Reads file URLs as buffered bytes."""

    kind = bytes

    def input(self, url: Any) -> Input:
        return ByteInput.open(url.path_string, self.config)


class FileStreamByteWriter(_FileStreamCapability, StreamWriter):
    """Writes file URLs as buffered bytes."""

    kind = bytes

    def output(self, url: Any, append: bool = False) -> Output:
        return ByteOutput.open(url.path_string, self.config, append=append)


class FileStreamCharReader(_FileStreamCapability, StreamReader):
    """Reads file URLs as decoded characters."""

    kind = str

    def input(self, url: Any) -> Input:
        return CharInput.open(url.path_string, self.config)


class FileStreamCharWriter(_FileStreamCapability, StreamWriter):
    """Writes file URLs as encoded characters."""

    kind = str

    def output(self, url: Any, append: bool = False) -> Output:
        return CharOutput.open(url.path_string, self.config, append=append)


class Capabilities:
    """Registry of readers and writers keyed by (url type, element kind)."""

    def __init__(self) -> None:
        self._readers: dict[tuple[type, type], StreamReader] = {}
        self._writers: dict[tuple[type, type], StreamWriter] = {}

    def register_reader(self, url_type: type, reader: StreamReader) -> None:
        self._readers[(url_type, _check_kind(reader.kind))] = reader

    def register_writer(self, url_type: type, writer: StreamWriter) -> None:
        self._writers[(url_type, _check_kind(writer.kind))] = writer

    def reader(self, url_type: type, kind: type = bytes) -> StreamReader:
        """Resolve the reader for ``url_type`` and ``kind``.

        Raises:
            MissingCapabilityError: If neither the type nor any base has one.
        """
        return _lookup(self._readers, url_type, kind, "reader")

    def writer(self, url_type: type, kind: type = bytes) -> StreamWriter:
        """Resolve the writer for ``url_type`` and ``kind``.

        Raises:
            MissingCapabilityError: If neither the type nor any base has one.
        """
        return _lookup(self._writers, url_type, kind, "writer")

    def copy(self) -> Capabilities:
        """Return an independent registry with the same registrations."""
        clone = Capabilities()
        clone._readers = dict(self._readers)
        clone._writers = dict(self._writers)
        return clone


def _check_kind(kind: type) -> type:
    if kind not in ELEMENT_KINDS:
        raise ValueError(f"Unsupported element kind: {kind!r}")
    return kind


def _lookup(table: dict[tuple[type, type], Any], url_type: type, kind: type, role: str) -> Any:
    for klass in url_type.__mro__:
        found = table.get((klass, kind))
        if found is not None:
            return found
    raise MissingCapabilityError(
        f"No {kind.__name__} {role} registered for {url_type.__name__}"
    )


def default_capabilities(config: StreamConfig | None = None) -> Capabilities:
    """Build a registry holding the byte and character file capabilities."""
    from .files import FileUrl

    registry = Capabilities()
    registry.register_reader(FileUrl, FileStreamByteReader(config))
    registry.register_writer(FileUrl, FileStreamByteWriter(config))
    registry.register_reader(FileUrl, FileStreamCharReader(config))
    registry.register_writer(FileUrl, FileStreamCharWriter(config))
    return registry


_default: Capabilities | None = None
_default_lock = threading.Lock()


def current_capabilities() -> Capabilities:
    """Return the registry in scope, falling back to the shared default."""
    global _default
    registry = current_registry.get()
    if registry is not None:
        return registry
    with _default_lock:
        if _default is None:
            _default = default_capabilities()
        return _default
