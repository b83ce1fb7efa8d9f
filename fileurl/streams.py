"""Closable byte and character streams with a bulk pump operation."""

from __future__ import annotations

import io
from typing import IO, Iterator

from .config import StreamConfig


class Input:
    """Readable stream over a native file object.

    Attributes:
        name: Path or label of the underlying source (for error messages).
        chunk_size: Number of elements read per chunk by pump_to() and
            iteration.
    """

    def __init__(self, native: IO, name: str, chunk_size: int):
        self._native = native
        self.name = name
        self.chunk_size = chunk_size
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError(f"I/O operation on closed input: {self.name}")

    def read(self, size: int = -1) -> bytes | str:
        """Read up to ``size`` elements, or everything when negative."""
        self._check_open()
        return self._native.read(size)

    def __iter__(self) -> Iterator[bytes | str]:
        self._check_open()
        while True:
            chunk = self._native.read(self.chunk_size)
            if not chunk:
                return
            yield chunk

    def pump_to(self, output: Output) -> int:
        """Transfer everything remaining in this input to ``output``.

        Returns:
            Number of elements (bytes or characters) transferred.
        """
        count = 0
        for chunk in self:
            output.write(chunk)
            count += len(chunk)
        output.flush()
        return count

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._native.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> Input:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, closed={self._closed})"


class Output:
    """Writable stream over a native file object."""

    def __init__(self, native: IO, name: str):
        self._native = native
        self.name = name
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError(f"I/O operation on closed output: {self.name}")

    def write(self, data: bytes | str) -> int:
        """Write data, returning the number of elements written."""
        self._check_open()
        return self._native.write(data)

    def flush(self) -> None:
        self._check_open()
        self._native.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._native.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> Output:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, closed={self._closed})"


class ByteInput(Input):
    """Buffered binary input."""

    @classmethod
    def open(cls, path: str, config: StreamConfig) -> ByteInput:
        native = io.open(path, "rb", buffering=config.buffer_size)
        return cls(native, path, config.buffer_size)


class ByteOutput(Output):
    """Buffered binary output."""

    @classmethod
    def open(cls, path: str, config: StreamConfig, append: bool = False) -> ByteOutput:
        native = io.open(path, "ab" if append else "wb", buffering=config.buffer_size)
        return cls(native, path)


class CharInput(Input):
    """Buffered text input decoded with the configured encoding."""

    @classmethod
    def open(cls, path: str, config: StreamConfig) -> CharInput:
        native = io.open(
            path,
            "r",
            buffering=config.buffer_size,
            encoding=config.encoding,
            errors=config.errors,
            newline=config.newline,
        )
        return cls(native, path, config.buffer_size)


class CharOutput(Output):
    """Buffered text output encoded with the configured encoding."""

    @classmethod
    def open(cls, path: str, config: StreamConfig, append: bool = False) -> CharOutput:
        native = io.open(
            path,
            "a" if append else "w",
            buffering=config.buffer_size,
            encoding=config.encoding,
            errors=config.errors,
            newline=config.newline,
        )
        return cls(native, path)
