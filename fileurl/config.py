"""Configuration for stream capabilities.

Provides the StreamConfig dataclass and the configure() factory used to
build the settings that file readers and writers open their streams with.
"""

import io
from dataclasses import dataclass


@dataclass(frozen=True)
class StreamConfig:
    """Settings applied when a file is opened as a byte or character stream.

    Attributes:
        buffer_size: Size in bytes of the native buffer and of each chunk
            moved by pump().
        encoding: Text encoding for character streams.
        errors: Encoding error handler for character streams.
        newline: Newline translation for character streams (see open()).
    """

    buffer_size: int = io.DEFAULT_BUFFER_SIZE
    encoding: str = "utf-8"
    errors: str = "strict"
    newline: str | None = None


def configure(**kwargs) -> StreamConfig:
    """Build a StreamConfig.

    Args:
        **kwargs: Any StreamConfig field.
            - buffer_size (int): Must be positive.
            - encoding (str): Text encoding name.
            - errors (str): Error handler name.
            - newline (str | None): Newline mode.

    Returns:
        StreamConfig with defaults for anything not given.

    Examples:
        >>> configure(encoding="latin-1").encoding
        'latin-1'

        >>> configure(buffer_size=0)
        Traceback (most recent call last):
        ...
        ValueError: buffer_size must be a positive integer: 0
    """
    buffer_size = kwargs.pop("buffer_size", io.DEFAULT_BUFFER_SIZE)
    encoding = kwargs.pop("encoding", "utf-8")
    errors = kwargs.pop("errors", "strict")
    newline = kwargs.pop("newline", None)

    if kwargs:
        raise ValueError(
            f"Unexpected arguments for stream config: {list(kwargs.keys())}"
        )

    if not isinstance(buffer_size, int) or buffer_size <= 0:
        raise ValueError(f"buffer_size must be a positive integer: {buffer_size!r}")

    if newline not in (None, "", "\n", "\r", "\r\n"):
        raise ValueError(f"Unsupported newline mode: {newline!r}")

    return StreamConfig(
        buffer_size=buffer_size,
        encoding=encoding,
        errors=errors,
        newline=newline,
    )
