"""fileurl: immutable filesystem URLs with pluggable stream capabilities."""

from .base import AbsolutePath, PathFactory, RelativePath, Scheme, scheme_for
from .capabilities import (
    Capabilities,
    FileStreamByteReader,
    FileStreamByteWriter,
    FileStreamCharReader,
    FileStreamCharWriter,
    MissingCapabilityError,
    StreamReader,
    StreamWriter,
    current_capabilities,
    default_capabilities,
)
from .config import StreamConfig, configure
from .context import use_capabilities
from .files import File, FileScheme, FileUrl
from .streams import Input, Output

__all__ = [
    "AbsolutePath",
    "Capabilities",
    "configure",
    "current_capabilities",
    "default_capabilities",
    "File",
    "FileScheme",
    "FileStreamByteReader",
    "FileStreamByteWriter",
    "FileStreamCharReader",
    "FileStreamCharWriter",
    "FileUrl",
    "Input",
    "MissingCapabilityError",
    "Output",
    "PathFactory",
    "RelativePath",
    "Scheme",
    "scheme_for",
    "StreamConfig",
    "StreamReader",
    "StreamWriter",
    "use_capabilities",
]
