"""Scheme framework and path value types.

Defines the contract every URL scheme factory follows, the per-scheme
singleton registry, and the scheme-independent RelativePath and
AbsolutePath values that factories accept when composing URLs.
"""

from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from typing import Any, Iterable, Protocol, runtime_checkable

SEPARATOR = "/"

_schemes: dict[str, "Scheme"] = {}
_lock = threading.Lock()


def split_elements(text: str) -> tuple[str, ...]:
    """Split a path string into its non-empty elements.

    Both ``/`` and the platform separator are treated as separators.
    """
    if os.sep != SEPARATOR:
        text = text.replace(os.sep, SEPARATOR)
    return tuple(e for e in text.split(SEPARATOR) if e)


def check_element(name: str) -> str:
    """Validate a single path element.

    Raises:
        ValueError: If the name contains a separator.
    """
    if SEPARATOR in name or (os.sep != SEPARATOR and os.sep in name):
        raise ValueError(f"Path element may not contain a separator: {name!r}")
    return name


@dataclass(frozen=True)
class RelativePath:
    """A path relative to some base, independent of any scheme.

    Attributes:
        elements: Elements to append to the base.
        ascent: Number of levels to climb from the base before appending.
    """

    elements: tuple[str, ...] = ()
    ascent: int = 0

    def __post_init__(self) -> None:
        if self.ascent < 0:
            raise ValueError(f"ascent must not be negative: {self.ascent}")
        object.__setattr__(
            self, "elements", tuple(check_element(e) for e in self.elements if e)
        )

    @classmethod
    def parse(cls, text: str) -> RelativePath:
        """Parse text like ``../a/./b`` into a RelativePath.

        Raises:
            ValueError: If the text is absolute.
        """
        if text.startswith(SEPARATOR):
            raise ValueError(f"Not a relative path: {text!r}")
        ascent = 0
        elements: list[str] = []
        for element in split_elements(text):
            if element == ".":
                continue
            if element == "..":
                if elements:
                    elements.pop()
                else:
                    ascent += 1
            else:
                elements.append(element)
        return cls(tuple(elements), ascent)

    def __truediv__(self, other: Any) -> RelativePath:
        if isinstance(other, str):
            return RelativePath(self.elements + (other,), self.ascent)
        if isinstance(other, RelativePath):
            return self + other
        return NotImplemented

    def __add__(self, other: RelativePath) -> RelativePath:
        if not isinstance(other, RelativePath):
            return NotImplemented
        climb = min(other.ascent, len(self.elements))
        kept = self.elements[: len(self.elements) - climb]
        return RelativePath(kept + other.elements, self.ascent + other.ascent - climb)

    def __str__(self) -> str:
        return SEPARATOR.join(("..",) * self.ascent + self.elements) or "."


@dataclass(frozen=True)
class AbsolutePath:
    """A path from the root of a scheme's namespace."""

    elements: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "elements", tuple(check_element(e) for e in self.elements if e)
        )

    @classmethod
    def parse(cls, text: str) -> AbsolutePath:
        return cls(split_elements(text))

    def to_url(self, factory: PathFactory) -> Any:
        """Build the URL for this path with the given scheme factory."""
        return factory.make_path(self.elements)

    def __str__(self) -> str:
        return SEPARATOR + SEPARATOR.join(self.elements)


@runtime_checkable
class PathFactory(Protocol):
    """Minimal contract for building URLs of one scheme from path elements."""

    def make_path(self, elements: Iterable[str]) -> Any:
        """Create a URL from an ordered sequence of elements."""
        ...


class Scheme:
    """Base class for URL schemes.

    Each subclass names its scheme in ``name`` and is a process-wide
    singleton: instantiating it again returns the registered instance.
    Subclasses implement make_path(); root-relative composition with ``/``
    is provided here.
    """

    name: str = ""

    def __new__(cls) -> Scheme:
        if not cls.name:
            raise TypeError(f"{cls.__name__} must define a scheme name")
        with _lock:
            existing = _schemes.get(cls.name)
            if existing is not None:
                if type(existing) is not cls:
                    raise ValueError(
                        f"Scheme {cls.name!r} already registered by "
                        f"{type(existing).__name__}"
                    )
                return existing
            instance = super().__new__(cls)
            _schemes[cls.name] = instance
            return instance

    def make_path(self, elements: Iterable[str]) -> Any:
        raise NotImplementedError(f"{type(self).__name__} does not implement make_path()")

    def __truediv__(self, other: Any) -> Any:
        if isinstance(other, str):
            return self.make_path((check_element(other),))
        if isinstance(other, RelativePath):
            # There is nothing above the root to climb to.
            return self.make_path(other.elements)
        if isinstance(other, AbsolutePath):
            return other.to_url(self)
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


def scheme_for(name: str) -> Scheme:
    """Return the registered scheme called ``name``.

    Raises:
        KeyError: If no such scheme has been instantiated.
    """
    with _lock:
        try:
            return _schemes[name]
        except KeyError:
            raise KeyError(f"Unknown scheme: {name!r}") from None
