"""Context variables for capability selection.

Holds the capability registry in scope for the current context so that
call sites which stream URLs (copy, move, open) resolve readers and
writers without the URL types knowing where they come from.
"""

import contextvars
from contextlib import contextmanager
from typing import Any, Iterator

# Context variable holding the capability registry in scope (None = default)
current_registry: contextvars.ContextVar[Any] = contextvars.ContextVar(
    "fileurl_current_registry", default=None
)


@contextmanager
def use_capabilities(registry: Any) -> Iterator[Any]:
    """Make ``registry`` the capability registry for the enclosed block.

    Example::

        registry = default_capabilities().copy()
        registry.register_reader(FileUrl, AuditingReader())
        with use_capabilities(registry):
            src.copy_to(dest)  # streams through AuditingReader
    """
    token = current_registry.set(registry)
    try:
        yield registry
    finally:
        current_registry.reset(token)
