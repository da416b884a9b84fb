from __future__ import annotations

import threading
from typing import Optional

from fastapi import Depends

from .insights.store import InsightsStore
from .logging_config import log
from .media.decoders.availability import AvailabilityCache
from .media.decoders.registry import ElementRegistry, create_registry


class AppContext:
    """Process-wide collaborators shared by request handlers and the CLI.

    Owns the one availability cache; everything that needs decoder presence
    receives it from here instead of probing on its own.
    """

    def __init__(self, registry: Optional[ElementRegistry] = None) -> None:
        self.registry: ElementRegistry = registry if registry is not None else create_registry()
        self.availability = AvailabilityCache(self.registry)
        self.insights = InsightsStore(self.availability)


_context_lock = threading.Lock()
_context: Optional[AppContext] = None


def get_context() -> AppContext:
    """Return the shared application context, creating it on first use."""
    global _context
    with _context_lock:
        if _context is None:
            _context = AppContext()
            log.debug("Application context initialized")
        return _context


def set_context(ctx: Optional[AppContext]) -> None:
    """Replace the shared application context (None drops it)."""
    global _context
    with _context_lock:
        _context = ctx


ContextDep = Depends(get_context)
