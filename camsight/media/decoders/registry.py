"""GStreamer element registry backends.

A registry answers one question: is the named element installed on this
system? Every backend must be callable from any thread and must report
lookup failures as "not present" rather than raising.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import threading
from typing import Iterable, Optional, Protocol

from ... import config
from ...logging_config import decoder_log

try:
    import gi

    gi.require_version("Gst", "1.0")
    from gi.repository import Gst  # type: ignore
except (ImportError, ValueError) as e:  # pragma: no cover
    Gst = None  # type: ignore
    _gst_import_error: Optional[Exception] = e
else:
    _gst_import_error = None


class ElementRegistry(Protocol):
    def has_element(self, name: str) -> bool:
        ...


class GstInspectRegistry:
    """Element lookup through the `gst-inspect-1.0` command line tool."""

    name = "inspect"

    def __init__(self, binary: Optional[str] = None, timeout_s: float = 3.0) -> None:
        self._configured_binary = str(binary or "").strip() or None
        self._timeout_s = max(0.5, float(timeout_s))
        self._lock = threading.Lock()
        self._binary: Optional[str] = None
        self._resolved = False

    def binary(self) -> Optional[str]:
        """Resolve gst-inspect binary path from the configured override or PATH."""
        with self._lock:
            if self._resolved:
                return self._binary
            path = None
            forced = self._configured_binary
            if forced and os.path.isfile(forced):
                path = forced
            elif forced:
                decoder_log.warning("Configured gst-inspect binary is not a file: %s", forced)
            if not path:
                path = shutil.which("gst-inspect-1.0")
            if not path:
                decoder_log.warning("gst-inspect-1.0 not found; every GStreamer element will be reported missing")
            self._binary = path
            self._resolved = True
            return path

    def has_element(self, name: str) -> bool:
        """Return True when gst-inspect finds the element (exit code 0)."""
        element = str(name or "").strip()
        if not element:
            return False
        binary = self.binary()
        if not binary:
            return False
        try:
            proc = subprocess.run(
                [binary, element],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=self._timeout_s,
                check=False,
            )
        except subprocess.TimeoutExpired:
            decoder_log.warning("gst-inspect timed out for element %s after %.1fs", element, self._timeout_s)
            return False
        except OSError as e:
            decoder_log.warning("gst-inspect failed for element %s: %s", element, e)
            return False
        return int(proc.returncode) == 0


class GiRegistry:
    """In-process element lookup through PyGObject (`Gst.ElementFactory.find`)."""

    name = "gi"

    def __init__(self) -> None:
        self._init_lock = threading.Lock()
        self._initialized = False

    @staticmethod
    def supported() -> bool:
        return Gst is not None

    def _ensure_init(self) -> bool:
        if Gst is None:
            return False
        with self._init_lock:
            if not self._initialized:
                Gst.init(None)
                self._initialized = True
        return True

    def has_element(self, name: str) -> bool:
        element = str(name or "").strip()
        if not element:
            return False
        try:
            if not self._ensure_init():
                return False
            return Gst.ElementFactory.find(element) is not None
        except Exception as e:
            decoder_log.warning("GStreamer registry lookup failed for %s: %s", element, e)
            return False


class StaticRegistry:
    """Fixed element set, for offline inspection and tests."""

    name = "static"

    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names = frozenset(str(n).strip() for n in names if str(n or "").strip())

    def has_element(self, name: str) -> bool:
        return str(name or "").strip() in self._names


class DenylistRegistry:
    """Report denied elements as missing and defer everything else to the wrapped registry."""

    def __init__(self, inner: ElementRegistry, denied: Iterable[str]) -> None:
        self._inner = inner
        self._denied = frozenset(str(n).strip() for n in denied if str(n or "").strip())
        self.name = getattr(inner, "name", "custom")

    @property
    def denied(self) -> frozenset:
        return self._denied

    def has_element(self, name: str) -> bool:
        element = str(name or "").strip()
        if element in self._denied:
            decoder_log.debug("Element %s masked by decoder denylist", element)
            return False
        return self._inner.has_element(element)


def create_registry(backend: Optional[str] = None) -> ElementRegistry:
    """Build the element registry selected by configuration."""
    selected = str(backend or config.REGISTRY_BACKEND or "auto").strip().lower()
    registry: ElementRegistry
    if selected == "static":
        registry = StaticRegistry(config.STATIC_ELEMENTS)
    elif selected == "gi" and GiRegistry.supported():
        registry = GiRegistry()
    elif selected == "auto" and GiRegistry.supported():
        registry = GiRegistry()
    else:
        if selected == "gi":
            decoder_log.warning("PyGObject GStreamer bindings unavailable (%s); using gst-inspect", _gst_import_error)
        registry = GstInspectRegistry(config.GST_INSPECT_BIN or None, config.GST_INSPECT_TIMEOUT_S)

    decoder_log.info("Element registry backend: %s", getattr(registry, "name", selected))
    if config.DECODER_DENYLIST:
        decoder_log.info("Decoder denylist: %s", ", ".join(config.DECODER_DENYLIST))
        return DenylistRegistry(registry, config.DECODER_DENYLIST)
    return registry
