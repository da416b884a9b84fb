from __future__ import annotations

import threading
from typing import Dict, Iterable, Mapping, Optional, Tuple

from ...logging_config import decoder_log
from .definitions import CATALOGS, Codec, DecoderCatalog
from .registry import ElementRegistry


Availability = Tuple[bool, ...]


class AvailabilityCache:
    """Per-codec decoder presence, probed once and kept for the process lifetime.

    Each codec's vector is index-aligned with its catalog. The first caller
    for a codec runs the registry queries while concurrent callers for the
    same codec wait on a per-codec lock and then read the stored result.
    There is no invalidation: decoders installed or removed after the first
    probe are not noticed until restart.
    """

    def __init__(
        self,
        registry: ElementRegistry,
        catalogs: Optional[Mapping[Codec, DecoderCatalog]] = None,
    ) -> None:
        self._registry = registry
        self._catalogs: Dict[Codec, DecoderCatalog] = dict(CATALOGS if catalogs is None else catalogs)
        self._lock = threading.Lock()
        self._codec_locks: Dict[Codec, threading.Lock] = {}
        self._values: Dict[Codec, Availability] = {}
        self._element_lock = threading.Lock()
        self._elements: Dict[str, bool] = {}

    @property
    def registry(self) -> ElementRegistry:
        return self._registry

    def catalog(self, codec: Codec) -> Optional[DecoderCatalog]:
        """Return the catalog probed for a codec, or None when it is not configured."""
        return self._catalogs.get(Codec(codec))

    def codecs(self) -> Tuple[Codec, ...]:
        return tuple(self._catalogs)

    def _codec_lock(self, codec: Codec) -> threading.Lock:
        with self._lock:
            lock = self._codec_locks.get(codec)
            if lock is None:
                lock = threading.Lock()
                self._codec_locks[codec] = lock
            return lock

    def _probe(self, name: str) -> bool:
        try:
            return bool(self._registry.has_element(name))
        except Exception as e:
            decoder_log.warning("Decoder probe failed for %s, treating as unavailable: %s", name, e)
            return False

    def _probe_element(self, name: str) -> bool:
        with self._element_lock:
            cached = self._elements.get(name)
            if cached is None:
                cached = self._probe(name)
                self._elements[name] = cached
            return cached

    def get_availability(self, codec: Codec) -> Availability:
        """Return the presence vector for a codec's catalog, probing on first use.

        A codec without a configured catalog has nothing to probe and yields
        an empty vector.
        """
        codec = Codec(codec)
        cached = self._values.get(codec)
        if cached is not None:
            return cached
        if codec not in self._catalogs:
            return ()

        with self._codec_lock(codec):
            cached = self._values.get(codec)
            if cached is not None:
                return cached
            catalog = self._catalogs[codec]
            values = tuple(self._probe(d.name) for d in catalog)
            self._values[codec] = values
            decoder_log.debug(
                "Decoder availability for %s: %s",
                codec.value,
                ", ".join(f"{d.name}={'yes' if ok else 'no'}" for d, ok in zip(catalog, values)),
            )
            return values

    def availability_for(self, catalog: DecoderCatalog) -> Availability:
        """Return a presence vector aligned with the given catalog.

        The configured catalog for the codec reuses the per-codec vector.
        Any other catalog is probed element by element, memoized by name.
        """
        if self._catalogs.get(catalog.codec) == catalog:
            return self.get_availability(catalog.codec)
        return tuple(self._probe_element(d.name) for d in catalog)

    def is_cached(self, codec: Codec) -> bool:
        return Codec(codec) in self._values

    def snapshot(self) -> Dict[Codec, Availability]:
        """Return the vectors computed so far without triggering any probe."""
        return dict(self._values)

    def warm(self, codecs: Optional[Iterable[Codec]] = None) -> None:
        """Populate availability up front instead of on first request."""
        for codec in (self.codecs() if codecs is None else codecs):
            self.get_availability(codec)
