from __future__ import annotations

from typing import List

from ...logging_config import log
from .availability import AvailabilityCache
from .definitions import DecoderDef


def detect_hw_decoders(cache: AvailabilityCache) -> List[DecoderDef]:
    """Return installed hardware decoders across all codecs, in catalog order."""
    seen: set[str] = set()
    out: List[DecoderDef] = []
    for codec in cache.codecs():
        catalog = cache.catalog(codec)
        for decoder, available in zip(catalog, cache.availability_for(catalog)):
            if not decoder.is_hardware or not available or decoder.name in seen:
                continue
            seen.add(decoder.name)
            out.append(decoder)

    if out:
        log.info("Hardware decoders available: %s", ", ".join(d.name for d in out))
    else:
        log.info("No hardware decoders available; software decoding only")
    return out
