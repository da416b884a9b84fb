from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...logging_config import log
from .availability import AvailabilityCache
from .definitions import Codec, DecoderCatalog, DecoderDef, as_element_descriptor


# Auto-negotiating last resort when no catalog entry is installed.
FALLBACK_DECODER = "decodebin"


@dataclass(frozen=True)
class DecoderSelection:
    codec: Codec
    definition: DecoderDef
    descriptor: str

    @property
    def kind(self) -> str:
        return self.definition.kind


def select_decoder(catalog: DecoderCatalog, cache: AvailabilityCache) -> Optional[DecoderSelection]:
    """Return the first available decoder in catalog order, or None."""
    availability = cache.availability_for(catalog)
    for decoder, available in zip(catalog, availability):
        if available:
            return DecoderSelection(
                codec=catalog.codec,
                definition=decoder,
                descriptor=as_element_descriptor(decoder),
            )
    return None


def find_available_decoder(catalog: DecoderCatalog, cache: AvailabilityCache) -> str:
    """Return the GStreamer element string for the first available decoder.

    Falls back to "decodebin" when nothing in the catalog is installed; that
    is a degraded outcome, not an error.
    """
    selection = select_decoder(catalog, cache)
    if selection is not None:
        log.info(
            "Using %s decoder %s (%s)",
            selection.kind,
            selection.definition.name,
            selection.definition.description,
        )
        return selection.descriptor

    log.warning("No specific %s decoder found, using %s", catalog.codec.value, FALLBACK_DECODER)
    return FALLBACK_DECODER
