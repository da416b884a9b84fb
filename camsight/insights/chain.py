from __future__ import annotations

from typing import List, Optional, Sequence

from ..media.decoders.availability import AvailabilityCache
from ..media.decoders.definitions import DecoderCatalog, DecoderDef, normalize_pixel_format
from .types import DecoderStatus, FallbackState


def find_active_decoder(catalog: DecoderCatalog, pipeline: Optional[str]) -> Optional[DecoderDef]:
    """Return the first catalog entry whose element name appears in the pipeline string.

    A name counts when followed by a space, by "!" or when it ends the
    string. This is substring matching, so a name that is a suffix of
    another element's name with the same delimiter can still match.
    """
    if pipeline is None:
        return None
    for decoder in catalog:
        name = decoder.name
        if f"{name} " in pipeline or f"{name}!" in pipeline or pipeline.endswith(name):
            return decoder
    return None


def build_chain_from_defs(
    catalog: DecoderCatalog,
    availability: Sequence[bool],
    pipeline: Optional[str],
) -> List[DecoderStatus]:
    """Build the decoder status chain for one catalog."""
    active = find_active_decoder(catalog, pipeline)
    chain: List[DecoderStatus] = []
    for i, decoder in enumerate(catalog):
        if active is not None and decoder.name == active.name:
            state = FallbackState.SELECTED
        elif i < len(availability) and availability[i]:
            state = FallbackState.AVAILABLE
        else:
            state = FallbackState.UNAVAILABLE
        chain.append(DecoderStatus(name=decoder.name, description=decoder.description, state=state))
    return chain


def build_decoder_chain(
    pixel_format: Optional[str],
    pipeline: Optional[str],
    cache: AvailabilityCache,
) -> List[DecoderStatus]:
    """Build the decoder fallback chain for a camera's native pixel format.

    Raw and unknown formats need no decoder and yield an empty chain, as
    does a codec the cache has no catalog for. Availability is probed on
    first use for the codec and cached.
    """
    codec = normalize_pixel_format(pixel_format)
    if codec is None:
        return []
    catalog = cache.catalog(codec)
    if catalog is None:
        return []
    availability = cache.availability_for(catalog)
    return build_chain_from_defs(catalog, availability, pipeline)
