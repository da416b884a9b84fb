from __future__ import annotations

from typing import Dict, Iterable, Tuple

from .types import DecoderStatus, FallbackState


_STATE_MARKERS: Dict[FallbackState, Tuple[str, str]] = {
    FallbackState.SELECTED: ("[*]", "selected"),
    FallbackState.AVAILABLE: ("[+]", "available"),
    FallbackState.UNAVAILABLE: ("[x]", "unavailable"),
}


def render_decoder_chain(chain: Iterable[DecoderStatus]) -> str:
    """Render the decoder fallback chain as aligned text, one decoder per line."""
    rows = list(chain)
    if not rows:
        return "No decoder needed"
    width = max(len(d.name) for d in rows)
    lines = []
    for d in rows:
        marker, label = _STATE_MARKERS[d.state]
        lines.append(f"{marker} {d.name.ljust(width)}  {label:<11}  {d.description}")
    return "\n".join(lines)
