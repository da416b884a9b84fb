"""Diagnostic information about the camera pipeline, decoders and performance."""

from .chain import build_chain_from_defs, build_decoder_chain, find_active_decoder
from .render import render_decoder_chain
from .store import InsightsStore, chain_payload, insights_payload
from .types import DecoderStatus, FallbackState, FormatChain, InsightsState

__all__ = [
    "DecoderStatus",
    "FallbackState",
    "FormatChain",
    "InsightsState",
    "InsightsStore",
    "build_chain_from_defs",
    "build_decoder_chain",
    "find_active_decoder",
    "chain_payload",
    "insights_payload",
    "render_decoder_chain",
]
