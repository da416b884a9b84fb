from __future__ import annotations

import copy
import math
import threading
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence

from ..logging_config import log
from ..media.decoders.availability import AvailabilityCache
from .chain import build_decoder_chain
from .types import METRIC_FIELDS, DecoderStatus, FallbackState, FormatChain, InsightsState


class InsightsStore:
    """Thread-safe holder of the insights state for the active camera pipeline."""

    def __init__(self, cache: AvailabilityCache) -> None:
        self._cache = cache
        self._lock = threading.RLock()
        self._state = InsightsState()

    def update_pipeline(
        self,
        pixel_format: Optional[str],
        pipeline: Optional[str],
        *,
        source: str = "",
        resolution: str = "",
        framerate: str = "",
        gstreamer_output: Optional[str] = None,
        wgpu_processing: str = "",
    ) -> InsightsState:
        """Record a rebuilt pipeline and recompute its decoder chain."""
        chain = build_decoder_chain(pixel_format, pipeline, self._cache)
        with self._lock:
            self._state.full_pipeline_string = pipeline
            self._state.decoder_chain = chain
            self._state.format_chain = FormatChain(
                source=str(source or ""),
                resolution=str(resolution or ""),
                framerate=str(framerate or ""),
                native_format=str(pixel_format or ""),
                gstreamer_output=gstreamer_output,
                wgpu_processing=str(wgpu_processing or ""),
            )
            selected = next((d.name for d in chain if d.state is FallbackState.SELECTED), None)
            log.info(
                "Pipeline updated: format=%s decoder=%s chain=%d",
                pixel_format or "-",
                selected or "-",
                len(chain),
            )
            return copy.deepcopy(self._state)

    def update_metrics(self, **values: Any) -> InsightsState:
        """Update performance metrics; unknown or non-numeric values raise ValueError.

        Every value is validated before any is written, so a rejected update
        leaves the state untouched.
        """
        unknown = sorted(k for k in values if k not in METRIC_FIELDS)
        if unknown:
            raise ValueError(f"unknown_metrics:{','.join(unknown)}")
        coerced: Dict[str, Any] = {}
        for key, value in values.items():
            if value is None:
                continue
            try:
                number = float(value)
                if not math.isfinite(number):
                    raise ValueError(value)
                coerced[key] = max(0.0, number) if key == "copy_bandwidth_mbps" else max(0, int(number))
            except (TypeError, ValueError, OverflowError):
                raise ValueError(f"invalid_metric:{key}") from None
        with self._lock:
            for key, value in coerced.items():
                setattr(self._state, key, value)
            return copy.deepcopy(self._state)

    def snapshot(self) -> InsightsState:
        with self._lock:
            return copy.deepcopy(self._state)

    def reset(self) -> None:
        with self._lock:
            self._state = InsightsState()


def chain_payload(chain: Sequence[DecoderStatus]) -> List[Dict[str, Any]]:
    return [{"name": d.name, "description": d.description, "state": d.state.value} for d in chain]


def insights_payload(state: InsightsState) -> Dict[str, Any]:
    """Return a JSON-ready dict for an insights state."""
    out = asdict(state)
    out["decoder_chain"] = chain_payload(state.decoder_chain)
    return out
