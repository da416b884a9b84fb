"""Types for the insights diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class FallbackState(str, Enum):
    """State of a decoder in the fallback chain."""

    SELECTED = "selected"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class DecoderStatus:
    """Status of one decoder in the fallback chain."""

    name: str
    description: str
    state: FallbackState


@dataclass
class FormatChain:
    """Format path from camera to display."""

    # e.g. "V4L2 via PipeWire", "libcamera via PipeWire"
    source: str = ""
    resolution: str = ""
    framerate: str = ""
    # camera native format, e.g. "MJPG", "YUYV", "NV12"
    native_format: str = ""
    # format after GStreamer decoding, when a decoder is involved
    gstreamer_output: Optional[str] = None
    # GPU conversion step, e.g. "I420 -> RGBA", "Passthrough"
    wgpu_processing: str = ""


@dataclass
class InsightsState:
    """Pipeline, format and performance diagnostics for the active camera."""

    full_pipeline_string: Optional[str] = None
    decoder_chain: List[DecoderStatus] = field(default_factory=list)
    format_chain: FormatChain = field(default_factory=FormatChain)

    frame_latency_us: int = 0
    dropped_frames: int = 0
    frame_size_decoded: int = 0
    gstreamer_decode_time_us: int = 0
    gpu_conversion_time_us: int = 0
    copy_time_us: int = 0
    copy_bandwidth_mbps: float = 0.0


METRIC_FIELDS = (
    "frame_latency_us",
    "dropped_frames",
    "frame_size_decoded",
    "gstreamer_decode_time_us",
    "gpu_conversion_time_us",
    "copy_time_us",
    "copy_bandwidth_mbps",
)
