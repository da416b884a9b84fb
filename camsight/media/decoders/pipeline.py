from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from ...logging_config import log
from .availability import AvailabilityCache
from .definitions import Codec, DecoderCatalog, normalize_pixel_format
from .resolver import find_available_decoder


# V4L2 fourcc -> GStreamer raw video format name.
_RAW_FORMATS = {
    "YUYV": "YUY2",
    "YUY2": "YUY2",
    "UYVY": "UYVY",
    "NV12": "NV12",
    "NV21": "NV21",
    "YU12": "I420",
    "I420": "I420",
    "YV12": "YV12",
    "RGB3": "RGB",
    "BGR3": "BGR",
    "GREY": "GRAY8",
}

_COMPRESSED_CAPS = {
    Codec.MJPEG: "image/jpeg",
    Codec.H264: "video/x-h264",
    Codec.H265: "video/x-h265",
}

_PARSERS = {
    Codec.H264: "h264parse",
    Codec.H265: "h265parse",
}


@dataclass
class PipelineRequest:
    pixel_format: str
    width: Optional[int] = None
    height: Optional[int] = None
    framerate: Optional[str] = None
    source_element: str = "pipewiresrc"
    source_props: str = ""
    output_format: str = "RGBA"


def _framerate_fraction(raw: Optional[str]) -> Optional[str]:
    """Normalize "30", "30/1" or "29.97" into a GStreamer fraction, None when unusable."""
    txt = str(raw or "").strip()
    if not txt:
        return None
    if "/" in txt:
        num, _, den = txt.partition("/")
        if num.strip().isdigit() and den.strip().isdigit() and int(den) > 0:
            return f"{int(num)}/{int(den)}"
        return None
    try:
        value = float(txt)
    except ValueError:
        return None
    if value <= 0:
        return None
    if value.is_integer():
        return f"{int(value)}/1"
    return f"{int(round(value * 1000))}/1000"


def caps_for_pixel_format(pixel_format: str) -> str:
    """Return the media type caps a camera delivers for its native pixel format."""
    codec = normalize_pixel_format(pixel_format)
    if codec is not None:
        return _COMPRESSED_CAPS[codec]
    fmt = str(pixel_format or "").strip()
    return f"video/x-raw,format={_RAW_FORMATS.get(fmt, fmt)}"


def _source_caps(request: PipelineRequest) -> str:
    parts = [caps_for_pixel_format(request.pixel_format)]
    if request.width and int(request.width) > 0:
        parts.append(f"width={int(request.width)}")
    if request.height and int(request.height) > 0:
        parts.append(f"height={int(request.height)}")
    fraction = _framerate_fraction(request.framerate)
    if fraction:
        parts.append(f"framerate={fraction}")
    return ",".join(parts)


def get_full_pipeline_string(request: PipelineRequest, cache: AvailabilityCache) -> str:
    """Build the gst-launch style pipeline description for a camera stream.

    Compressed formats get the best installed decoder (with a parser for
    H.264/H.265); raw formats go straight to videoconvert.
    """
    source = str(request.source_element or "pipewiresrc").strip()
    if request.source_props:
        source = f"{source} {str(request.source_props).strip()}"

    elements: List[str] = [source, _source_caps(request)]
    codec = normalize_pixel_format(request.pixel_format)
    if codec is not None:
        parser = _PARSERS.get(codec)
        if parser:
            elements.append(parser)
        catalog = cache.catalog(codec) or DecoderCatalog(codec, ())
        elements.append(find_available_decoder(catalog, cache))

    out_fmt = str(request.output_format or "RGBA").strip() or "RGBA"
    elements += [
        "videoconvert",
        f"video/x-raw,format={out_fmt}",
        "appsink name=sink drop=true max-buffers=2",
    ]
    pipeline = " ! ".join(elements)
    log.debug("Built pipeline for %s: %s", request.pixel_format, pipeline)
    return pipeline
