"""Shared decoder definitions for GStreamer pipelines.

Single source of truth for decoder preferences, used both by pipeline
construction and by the insights diagnostics.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple


@dataclass(frozen=True)
class DecoderDef:
    """Decoder element with the metadata needed for pipeline construction and display."""

    name: str
    description: str
    props: Optional[str]
    is_hardware: bool

    @classmethod
    def sw(cls, name: str, description: str, props: Optional[str] = None) -> "DecoderDef":
        return cls(name=name, description=description, props=props, is_hardware=False)

    @classmethod
    def hw(cls, name: str, description: str, props: Optional[str] = None) -> "DecoderDef":
        return cls(name=name, description=description, props=props, is_hardware=True)

    @property
    def kind(self) -> str:
        return "hardware" if self.is_hardware else "software"

    def as_gst_element(self) -> str:
        """Format as GStreamer element string (e.g. "jpegdec max-errors=-1")."""
        if self.props:
            return f"{self.name} {self.props}"
        return self.name


def as_element_descriptor(definition: DecoderDef) -> str:
    """Render a decoder definition into the element string consumed by pipeline builders."""
    return definition.as_gst_element()


class Codec(str, Enum):
    MJPEG = "mjpeg"
    H264 = "h264"
    H265 = "h265"


@dataclass(frozen=True)
class DecoderCatalog:
    """Preference-ordered decoder list for one codec."""

    codec: Codec
    decoders: Tuple[DecoderDef, ...]

    def __iter__(self) -> Iterator[DecoderDef]:
        return iter(self.decoders)

    def __len__(self) -> int:
        return len(self.decoders)

    def __getitem__(self, index: int) -> DecoderDef:
        return self.decoders[index]

    def names(self) -> Tuple[str, ...]:
        return tuple(d.name for d in self.decoders)


# CPU decoders first: hardware MJPEG decoding often mishandles the
# non-standard JPEG streams many webcams emit.
MJPEG_DECODERS = DecoderCatalog(
    codec=Codec.MJPEG,
    decoders=(
        DecoderDef.sw("jpegdec", "GStreamer JPEG (Software)", "max-errors=-1"),
        DecoderDef.sw("avdec_mjpeg", "FFmpeg MJPEG (Software)"),
        DecoderDef.hw("vaapijpegdec", "VA-API JPEG (Intel/AMD HW)"),
        DecoderDef.hw("nvjpegdec", "NVIDIA JPEG (NVDEC)"),
        DecoderDef.hw("v4l2jpegdec", "V4L2 JPEG (Hardware)"),
    ),
)

# Hardware first: H.264 decoding is expensive on the CPU.
H264_DECODERS = DecoderCatalog(
    codec=Codec.H264,
    decoders=(
        DecoderDef.hw("vah264dec", "VA-API H.264 (Modern HW)"),
        DecoderDef.hw("vaapih264dec", "VA-API H.264 (Legacy HW)"),
        DecoderDef.hw("nvh264dec", "NVIDIA H.264 (NVDEC)"),
        DecoderDef.hw("d3d11h264dec", "Direct3D 11 H.264 (HW)"),
        DecoderDef.hw("v4l2h264dec", "V4L2 H.264 (Hardware)"),
        DecoderDef.sw("avdec_h264", "FFmpeg H.264 (SW, multi-threaded)", "max-threads=0"),
        DecoderDef.sw("openh264dec", "OpenH264 (SW, single-threaded)"),
    ),
)

# Hardware first: H.265 is even more expensive than H.264.
H265_DECODERS = DecoderCatalog(
    codec=Codec.H265,
    decoders=(
        DecoderDef.hw("vah265dec", "VA-API H.265 (Modern HW)"),
        DecoderDef.hw("vaapih265dec", "VA-API H.265 (Legacy HW)"),
        DecoderDef.hw("nvh265dec", "NVIDIA H.265 (NVDEC)"),
        DecoderDef.hw("d3d11h265dec", "Direct3D 11 H.265 (HW)"),
        DecoderDef.hw("v4l2h265dec", "V4L2 H.265 (Hardware)"),
        DecoderDef.sw("avdec_h265", "FFmpeg H.265 (SW, multi-threaded)", "max-threads=0"),
    ),
)

CATALOGS: Mapping[Codec, DecoderCatalog] = MappingProxyType(
    {
        Codec.MJPEG: MJPEG_DECODERS,
        Codec.H264: H264_DECODERS,
        Codec.H265: H265_DECODERS,
    }
)

# Case-sensitive: these are V4L2/PipeWire fourcc-style names as reported by the camera.
_PIXEL_FORMAT_ALIASES: Mapping[str, Codec] = MappingProxyType(
    {
        "MJPG": Codec.MJPEG,
        "MJPEG": Codec.MJPEG,
        "H264": Codec.H264,
        "H265": Codec.H265,
        "HEVC": Codec.H265,
    }
)


def normalize_pixel_format(pixel_format: Optional[str]) -> Optional[Codec]:
    """Map a camera pixel format to its codec, or None for raw/unknown formats."""
    if pixel_format is None:
        return None
    return _PIXEL_FORMAT_ALIASES.get(pixel_format)


def catalog_for(codec: Codec) -> DecoderCatalog:
    """Return the decoder catalog for a codec."""
    return CATALOGS[Codec(codec)]


def catalog_for_pixel_format(pixel_format: Optional[str]) -> Optional[DecoderCatalog]:
    """Return the decoder catalog for a camera pixel format, or None when no decoder applies."""
    codec = normalize_pixel_format(pixel_format)
    if codec is None:
        return None
    return CATALOGS[codec]
