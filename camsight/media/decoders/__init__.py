"""Hardware and software decoder selection for camera pipelines."""

from .availability import AvailabilityCache
from .definitions import (
    CATALOGS,
    H264_DECODERS,
    H265_DECODERS,
    MJPEG_DECODERS,
    Codec,
    DecoderCatalog,
    DecoderDef,
    as_element_descriptor,
    catalog_for,
    catalog_for_pixel_format,
    normalize_pixel_format,
)
from .hardware import detect_hw_decoders
from .pipeline import PipelineRequest, caps_for_pixel_format, get_full_pipeline_string
from .registry import (
    DenylistRegistry,
    ElementRegistry,
    GiRegistry,
    GstInspectRegistry,
    StaticRegistry,
    create_registry,
)
from .resolver import FALLBACK_DECODER, DecoderSelection, find_available_decoder, select_decoder

__all__ = [
    "AvailabilityCache",
    "CATALOGS",
    "Codec",
    "DecoderCatalog",
    "DecoderDef",
    "DecoderSelection",
    "DenylistRegistry",
    "ElementRegistry",
    "FALLBACK_DECODER",
    "GiRegistry",
    "GstInspectRegistry",
    "H264_DECODERS",
    "H265_DECODERS",
    "MJPEG_DECODERS",
    "PipelineRequest",
    "StaticRegistry",
    "as_element_descriptor",
    "caps_for_pixel_format",
    "catalog_for",
    "catalog_for_pixel_format",
    "create_registry",
    "detect_hw_decoders",
    "find_available_decoder",
    "get_full_pipeline_string",
    "normalize_pixel_format",
    "select_decoder",
]
