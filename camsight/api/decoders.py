from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..context import AppContext, ContextDep
from ..insights.chain import build_decoder_chain
from ..insights.store import chain_payload
from ..media.decoders.definitions import Codec, DecoderCatalog, normalize_pixel_format
from ..media.decoders.hardware import detect_hw_decoders
from ..media.decoders.pipeline import PipelineRequest, get_full_pipeline_string
from ..media.decoders.resolver import FALLBACK_DECODER, find_available_decoder


router = APIRouter()


def _resolve_codec(raw: str) -> Codec:
    """Accept codec ids ("h264") and camera pixel format aliases ("MJPG", "HEVC")."""
    value = str(raw or "").strip()
    try:
        return Codec(value.lower())
    except ValueError:
        pass
    codec = normalize_pixel_format(value.upper())
    if codec is None:
        raise HTTPException(400, detail=f"unsupported_codec:{value}")
    return codec


def _catalog_payload(ctx: AppContext, catalog: DecoderCatalog) -> Dict[str, Any]:
    availability = ctx.availability.availability_for(catalog)
    decoders = []
    for decoder, available in zip(catalog, availability):
        decoders.append(
            {
                "name": decoder.name,
                "description": decoder.description,
                "props": decoder.props,
                "kind": decoder.kind,
                "descriptor": decoder.as_gst_element(),
                "available": bool(available),
            }
        )
    return {
        "codec": catalog.codec.value,
        "decoders": decoders,
        "element": find_available_decoder(catalog, ctx.availability),
    }


@router.get("/api/decoders")
def list_decoders(ctx: AppContext = ContextDep) -> Any:
    """Return every decoder catalog with availability and the element the resolver would pick."""
    return {
        "registry": getattr(ctx.registry, "name", "custom"),
        "fallback": FALLBACK_DECODER,
        "codecs": {
            codec.value: _catalog_payload(ctx, ctx.availability.catalog(codec)) for codec in ctx.availability.codecs()
        },
    }


@router.get("/api/decoders/hardware")
def hardware_decoders(ctx: AppContext = ContextDep) -> Any:
    """Return installed hardware decoders across all codecs."""
    found = detect_hw_decoders(ctx.availability)
    return {
        "count": len(found),
        "decoders": [{"name": d.name, "description": d.description} for d in found],
    }


@router.get("/api/decoders/{codec}")
def codec_decoders(codec: str, ctx: AppContext = ContextDep) -> Any:
    """Return one decoder catalog with availability."""
    resolved = _resolve_codec(codec)
    catalog = ctx.availability.catalog(resolved)
    if catalog is None:
        raise HTTPException(404, detail=f"codec_not_configured:{resolved.value}")
    return _catalog_payload(ctx, catalog)


class PipelineBuildRequest(BaseModel):
    pixel_format: str
    width: Optional[int] = None
    height: Optional[int] = None
    framerate: Optional[str] = None
    source_element: str = "pipewiresrc"
    source_props: str = ""
    output_format: str = "RGBA"


@router.post("/api/pipeline")
def build_pipeline(req: PipelineBuildRequest, ctx: AppContext = ContextDep) -> Any:
    """Build a pipeline description for a camera and report its decoder chain."""
    pixel_format = str(req.pixel_format or "").strip()
    if not pixel_format:
        raise HTTPException(400, detail="pixel_format_required")
    request = PipelineRequest(
        pixel_format=pixel_format,
        width=req.width,
        height=req.height,
        framerate=req.framerate,
        source_element=str(req.source_element or "pipewiresrc").strip() or "pipewiresrc",
        source_props=str(req.source_props or ""),
        output_format=str(req.output_format or "RGBA"),
    )
    pipeline = get_full_pipeline_string(request, ctx.availability)
    return {
        "pipeline": pipeline,
        "decoder_chain": chain_payload(build_decoder_chain(pixel_format, pipeline, ctx.availability)),
    }
