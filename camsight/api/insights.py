from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..context import AppContext, ContextDep
from ..insights.chain import build_decoder_chain
from ..insights.store import chain_payload, insights_payload
from ..logging_config import log


router = APIRouter()


class PipelineReport(BaseModel):
    pixel_format: Optional[str] = None
    pipeline: Optional[str] = None
    source: str = ""
    resolution: str = ""
    framerate: str = ""
    gstreamer_output: Optional[str] = None
    wgpu_processing: str = ""


class MetricsUpdate(BaseModel):
    metrics: Dict[str, float]


@router.get("/api/insights")
def get_insights(ctx: AppContext = ContextDep) -> Any:
    """Return the current pipeline, format chain and performance metrics."""
    return insights_payload(ctx.insights.snapshot())


@router.get("/api/insights/chain")
def decoder_chain(
    pixel_format: Optional[str] = None,
    pipeline: Optional[str] = None,
    ctx: AppContext = ContextDep,
) -> Any:
    """Return the decoder fallback chain for an ad-hoc format and pipeline string."""
    chain = build_decoder_chain(pixel_format, pipeline, ctx.availability)
    return {
        "pixel_format": pixel_format,
        "decoder_chain": chain_payload(chain),
    }


@router.post("/api/insights/pipeline")
def report_pipeline(req: PipelineReport, ctx: AppContext = ContextDep) -> Any:
    """Record a rebuilt camera pipeline and return the refreshed insights."""
    state = ctx.insights.update_pipeline(
        req.pixel_format,
        req.pipeline,
        source=req.source,
        resolution=req.resolution,
        framerate=req.framerate,
        gstreamer_output=req.gstreamer_output,
        wgpu_processing=req.wgpu_processing,
    )
    return insights_payload(state)


@router.post("/api/insights/metrics")
def report_metrics(req: MetricsUpdate, ctx: AppContext = ContextDep) -> Any:
    """Update performance metrics reported by the frame path."""
    try:
        state = ctx.insights.update_metrics(**req.metrics)
    except ValueError as e:
        log.warning("Rejected metrics update: %s", e)
        raise HTTPException(400, detail=str(e))
    return insights_payload(state)


@router.delete("/api/insights")
def reset_insights(ctx: AppContext = ContextDep) -> Any:
    """Clear the recorded pipeline and metrics."""
    ctx.insights.reset()
    return {"ok": True}
