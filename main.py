import argparse
import sys
from typing import List, Optional

from camsight import config
from camsight.context import get_context
from camsight.insights import build_decoder_chain, render_decoder_chain
from camsight.media.decoders import (
    FALLBACK_DECODER,
    PipelineRequest,
    detect_hw_decoders,
    find_available_decoder,
    get_full_pipeline_string,
)


def _print_decoders() -> int:
    """Print every catalog with availability and the element the resolver picks."""
    ctx = get_context()
    for codec in ctx.availability.codecs():
        catalog = ctx.availability.catalog(codec)
        availability = ctx.availability.get_availability(codec)
        print(f"{codec.value}:")
        for decoder, ok in zip(catalog, availability):
            mark = "+" if ok else "-"
            print(f"  {mark} {decoder.name:<14} {decoder.kind:<8} {decoder.description}")
        element = find_available_decoder(catalog, ctx.availability)
        suffix = " (fallback)" if element == FALLBACK_DECODER else ""
        print(f"  -> {element}{suffix}")
    hw = detect_hw_decoders(ctx.availability)
    print(f"hardware: {', '.join(d.name for d in hw) if hw else 'none'}")
    return 0


def _print_chain(pixel_format: str, pipeline: Optional[str]) -> int:
    ctx = get_context()
    chain = build_decoder_chain(pixel_format, pipeline, ctx.availability)
    print(render_decoder_chain(chain))
    return 0


def _print_pipeline(args: argparse.Namespace) -> int:
    ctx = get_context()
    request = PipelineRequest(
        pixel_format=args.pixel_format,
        width=args.width,
        height=args.height,
        framerate=args.framerate,
        source_element=args.source,
    )
    pipeline = get_full_pipeline_string(request, ctx.availability)
    print(pipeline)
    if args.chain:
        print(render_decoder_chain(build_decoder_chain(args.pixel_format, pipeline, ctx.availability)))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="camsight", description="Camera decoder selection and pipeline insights")
    parser.add_argument("--version", action="version", version=config.VERSION)
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("serve", help="run the diagnostics HTTP server (default)")
    sub.add_parser("decoders", help="list decoder catalogs and availability")

    chain = sub.add_parser("chain", help="show the decoder fallback chain for a pixel format")
    chain.add_argument("pixel_format", help='camera native format, e.g. "MJPG", "H264", "YUYV"')
    chain.add_argument("pipeline", nargs="?", default=None, help="live pipeline description to inspect")

    pipe = sub.add_parser("pipeline", help="build a pipeline description for a camera format")
    pipe.add_argument("pixel_format")
    pipe.add_argument("--width", type=int, default=None)
    pipe.add_argument("--height", type=int, default=None)
    pipe.add_argument("--framerate", default=None)
    pipe.add_argument("--source", default="pipewiresrc")
    pipe.add_argument("--chain", action="store_true", help="also print the decoder chain")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    command = args.command or "serve"
    if command == "decoders":
        return _print_decoders()
    if command == "chain":
        return _print_chain(args.pixel_format, args.pipeline)
    if command == "pipeline":
        return _print_pipeline(args)

    from camsight.server import run

    run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
