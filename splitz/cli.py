"""Thin CLI entry point — builds a SplitJob and calls the engine."""

import argparse
import logging
import sys
from pathlib import Path

from splitz.engine import process
from splitz.errors import SplitzError
from splitz.ffutil import FFmpegTools
from splitz.manifest import (
    DEFAULT_CLIP_DURATION,
    ToolConfig,
    coerce_clip_duration,
    job_for,
    load_manifest,
)
from splitz.models import SplitProgress
from splitz.planner import format_size, format_timecode, plan_clip_count


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="splitz",
        description="Splitz — split videos into fixed-length clips without re-encoding.",
    )
    parser.add_argument("--ffmpeg", type=str, default="ffmpeg", help="ffmpeg binary to run")
    parser.add_argument("--ffprobe", type=str, default="ffprobe", help="ffprobe binary to run")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log ffmpeg commands")
    sub = parser.add_subparsers(dest="command")

    sp = sub.add_parser("split", help="Split a video file into clips")
    sp.add_argument("video", nargs="?", type=Path, help="Input video file")
    sp.add_argument("--manifest", "-m", type=Path, help="Path to a JSON manifest file")
    sp.add_argument("--duration", "-d", type=str, default=DEFAULT_CLIP_DURATION,
                    help="Clip length as HH:MM:SS, MM:SS or seconds")
    sp.add_argument("--output-dir", "-o", type=Path, help="Output folder (default: next to the input)")
    sp.add_argument("--prefix", type=str, default=None, help="Filename prefix (default: '<stem>_')")
    sp.add_argument("--suffix", type=str, default="", help="Filename suffix before the extension")
    sp.add_argument("--workers", type=int, default=1, help="Clips to extract in parallel")
    sp.add_argument("--retries", type=int, default=0, help="Retries for failed ffmpeg/ffprobe runs")

    pp = sub.add_parser("probe", help="Show duration and size of a video file")
    pp.add_argument("video", type=Path, help="Input video file")
    pp.add_argument("--duration", "-d", type=str, default=None,
                    help="Also report how many clips of this length would be created")

    sub.add_parser("check", help="Check that ffmpeg can be run")

    serve = sub.add_parser("serve", help="Launch the web API")
    serve.add_argument("--port", type=int, default=8321, help="Port to listen on")
    serve.add_argument("--host", type=str, default="127.0.0.1", help="Host to bind to")
    return parser


def _split(args: argparse.Namespace) -> None:
    if args.manifest:
        job = load_manifest(args.manifest)
    elif args.video:
        job = job_for(
            args.video,
            clip_duration=args.duration,
            output_dir=args.output_dir,
            prefix=args.prefix,
            suffix=args.suffix,
            workers=args.workers,
            retries=args.retries,
            tools=ToolConfig(ffmpeg=args.ffmpeg, ffprobe=args.ffprobe),
        )
    else:
        print("Error: provide either a VIDEO argument or --manifest.", file=sys.stderr)
        sys.exit(1)

    def on_progress(p: SplitProgress) -> None:
        print(f"  [{p.percentage:3.0f}%] Clip {p.current_clip} of {p.total_clips}")

    result = process(job, on_progress=on_progress)

    print()
    print(f"Done! {result.total_clips} clips created in {result.output_dir}")
    if result.source:
        print(f"  Source: {format_timecode(result.source.duration)} ({format_size(result.source.size)})")
    if result.skipped_tail:
        print("  Last clip was empty and was skipped")


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    tools = FFmpegTools(ffmpeg=args.ffmpeg, ffprobe=args.ffprobe)

    if args.command == "check":
        if tools.is_available():
            print(f"{args.ffmpeg}: OK")
            return
        print(f"{args.ffmpeg}: not found. Install FFmpeg and make sure it is on PATH.", file=sys.stderr)
        sys.exit(1)

    if args.command == "serve":
        from splitz.web import create_app
        app = create_app(tools=tools)
        print(f"Splitz web API: http://{args.host}:{args.port}")
        app.run(host=args.host, port=args.port, debug=False)
        return

    try:
        if args.command == "probe":
            info = tools.probe(args.video)
            print(f"Duration: {format_timecode(info.duration)} ({info.duration:.3f}s)")
            print(f"Size: {format_size(info.size)} ({info.size} bytes)")
            if args.duration:
                clips = plan_clip_count(info.duration, coerce_clip_duration(args.duration))
                print(f"This will create {clips} clip{'s' if clips != 1 else ''}")
        elif args.command == "split":
            _split(args)
    except (SplitzError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
