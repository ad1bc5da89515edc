"""
Command-Line Interface (CLI) setup for ffmpeg-util.

This module uses Python's `argparse` to define one sub-command per media
operation, and dispatches the parsed arguments to `MediaPipeline`.
"""
import argparse
from pathlib import Path
from typing import List, Optional

from .config.common import ERROR_LOG_DIR, FFMPEG_BINARY, FFPROBE_BINARY, TEMP_DIR_ROOT, executable_path
from .config.video import (
    DEFAULT_FRAME_RATE,
    DEFAULT_GIF_FRAME_RATE,
    DEFAULT_PIXEL_FORMAT,
    DEFAULT_VIDEO_CODEC,
)
from .pipeline.media_pipeline import MediaPipeline
from .services.engine import EngineResult, FFmpegEngine
from .services.probe_client import FFprobeClient
from .services.stream_inspector import StreamInspector


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Build and run FFmpeg media pipelines.")
    parser.add_argument(
        "--log-level", type=str, default="INFO", choices=["TRACE", "DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set the logging level."
    )
    parser.add_argument(
        "--temp-dir", type=Path, default=TEMP_DIR_ROOT,
        help="Directory for temporary workspaces. Defaults to the system temp directory."
    )
    parser.add_argument(
        "--ffmpeg-dir", type=Path, default=None,
        help="Directory containing the ffmpeg and ffprobe executables (default: PATH or config.user.yaml)."
    )
    parser.add_argument(
        "--timeout", type=float, default=None,
        help="Abort an FFmpeg invocation after this many seconds."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    frame = subparsers.add_parser("frame", help="Extract a single frame as an image.")
    frame.add_argument("video")
    frame.add_argument("image")
    frame.add_argument("--seek", "-ss", required=True, help="Time position, e.g. 00:00:02 or 2.0.")
    frame.add_argument("--size", "-s", default="", help="Output size, e.g. 320x240.")

    gif = subparsers.add_parser("gif", help="Extract an animated GIF clip.")
    gif.add_argument("video")
    gif.add_argument("output")
    gif.add_argument("--seek", "-ss", required=True)
    gif.add_argument("--duration", "-t", required=True)
    gif.add_argument("--size", "-s", default="")
    gif.add_argument("--frame-rate", "-r", default=DEFAULT_GIF_FRAME_RATE)

    text = subparsers.add_parser("text", help="Draw a text watermark.")
    text.add_argument("video")
    text.add_argument("output")
    text.add_argument("--text", required=True)
    text.add_argument("--font", required=True, help="Path to a font file.")
    text.add_argument("--font-size", default="24")
    text.add_argument("--font-color", default="white")
    text.add_argument("--x", default="10")
    text.add_argument("--y", default="10")
    text.add_argument("--alpha", default="1")
    text.add_argument("--box", action="store_true", help="Draw a box behind the text.")
    text.add_argument("--box-color", default="")

    watermark = subparsers.add_parser("watermark", help="Overlay an image watermark.")
    watermark.add_argument("video")
    watermark.add_argument("output")
    watermark.add_argument("--image", required=True)
    watermark.add_argument("--x", default="10")
    watermark.add_argument("--y", default="10")

    images = subparsers.add_parser("images", help="Encode images as a numbered sequence.")
    images.add_argument("output")
    images.add_argument("images", nargs="+")
    images.add_argument("--duration", "-t", required=True)
    images.add_argument("--frame-rate", "-r", default=DEFAULT_FRAME_RATE)
    images.add_argument("--codec", default=DEFAULT_VIDEO_CODEC)
    images.add_argument("--pix-fmt", default=DEFAULT_PIXEL_FORMAT)

    slideshow = subparsers.add_parser("slideshow", help="Show images one after another via the concat demuxer.")
    slideshow.add_argument("output")
    slideshow.add_argument("images", nargs="+")
    slideshow.add_argument("--duration", "-t", required=True)
    slideshow.add_argument("--frame-rate", "-r", default=DEFAULT_FRAME_RATE)

    loop = subparsers.add_parser("loop", help="Loop still images into a video.")
    loop.add_argument("output")
    loop.add_argument("images", nargs="+")
    loop.add_argument("--duration", "-t", required=True)
    loop.add_argument("--size", "-s", default="")
    loop.add_argument("--sar", default="")
    loop.add_argument("--codec", default="")
    loop.add_argument("--pix-fmt", default="")
    loop.add_argument("--frame-rate", "-r", default="")

    concat = subparsers.add_parser("concat", help="Concatenate videos with identical codecs (stream copy).")
    concat.add_argument("output")
    concat.add_argument("videos", nargs="+")

    concat_mixed = subparsers.add_parser(
        "concat-mixed", help="Concatenate videos with differing codecs (re-encode)."
    )
    concat_mixed.add_argument("output")
    concat_mixed.add_argument("videos", nargs="+")

    append = subparsers.add_parser("append-image", help="Append a still image to the end of a video.")
    append.add_argument("video")
    append.add_argument("image")
    append.add_argument("output")
    append.add_argument("--duration", "-t", required=True)

    return parser


def get_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    Validates --temp-dir: if it does not exist it is created, and the parser
    exits with an error if that fails.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.temp_dir:
        temp_dir_path = Path(args.temp_dir)
        if not temp_dir_path.is_dir():
            try:
                temp_dir_path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                parser.error(f"The temporary directory '{args.temp_dir}' could not be created: {e}")
        args.temp_dir = temp_dir_path.resolve()

    return args


def build_pipeline(args: argparse.Namespace) -> MediaPipeline:
    ffmpeg_binary = executable_path("ffmpeg", args.ffmpeg_dir) if args.ffmpeg_dir else FFMPEG_BINARY
    ffprobe_binary = executable_path("ffprobe", args.ffmpeg_dir) if args.ffmpeg_dir else FFPROBE_BINARY
    engine = FFmpegEngine(ffmpeg_binary, timeout=args.timeout, error_log_dir=ERROR_LOG_DIR)
    inspector = StreamInspector(FFprobeClient(ffprobe_binary))
    return MediaPipeline(engine=engine, inspector=inspector, temp_root=args.temp_dir)


def run_command(pipeline: MediaPipeline, args: argparse.Namespace) -> EngineResult:
    """Dispatches a parsed sub-command to the matching pipeline operation."""
    command = args.command
    if command == "frame":
        return pipeline.extract_frame(args.video, args.image, args.seek, args.size)
    if command == "gif":
        return pipeline.extract_animated_clip(
            args.video, args.output, args.seek, args.duration, args.size, args.frame_rate
        )
    if command == "text":
        return pipeline.overlay_text(
            args.video, args.output, args.text, args.font, args.font_size, args.font_color,
            args.x, args.y, args.alpha, args.box, args.box_color,
        )
    if command == "watermark":
        return pipeline.overlay_image(args.video, args.output, args.image, args.x, args.y)
    if command == "images":
        return pipeline.compose_images_to_video(
            args.images, args.output, args.duration, args.frame_rate, args.codec, args.pix_fmt
        )
    if command == "slideshow":
        return pipeline.compose_images_sequence_concat(args.images, args.output, args.duration, args.frame_rate)
    if command == "loop":
        return pipeline.loop_images_to_video(
            args.images, args.output, args.duration, args.size, args.sar, args.codec, args.pix_fmt, args.frame_rate
        )
    if command == "concat":
        return pipeline.concat_same_codec(args.videos, args.output)
    if command == "concat-mixed":
        return pipeline.concat_mixed_codec(args.videos, args.output)
    if command == "append-image":
        return pipeline.append_image_to_video(args.video, args.image, args.duration, args.output)
    raise ValueError(f"Unknown command: {command}")
