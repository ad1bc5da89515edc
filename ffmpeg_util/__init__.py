"""
ffmpeg-util: builds and runs FFmpeg command pipelines.

Frame and GIF extraction, text and image watermarks, image-to-video
composition, same-codec and mixed-codec concatenation, and appending a still
image to the end of a video.

The main entry point is `MediaPipeline`:

    from ffmpeg_util import MediaPipeline

    pipeline = MediaPipeline()
    pipeline.concat_mixed_codec(["intro.mp4", "talk.flv"], "joined.mp4")
"""

from .domain.exceptions import (
    EngineException,
    FFmpegUtilException,
    ProbeException,
    ResourceException,
    ValidationException,
)
from .domain.media import StreamProfile
from .pipeline.media_pipeline import ConcatStrategy, MediaPipeline
from .services.engine import EngineResult, FFmpegEngine
from .services.stream_inspector import StreamInspector

__all__ = [
    "ConcatStrategy",
    "EngineException",
    "EngineResult",
    "FFmpegEngine",
    "FFmpegUtilException",
    "MediaPipeline",
    "ProbeException",
    "ResourceException",
    "StreamInspector",
    "StreamProfile",
    "ValidationException",
]
