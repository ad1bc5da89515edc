"""
Command builders: one pure function per FFmpeg operation.

Every builder validates its required parameters, raising
`ValidationException` before anything is executed, and returns the FFmpeg
argument list (without the binary). Optional flags are only emitted for
non-default parameters.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from ..config.video import (
    DEFAULT_FRAME_RATE,
    DEFAULT_GIF_FRAME_RATE,
    DEFAULT_PIXEL_FORMAT,
    DEFAULT_VIDEO_CODEC,
    SILENT_AUDIO_DURATION,
)
from ..domain.command import FFmpegCommand
from ..domain.exceptions import ValidationException
from ..utils.format_utils import Number, format_number, parse_size, to_rate, to_seconds

PathLike = Union[str, Path]


@dataclass(frozen=True)
class SilentAudio:
    """Parameters of a generated silent audio track."""

    channel_layout: str
    sample_rate: str
    codec: str = ""


def anullsrc_source(channel_layout: str, sample_rate: str) -> str:
    return f"anullsrc=channel_layout={channel_layout}:sample_rate={sample_rate}"


def _require(value, name: str) -> None:
    if value is None or str(value).strip() == "":
        raise ValidationException(f"'{name}' is required.")


def _require_positive(value: Number, name: str) -> float:
    _require(value, name)
    seconds = to_seconds(value)
    if seconds is None or seconds <= 0:
        raise ValidationException(f"'{name}' must be a positive number, got {value!r}.")
    return seconds


def _require_rate(value: Number, name: str) -> None:
    _require(value, name)
    rate = to_rate(value)
    if rate is None or rate <= 0:
        raise ValidationException(f"'{name}' must be a positive frame rate, got {value!r}.")


def _require_size(size: str) -> None:
    if size and parse_size(size) is None:
        raise ValidationException(f"Size must look like 'WIDTHxHEIGHT', got {size!r}.")


def _escape_quoted(text: str) -> str:
    # The filtergraph parser and the option parser each strip one level of
    # quoting, so a literal quote is closed, escaped twice and reopened.
    return text.replace("'", "'\\\\\\''")


def build_frame_extraction(video: PathLike, image: PathLike, seek: Number, size: str = "") -> List[str]:
    """Single frame at `seek`. `-ss` precedes `-i` so FFmpeg seeks on the input."""
    _require(video, "video")
    _require(image, "image")
    _require(seek, "seek")
    _require_size(size)

    cmd = FFmpegCommand()
    cmd.add_input(video, "-ss", format_number(seek))
    cmd.append("-vframes", "1")
    cmd.append("-f", "image2")
    cmd.append_if(size, "-s", size)
    return cmd.output(image)


def build_gif_extraction(
    video: PathLike,
    gif: PathLike,
    seek: Number,
    duration: Number,
    size: str = "",
    frame_rate: Number = DEFAULT_GIF_FRAME_RATE,
) -> List[str]:
    _require(video, "video")
    _require(gif, "gif")
    _require(seek, "seek")
    _require_positive(duration, "duration")
    _require_rate(frame_rate, "frame_rate")
    _require_size(size)

    cmd = FFmpegCommand()
    cmd.add_input(video, "-ss", format_number(seek))
    cmd.append("-t", format_number(duration))
    cmd.append("-r", format_number(frame_rate))
    cmd.append("-f", "gif")
    cmd.append_if(size, "-s", size)
    return cmd.output(gif)


def drawtext_filter(
    text: str,
    font: PathLike,
    font_size: Number,
    font_color: str,
    x: Number,
    y: Number,
    alpha: Number = 1,
    box: bool = False,
    box_color: str = "",
) -> str:
    vf = (
        f"drawtext=fontfile={font}:text='{_escape_quoted(text)}':fontsize={format_number(font_size)}"
        f":fontcolor={font_color}:x={format_number(x)}:y={format_number(y)}:alpha={format_number(alpha)}"
    )
    if box:
        vf += ":box=1"
        if box_color:
            vf += f":boxcolor={box_color}"
    return vf


def build_text_overlay(
    video: PathLike,
    output: PathLike,
    text: str,
    font: PathLike,
    font_size: Number,
    font_color: str,
    x: Number,
    y: Number,
    alpha: Number = 1,
    box: bool = False,
    box_color: str = "",
) -> List[str]:
    _require(video, "video")
    _require(output, "output")
    _require(text, "text")
    _require(font, "font")
    _require_positive(font_size, "font_size")
    _require(font_color, "font_color")
    _require(x, "x")
    _require(y, "y")
    alpha_value = to_rate(alpha)
    if alpha_value is None or not 0 <= alpha_value <= 1:
        raise ValidationException(f"'alpha' must be between 0 and 1, got {alpha!r}.")

    cmd = FFmpegCommand()
    cmd.flag("-re")
    cmd.add_input(video)
    cmd.append("-vf", drawtext_filter(text, font, font_size, font_color, x, y, alpha, box, box_color))
    return cmd.output(output)


def build_image_overlay(video: PathLike, output: PathLike, image: PathLike, x: Number, y: Number) -> List[str]:
    """Loads `image` as a `[logo]` sub-stream with `movie` and overlays it on the main stream."""
    _require(video, "video")
    _require(output, "output")
    _require(image, "image")
    _require(x, "x")
    _require(y, "y")

    cmd = FFmpegCommand()
    cmd.add_input(video)
    cmd.append("-vf", f"movie={image} [logo]; [in][logo] overlay={format_number(x)}:{format_number(y)} [out]")
    return cmd.output(output)


def build_images_to_video(
    pattern: PathLike,
    count: int,
    output: PathLike,
    duration: Number,
    frame_rate: Number = DEFAULT_FRAME_RATE,
    codec: str = DEFAULT_VIDEO_CODEC,
    pixel_format: str = DEFAULT_PIXEL_FORMAT,
) -> List[str]:
    """
    Encodes a numbered image sequence (`pattern`, e.g. ".../%06d.jpg").

    The input frame rate is `count/duration` so the sequence lasts exactly
    `duration` seconds; `frame_rate` is the output frame rate.
    """
    _require(pattern, "pattern")
    _require(output, "output")
    if count <= 0:
        raise ValidationException("At least one image is required.")
    seconds = _require_positive(duration, "duration")
    _require_rate(frame_rate, "frame_rate")

    cmd = FFmpegCommand()
    cmd.add_input(pattern, "-framerate", f"{count}/{format_number(seconds)}")
    cmd.append("-r", format_number(frame_rate))
    cmd.append_if(codec, "-c:v", codec)
    cmd.append_if(pixel_format, "-pix_fmt", pixel_format)
    return cmd.output(output)


def build_image_sequence_concat(
    manifest: PathLike,
    output: PathLike,
    frame_rate: Number = DEFAULT_FRAME_RATE,
    pixel_format: str = DEFAULT_PIXEL_FORMAT,
) -> List[str]:
    _require(manifest, "manifest")
    _require(output, "output")
    _require_rate(frame_rate, "frame_rate")

    cmd = FFmpegCommand()
    cmd.add_input(manifest, "-f", "concat", "-safe", "0")
    cmd.append("-r", format_number(frame_rate))
    cmd.append_if(pixel_format, "-pix_fmt", pixel_format)
    return cmd.output(output)


def video_filter(size: str = "", sample_aspect_ratio: str = "") -> str:
    """Builds the "scale=W:H,setsar=S" chain; either part is omitted when not given."""
    parts = []
    dimensions = parse_size(size) if size else None
    if dimensions:
        parts.append(f"scale={dimensions[0]}:{dimensions[1]}")
    if sample_aspect_ratio:
        parts.append(f"setsar={sample_aspect_ratio}")
    return ",".join(parts)


def build_looped_images(
    images: Sequence[PathLike],
    output: PathLike,
    duration: Number,
    size: str = "",
    sample_aspect_ratio: str = "",
    codec: str = "",
    pixel_format: str = "",
    frame_rate: Number = "",
    silent_audio: Optional[SilentAudio] = None,
) -> List[str]:
    """
    Turns still images into a video by looping each one for `duration / len(images)`.

    A single image is scaled with `-vf`; several images are scaled one by one
    and joined with the concat filter. With `silent_audio` a silent track of
    the full duration is muxed in so the result matches an audio-bearing video.
    """
    if not images:
        raise ValidationException("At least one image is required.")
    for image in images:
        _require(image, "image")
    _require(output, "output")
    total = _require_positive(duration, "duration")
    _require_size(size)
    if frame_rate:
        _require_rate(frame_rate, "frame_rate")

    cmd = FFmpegCommand()
    per_image = format_number(round(total / len(images), 3))
    for image in images:
        cmd.add_input(image, "-loop", "1", "-t", per_image)
    audio_index = None
    if silent_audio is not None:
        audio_index = cmd.add_input(
            anullsrc_source(silent_audio.channel_layout, silent_audio.sample_rate),
            "-f", "lavfi", "-t", format_number(duration),
        )

    chain = video_filter(size, sample_aspect_ratio)
    if len(images) == 1:
        cmd.append_if(chain, "-vf", chain)
        if audio_index is not None:
            cmd.append("-map", "0:v")
    else:
        graph = []
        labels = []
        for i in range(len(images)):
            if chain:
                graph.append(f"[{i}:v]{chain}[v{i}]")
                labels.append(f"[v{i}]")
            else:
                labels.append(f"[{i}:v]")
        graph.append(f"{''.join(labels)}concat=n={len(images)}:v=1:a=0[v]")
        cmd.append("-filter_complex", ";".join(graph))
        cmd.append("-map", "[v]")
    if audio_index is not None:
        cmd.append("-map", f"{audio_index}:a")

    cmd.append_if(codec, "-c:v", codec)
    cmd.append_if(pixel_format, "-pix_fmt", pixel_format)
    cmd.append_if(frame_rate, "-r", format_number(frame_rate))
    if silent_audio is not None:
        cmd.append_if(silent_audio.codec, "-c:a", silent_audio.codec)
    return cmd.output(output)


def build_concat_copy(manifest: PathLike, output: PathLike) -> List[str]:
    """Stream-copy concatenation through the concat demuxer; no re-encode."""
    _require(manifest, "manifest")
    _require(output, "output")

    cmd = FFmpegCommand()
    cmd.add_input(manifest, "-f", "concat", "-safe", "0")
    cmd.append("-c", "copy")
    return cmd.output(output)


def build_filter_graph(count: int, audio_sources: Sequence[int]) -> str:
    """
    Builds the concat filter graph, e.g. "[0:v][0:a][1:v][3:a] concat=n=2:v=1:a=1 [v] [a]".

    Input `i` contributes its own video and the audio of input
    `audio_sources[i]`, which is `i` itself or a silent source.
    """
    if count != len(audio_sources):
        raise ValidationException(
            f"Filter graph needs one audio source per video ({count} videos, {len(audio_sources)} audio sources)."
        )
    pairs = "".join(f"[{i}:v][{a}:a]" for i, a in enumerate(audio_sources))
    return f"{pairs} concat=n={count}:v=1:a=1 [v] [a]"


def build_filter_graph_concat(
    videos: Sequence[PathLike],
    audio_flags: Sequence[bool],
    channel_layout: str,
    sample_rate: str,
    output: PathLike,
) -> List[str]:
    """
    Re-encoding concatenation through the concat filter.

    When any video lacks audio, one silent `anullsrc` input is appended after
    all real inputs (index `len(videos)`) and every audio-less video takes its
    audio from it.
    """
    if not videos:
        raise ValidationException("At least one video is required.")
    if len(videos) != len(audio_flags):
        raise ValidationException("Audio presence must be known for every video.")
    for video in videos:
        _require(video, "video")
    _require(output, "output")

    cmd = FFmpegCommand()
    for video in videos:
        cmd.add_input(video)

    silent_index = None
    if not all(audio_flags):
        _require(channel_layout, "channel_layout")
        _require(sample_rate, "sample_rate")
        silent_index = cmd.add_input(
            anullsrc_source(channel_layout, sample_rate),
            "-f", "lavfi", "-t", SILENT_AUDIO_DURATION,
        )
    audio_sources = [i if has_audio else silent_index for i, has_audio in enumerate(audio_flags)]

    cmd.append("-filter_complex", build_filter_graph(len(videos), audio_sources))
    cmd.append("-map", "[v]")
    cmd.append("-map", "[a]")
    return cmd.output(output)
