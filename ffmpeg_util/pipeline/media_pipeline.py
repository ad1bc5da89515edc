"""
The media pipeline: the public operation surface of ffmpeg-util.

`MediaPipeline` ties the pieces together. For every operation it validates
the parameters, probes inputs where needed, builds the FFmpeg arguments,
runs them through the engine and cleans up the temporary workspace on every
exit path.

Concatenation follows a small state machine:

    ProbeInputs -> DecideStrategy -> {SAME_CODEC | MIXED_CODEC} -> Done

The strategy is chosen by the caller (`concat_same_codec` /
`concat_mixed_codec`), or, when appending a still image, by comparing the
container suffixes of the source and the output.
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from loguru import logger

from ..config.common import MANIFEST_PREFIX, TEMP_DIR_ROOT
from ..config.video import (
    AUDIO_CODEC_ENCODERS,
    DEFAULT_CHANNEL_LAYOUT,
    DEFAULT_FRAME_RATE,
    DEFAULT_GIF_FRAME_RATE,
    DEFAULT_PIXEL_FORMAT,
    DEFAULT_SAMPLE_RATE,
    DEFAULT_VIDEO_CODEC,
    VIDEO_CODEC_ENCODERS,
)
from ..domain.exceptions import EngineException, ValidationException
from ..domain.manifest import ConcatManifest
from ..domain.media import StreamProfile
from ..domain.temp_models import TempWorkspace
from ..services import command_builder
from ..services.command_builder import SilentAudio
from ..services.engine import EngineResult, FFmpegEngine
from ..services.stream_inspector import StreamInspector
from ..utils.format_utils import Number, common_extension, to_seconds

PathLike = Union[str, Path]


class ConcatStrategy(Enum):
    SAME_CODEC = "same_codec"  # concat demuxer, stream copy
    MIXED_CODEC = "mixed_codec"  # concat filter, re-encode


def choose_append_strategy(source: PathLike, output: PathLike) -> ConcatStrategy:
    """
    Stream copy only when source and output share a container suffix.

    Differing suffixes always re-encode, even if the codecs would happen to be
    compatible with the target container.
    """
    if Path(source).suffix.lower() == Path(output).suffix.lower():
        return ConcatStrategy.SAME_CODEC
    return ConcatStrategy.MIXED_CODEC


def encoder_for(codec_name: str, encoders: dict = VIDEO_CODEC_ENCODERS) -> str:
    """Maps a probed codec name to an FFmpeg encoder, falling back to the codec name."""
    encoder = encoders.get(codec_name)
    if encoder:
        return encoder
    logger.warning(f"No encoder mapping for codec '{codec_name}', passing the codec name to FFmpeg as is.")
    return codec_name


def _manifest_name() -> str:
    return f"{MANIFEST_PREFIX}{datetime.now():%Y%m%d%H%M%S%f}.txt"


class MediaPipeline:
    """
    Synchronous media operations backed by FFmpeg.

    Every public method blocks until FFmpeg has finished and the workspace has
    been removed. On success it returns the `EngineResult` of the final FFmpeg
    invocation. Failures raise:

    - `ValidationException` for bad parameters, before any subprocess runs;
    - `ProbeException` when an input cannot be probed;
    - `EngineException` when FFmpeg fails (the partial output is removed and
      FFmpeg's output is available as `exc.output`);
    - `ResourceException` when the workspace or an intermediate file cannot
      be created.

    Nothing is retried. Collaborators are injected so callers can replace the
    engine (e.g. to add timeouts) or the inspector.
    """

    def __init__(
        self,
        engine: Optional[FFmpegEngine] = None,
        inspector: Optional[StreamInspector] = None,
        temp_root: Optional[Path] = TEMP_DIR_ROOT,
    ):
        self.engine = engine or FFmpegEngine()
        self.inspector = inspector or StreamInspector()
        self.temp_root = temp_root

    # --- Single-step operations ---

    def extract_frame(self, video: PathLike, image: PathLike, seek: Number, size: str = "") -> EngineResult:
        """Saves the frame at `seek` (e.g. "00:00:02" or 2.0) as an image, optionally resized to `size`."""
        args = command_builder.build_frame_extraction(video, image, seek, size)
        logger.info(f"Extracting frame at {seek} from {video} to {image}")
        return self._run(args, image)

    def extract_animated_clip(
        self,
        video: PathLike,
        output: PathLike,
        seek: Number,
        duration: Number,
        size: str = "",
        frame_rate: Number = DEFAULT_GIF_FRAME_RATE,
    ) -> EngineResult:
        args = command_builder.build_gif_extraction(video, output, seek, duration, size, frame_rate)
        logger.info(f"Extracting {duration}s GIF at {seek} from {video} to {output}")
        return self._run(args, output)

    def overlay_text(
        self,
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
    ) -> EngineResult:
        args = command_builder.build_text_overlay(
            video, output, text, font, font_size, font_color, x, y, alpha, box, box_color
        )
        logger.info(f"Drawing text watermark on {video} to {output}")
        return self._run(args, output)

    def overlay_image(self, video: PathLike, output: PathLike, image: PathLike, x: Number, y: Number) -> EngineResult:
        args = command_builder.build_image_overlay(video, output, image, x, y)
        logger.info(f"Overlaying {image} on {video} at {x}:{y} to {output}")
        return self._run(args, output)

    def loop_images_to_video(
        self,
        images: Sequence[PathLike],
        output: PathLike,
        duration: Number,
        size: str = "",
        sample_aspect_ratio: str = "",
        codec: str = "",
        pixel_format: str = "",
        frame_rate: Number = "",
    ) -> EngineResult:
        args = command_builder.build_looped_images(
            images, output, duration, size, sample_aspect_ratio, codec, pixel_format, frame_rate
        )
        logger.info(f"Looping {len(images)} image(s) into a {duration}s video {output}")
        return self._run(args, output)

    # --- Operations with intermediate artifacts ---

    def compose_images_to_video(
        self,
        images: Sequence[PathLike],
        output: PathLike,
        duration: Number,
        frame_rate: Number = DEFAULT_FRAME_RATE,
        codec: str = DEFAULT_VIDEO_CODEC,
        pixel_format: str = DEFAULT_PIXEL_FORMAT,
    ) -> EngineResult:
        """
        Encodes `images` as a numbered sequence lasting `duration` seconds.

        The images are copied into a workspace as 000000.<ext>, 000001.<ext>,
        ... so FFmpeg can read them with one `%06d` pattern. All images must
        share one extension.
        """
        if not images:
            raise ValidationException("At least one image is required.")
        extension = common_extension(images)
        if extension is None:
            raise ValidationException("All images must have the same file extension.")
        if not extension:
            raise ValidationException("Images must have a file extension.")

        logger.info(f"Composing {len(images)} image(s) into {output}")
        with TempWorkspace(self.temp_root, hint="images") as workspace:
            args = command_builder.build_images_to_video(
                workspace.path(f"%06d.{extension}"), len(images), output, duration, frame_rate, codec, pixel_format
            )
            for i, image in enumerate(images):
                workspace.copy_in(image, f"{i:06d}.{extension}")
            return self._run(args, output)

    def compose_images_sequence_concat(
        self,
        images: Sequence[PathLike],
        output: PathLike,
        duration: Number,
        frame_rate: Number = DEFAULT_FRAME_RATE,
    ) -> EngineResult:
        """
        Shows each image for `duration / len(images)` seconds using the concat demuxer.

        The last image is listed a second time without a duration; the concat
        demuxer ignores the duration of the final entry otherwise.
        """
        if not images:
            raise ValidationException("At least one image is required.")
        seconds = to_seconds(duration)
        if seconds is None or seconds <= 0:
            raise ValidationException(f"'duration' must be a positive number, got {duration!r}.")

        per_image = round(seconds / len(images), 2)
        manifest = ConcatManifest()
        for image in images:
            manifest.add(image, per_image)
        manifest.add(images[-1])

        logger.info(f"Composing {len(images)} image(s) at {per_image}s each into {output}")
        with TempWorkspace(self.temp_root, hint="slideshow") as workspace:
            manifest_path = workspace.write_text(_manifest_name(), manifest.render())
            args = command_builder.build_image_sequence_concat(manifest_path, output, frame_rate)
            return self._run(args, output)

    def concat(self, videos: Sequence[PathLike], output: PathLike, strategy: ConcatStrategy) -> EngineResult:
        """Concatenates `videos` with the given strategy."""
        if strategy is ConcatStrategy.SAME_CODEC:
            return self.concat_same_codec(videos, output)
        return self.concat_mixed_codec(videos, output)

    def concat_same_codec(self, videos: Sequence[PathLike], output: PathLike) -> EngineResult:
        """
        Joins videos without re-encoding (concat demuxer, `-c copy`).

        All inputs must share identical codec parameters; FFmpeg reports a
        failure otherwise.
        """
        if not videos:
            raise ValidationException("At least one video is required.")
        manifest = ConcatManifest()
        for video in videos:
            manifest.add(video)

        logger.info(f"Concatenating {len(videos)} video(s) by stream copy into {output}")
        with TempWorkspace(self.temp_root, hint="concat") as workspace:
            manifest_path = workspace.write_text(_manifest_name(), manifest.render())
            args = command_builder.build_concat_copy(manifest_path, output)
            return self._run(args, output)

    def concat_mixed_codec(self, videos: Sequence[PathLike], output: PathLike) -> EngineResult:
        """
        Joins videos by re-encoding through the concat filter.

        Codecs may differ, but dimensions and sample aspect ratio must match.
        Inputs without audio get a silent track using the channel layout and
        sample rate of the first input that has audio.
        """
        if not videos:
            raise ValidationException("At least one video is required.")
        inspection = self.inspector.inspect_many(videos)
        self._check_same_geometry(videos, inspection.profiles)
        merged = inspection.merged
        audio_flags = inspection.audio_flags

        logger.info(
            f"Concatenating {len(videos)} video(s) through the concat filter into {output} "
            f"({audio_flags.count(False)} without audio)"
        )
        args = command_builder.build_filter_graph_concat(
            videos,
            audio_flags,
            merged.channel_layout or DEFAULT_CHANNEL_LAYOUT,
            merged.sample_rate or DEFAULT_SAMPLE_RATE,
            output,
        )
        return self._run(args, output)

    def append_image_to_video(
        self, video: PathLike, image: PathLike, duration: Number, output: PathLike
    ) -> EngineResult:
        """
        Appends `image`, shown for `duration` seconds, to the end of `video`.

        The image is first encoded into an intermediate video matching the
        source's size, sample aspect ratio, codec, pixel format and frame rate
        (plus a silent track when the source has audio). The two are then
        concatenated by stream copy if `video` and `output` share a container
        suffix, or through the concat filter otherwise.
        """
        seconds = to_seconds(duration)
        if seconds is None or seconds <= 0:
            raise ValidationException(f"'duration' must be a positive number, got {duration!r}.")
        if not image:
            raise ValidationException("'image' is required.")

        target = self.inspector.inspect(video)
        if not target.has_video:
            raise ValidationException(f"{video} has no video stream to append to.")

        strategy = choose_append_strategy(video, output)
        logger.info(f"Appending {image} ({duration}s) to {video} into {output} using {strategy.value}")
        with TempWorkspace(self.temp_root, hint="append") as workspace:
            intermediate = workspace.track(workspace.path(f"tmp{Path(video).suffix}"))
            args = command_builder.build_looped_images(
                [image],
                intermediate,
                duration,
                size=target.size,
                sample_aspect_ratio=target.sample_aspect_ratio,
                codec=encoder_for(target.codec_name),
                pixel_format=target.pixel_format,
                frame_rate=target.frame_rate,
                silent_audio=self._silent_audio_for(target),
            )
            self._run(args, intermediate)
            return self.concat([video, intermediate], output, strategy)

    # --- Helpers ---

    def _run(self, args: List[str], output: PathLike) -> EngineResult:
        result = self.engine.execute(args)
        if not result.success:
            self._discard_output(output)
            raise EngineException(f"FFmpeg failed while writing {output}", result)
        logger.debug(f"FFmpeg finished writing {output}")
        return result

    @staticmethod
    def _discard_output(output: PathLike) -> None:
        try:
            Path(output).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove incomplete output {output}: {e}")

    @staticmethod
    def _silent_audio_for(target: StreamProfile) -> Optional[SilentAudio]:
        if not target.has_audio:
            return None
        return SilentAudio(
            target.channel_layout or DEFAULT_CHANNEL_LAYOUT,
            target.sample_rate or DEFAULT_SAMPLE_RATE,
            encoder_for(target.audio_codec_name, AUDIO_CODEC_ENCODERS) if target.audio_codec_name else "",
        )

    @staticmethod
    def _check_same_geometry(videos: Sequence[PathLike], profiles: Sequence[StreamProfile]) -> None:
        """The concat filter needs identical dimensions and sample aspect ratio."""
        reference = None
        for video, profile in zip(videos, profiles):
            if not profile.has_video:
                raise ValidationException(f"{video} has no video stream.")
            if reference is None:
                reference = (video, profile)
                continue
            first_video, first = reference
            if profile.size and first.size and profile.size != first.size:
                raise ValidationException(
                    f"{video} is {profile.size} but {first_video} is {first.size}; sizes must match."
                )
            if (
                profile.sample_aspect_ratio
                and first.sample_aspect_ratio
                and profile.sample_aspect_ratio != first.sample_aspect_ratio
            ):
                raise ValidationException(
                    f"{video} has SAR {profile.sample_aspect_ratio} but {first_video} has "
                    f"{first.sample_aspect_ratio}; sample aspect ratios must match."
                )
