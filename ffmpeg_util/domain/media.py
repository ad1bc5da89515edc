from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Iterable, Optional

from ..config.video import DEFAULT_SAMPLE_ASPECT_RATIO, UNKNOWN_SAMPLE_ASPECT_RATIO


def normalize_sample_aspect_ratio(value: str) -> str:
    """
    Rewrites an ffprobe sample aspect ratio ("16:15") into filter syntax ("16/15").

    ffprobe reports "0:1" for streams without a known ratio. `setsar=0/1` is
    rejected by FFmpeg, so that value is mapped to "1/1".
    """
    if not value:
        return ""
    sar = value.replace(":", "/")
    if sar == UNKNOWN_SAMPLE_ASPECT_RATIO:
        return DEFAULT_SAMPLE_ASPECT_RATIO
    return sar


def _to_int(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class StreamRecord:
    """
    A single stream entry of an ffprobe result.

    Wraps the raw stream dictionary produced by `ffmpeg.probe` and exposes the
    small interface the inspector needs: the stream type and string access to
    individual fields.
    """

    def __init__(self, data: Dict[str, Any]):
        self.data = data

    def is_video(self) -> bool:
        return self.data.get("codec_type") == "video"

    def is_audio(self) -> bool:
        return self.data.get("codec_type") == "audio"

    def get(self, field: str) -> str:
        """Returns the field as a string, or "" when ffprobe did not report it."""
        value = self.data.get(field)
        if value is None:
            return ""
        return str(value)

    def __repr__(self) -> str:
        return f"StreamRecord({self.data.get('codec_type')!r}, {self.get('codec_name')!r})"


@dataclass(frozen=True)
class StreamProfile:
    """
    Normalized summary of one media file's video and audio characteristics.

    Profiles are immutable. Missing values are empty strings or zero. Fields
    are filled "first non-empty wins": the first video stream of a file
    provides the video fields and the first audio stream the audio fields.
    `merge` applies the same precedence across several files.

    Attributes:
        has_video: True if the file contains at least one video stream.
        width, height: Dimensions of the first video stream.
        sample_aspect_ratio: Slash-separated ratio, e.g. "1/1".
        frame_rate: Rational frame rate as reported by ffprobe, e.g. "25/1".
        codec_name: Codec of the first video stream, e.g. "h264".
        pixel_format: Pixel format of the first video stream, e.g. "yuv420p".
        has_audio: True if the file contains at least one audio stream.
        channel_layout: Channel layout of the first audio stream, e.g. "stereo".
        sample_rate: Sample rate of the first audio stream, e.g. "44100".
        audio_codec_name: Codec of the first audio stream, e.g. "aac".
    """

    has_video: bool = False
    width: int = 0
    height: int = 0
    sample_aspect_ratio: str = ""
    frame_rate: str = ""
    codec_name: str = ""
    pixel_format: str = ""
    has_audio: bool = False
    channel_layout: str = ""
    sample_rate: str = ""
    audio_codec_name: str = ""

    @property
    def size(self) -> str:
        """The video size as "WxH", or "" when unknown."""
        if self.width and self.height:
            return f"{self.width}x{self.height}"
        return ""

    @classmethod
    def from_streams(cls, streams) -> "StreamProfile":
        """Builds a profile from a sequence of `StreamRecord` objects."""
        profile = cls()
        for stream in streams:
            if stream.is_video():
                profile = profile.merge(
                    cls(
                        has_video=True,
                        width=_to_int(stream.get("width")),
                        height=_to_int(stream.get("height")),
                        sample_aspect_ratio=normalize_sample_aspect_ratio(
                            stream.get("sample_aspect_ratio")
                        ),
                        frame_rate=stream.get("r_frame_rate"),
                        codec_name=stream.get("codec_name"),
                        pixel_format=stream.get("pix_fmt"),
                    )
                )
            if stream.is_audio():
                profile = profile.merge(
                    cls(
                        has_audio=True,
                        channel_layout=stream.get("channel_layout"),
                        sample_rate=stream.get("sample_rate"),
                        audio_codec_name=stream.get("codec_name"),
                    )
                )
        return profile

    def merge(self, other: "StreamProfile") -> "StreamProfile":
        """
        Returns a profile where every empty field of `self` is taken from `other`.

        Non-empty fields of `self` always win, so merging profiles in input
        order yields the "first non-empty wins" profile of the whole list.
        """
        updates = {}
        for f in fields(self):
            if not getattr(self, f.name) and getattr(other, f.name):
                updates[f.name] = getattr(other, f.name)
        if not updates:
            return self
        return replace(self, **updates)


def merge_profiles(profiles: Iterable[StreamProfile]) -> Optional[StreamProfile]:
    """Folds `StreamProfile.merge` over `profiles`; None for an empty sequence."""
    merged: Optional[StreamProfile] = None
    for profile in profiles:
        merged = profile if merged is None else merged.merge(profile)
    return merged
