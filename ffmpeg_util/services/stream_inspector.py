"""
Stream inspection: turns probe results into `StreamProfile` objects.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from loguru import logger

from ..domain.exceptions import ValidationException
from ..domain.media import StreamProfile, merge_profiles
from .probe_client import FFprobeClient


@dataclass(frozen=True)
class InputInspection:
    """Profiles of several inputs, in input order, plus what concatenation needs from them."""

    profiles: List[StreamProfile]
    merged: StreamProfile
    audio_flags: List[bool]


class StreamInspector:
    """
    Builds normalized stream profiles for media files.

    The probing collaborator only needs a `probe(path)` method returning
    records with `is_video()`, `is_audio()` and `get(field)`, so tests can pass
    a fake instead of the ffprobe-backed `FFprobeClient`.
    """

    def __init__(self, probe_client: Optional[FFprobeClient] = None):
        self.probe_client = probe_client or FFprobeClient()

    def inspect(self, path: Union[str, Path]) -> StreamProfile:
        """
        Probes `path` and returns its profile.

        The first video stream provides size, sample aspect ratio, frame rate,
        codec and pixel format; the first audio stream provides channel
        layout, sample rate and audio codec. `ProbeException` from the probe
        collaborator propagates unchanged and is not retried.
        """
        streams = self.probe_client.probe(path)
        profile = StreamProfile.from_streams(streams)
        logger.debug(f"Stream profile for {Path(path).name}: {profile}")
        return profile

    def inspect_all(self, paths: Sequence[Union[str, Path]]) -> List[StreamProfile]:
        """Inspects every path in order; the first probe failure aborts the rest."""
        if not paths:
            raise ValidationException("At least one media file is required.")
        return [self.inspect(path) for path in paths]

    def inspect_many(self, paths: Sequence[Union[str, Path]]) -> InputInspection:
        """
        Inspects every path in order.

        The result carries each input's profile, the "first non-empty wins"
        profile merged across all inputs and a per-input audio presence flag.
        """
        profiles = self.inspect_all(paths)
        return InputInspection(
            profiles=profiles,
            merged=merge_profiles(profiles),
            audio_flags=[profile.has_audio for profile in profiles],
        )
