from pathlib import Path

import pytest

from ffmpeg_util.domain.exceptions import ProbeException
from ffmpeg_util.domain.media import StreamRecord
from ffmpeg_util.pipeline.media_pipeline import MediaPipeline
from ffmpeg_util.services.engine import EngineResult
from ffmpeg_util.services.stream_inspector import StreamInspector


def video_stream(codec="h264", width=1280, height=720, sar="1:1", fps="25/1", pix_fmt="yuv420p"):
    return {
        "codec_type": "video",
        "codec_name": codec,
        "width": width,
        "height": height,
        "sample_aspect_ratio": sar,
        "r_frame_rate": fps,
        "pix_fmt": pix_fmt,
    }


def audio_stream(layout="stereo", rate="44100", codec="aac"):
    return {
        "codec_type": "audio",
        "codec_name": codec,
        "channel_layout": layout,
        "sample_rate": rate,
    }


class FakeEngine:
    """Records every argument list; `on_execute` runs while the workspace still exists."""

    def __init__(self, success=True, output="", on_execute=None, fail_on_call=None):
        self.success = success
        self.output = output
        self.on_execute = on_execute
        self.fail_on_call = fail_on_call
        self.calls = []

    def execute(self, args):
        self.calls.append(list(args))
        if self.on_execute:
            self.on_execute(list(args))
        success = self.success
        if self.fail_on_call is not None and len(self.calls) == self.fail_on_call:
            success = False
        return EngineResult(success, self.output, 0 if success else 1, ["ffmpeg"] + list(args))


class FakeProbe:
    def __init__(self, streams=None, default=None):
        self.streams = {str(path): value for path, value in (streams or {}).items()}
        self.default = default
        self.probed = []

    def probe(self, path):
        self.probed.append(str(path))
        streams = self.streams.get(str(path), self.default)
        if streams is None:
            raise ProbeException(f"Failed to probe media file {path}")
        return [StreamRecord(s) for s in streams]


@pytest.fixture
def temp_root(tmp_path) -> Path:
    return tmp_path / "workspaces"


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def make_pipeline(temp_root):
    def factory(engine=None, probe=None):
        return MediaPipeline(
            engine=engine or FakeEngine(),
            inspector=StreamInspector(probe or FakeProbe()),
            temp_root=temp_root,
        )

    return factory


def leftover(root: Path):
    """Everything still present under a temp root."""
    if not root.exists():
        return []
    return list(root.iterdir())
