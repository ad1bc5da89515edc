from unittest import mock

import main
from ffmpeg_util.cli import build_pipeline, get_args, run_command
from ffmpeg_util.domain.exceptions import EngineException, ValidationException
from ffmpeg_util.services.engine import EngineResult


def test_frame_command_dispatches_to_extract_frame():
    args = get_args(["frame", "in.mp4", "out.jpg", "--seek", "00:00:02", "-s", "320x240"])
    pipeline = mock.Mock()
    run_command(pipeline, args)
    pipeline.extract_frame.assert_called_once_with("in.mp4", "out.jpg", "00:00:02", "320x240")


def test_concat_commands_choose_strategy():
    pipeline = mock.Mock()
    run_command(pipeline, get_args(["concat", "out.mp4", "a.mp4", "b.mp4"]))
    run_command(pipeline, get_args(["concat-mixed", "out.mp4", "a.mp4", "b.flv"]))
    pipeline.concat_same_codec.assert_called_once_with(["a.mp4", "b.mp4"], "out.mp4")
    pipeline.concat_mixed_codec.assert_called_once_with(["a.mp4", "b.flv"], "out.mp4")


def test_append_image_command():
    pipeline = mock.Mock()
    run_command(pipeline, get_args(["append-image", "in.mp4", "end.png", "out.mp4", "-t", "3"]))
    pipeline.append_image_to_video.assert_called_once_with("in.mp4", "end.png", "3", "out.mp4")


def test_temp_dir_is_created_and_threaded_into_pipeline(tmp_path):
    temp_dir = tmp_path / "scratch"
    args = get_args(["--temp-dir", str(temp_dir), "--ffmpeg-dir", "/opt/ffmpeg", "concat", "o.mp4", "a.mp4"])
    assert temp_dir.is_dir()
    pipeline = build_pipeline(args)
    assert pipeline.temp_root == temp_dir.resolve()
    assert pipeline.engine.binary == "/opt/ffmpeg/ffmpeg"
    assert pipeline.inspector.probe_client.binary == "/opt/ffmpeg/ffprobe"


def test_main_returns_exit_codes():
    ok = mock.Mock()
    ok.extract_frame.return_value = EngineResult(True)
    with mock.patch("main.build_pipeline", return_value=ok):
        assert main.main(["frame", "in.mp4", "out.jpg", "--seek", "1"]) == 0

    failing = mock.Mock()
    failing.extract_frame.side_effect = EngineException("FFmpeg failed", EngineResult(False, "No such file"))
    with mock.patch("main.build_pipeline", return_value=failing):
        assert main.main(["frame", "in.mp4", "out.jpg", "--seek", "1"]) == 1

    invalid = mock.Mock()
    invalid.concat_same_codec.side_effect = ValidationException("At least one video is required.")
    with mock.patch("main.build_pipeline", return_value=invalid):
        assert main.main(["concat", "out.mp4", "a.mp4"]) == 1
