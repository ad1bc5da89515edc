import pytest

from ffmpeg_util.domain.exceptions import ValidationException
from ffmpeg_util.services import command_builder
from ffmpeg_util.services.command_builder import SilentAudio


def test_frame_extraction_matches_expected_argument_order():
    args = command_builder.build_frame_extraction("in.mp4", "out.jpg", "00:00:02", "320x240")
    assert args == ["-y", "-ss", "00:00:02", "-i", "in.mp4", "-vframes", "1", "-f", "image2", "-s", "320x240", "out.jpg"]


def test_frame_extraction_without_size_omits_size_flag():
    args = command_builder.build_frame_extraction("in.mp4", "out.jpg", 2.5)
    assert args == ["-y", "-ss", "2.5", "-i", "in.mp4", "-vframes", "1", "-f", "image2", "out.jpg"]


@pytest.mark.parametrize(
    "video, image, seek, size",
    [
        ("", "out.jpg", "1", ""),
        ("in.mp4", "", "1", ""),
        ("in.mp4", "out.jpg", "", ""),
        ("in.mp4", "out.jpg", "1", "big"),
    ],
)
def test_frame_extraction_validates_parameters(video, image, seek, size):
    with pytest.raises(ValidationException):
        command_builder.build_frame_extraction(video, image, seek, size)


def test_gif_extraction():
    args = command_builder.build_gif_extraction("in.mp4", "out.gif", "00:00:02", "5.0", "320x240", 10)
    assert args == [
        "-y", "-ss", "00:00:02", "-i", "in.mp4",
        "-t", "5.0", "-r", "10", "-f", "gif", "-s", "320x240", "out.gif",
    ]


def test_gif_extraction_requires_positive_duration():
    with pytest.raises(ValidationException):
        command_builder.build_gif_extraction("in.mp4", "out.gif", "0", 0)


def test_text_overlay_without_box():
    args = command_builder.build_text_overlay(
        "in.mp4", "out.mp4", "Hello", "/fonts/a.ttf", 24, "white", 10, "h-th-10", box_color="red"
    )
    assert args == [
        "-y", "-re", "-i", "in.mp4", "-vf",
        "drawtext=fontfile=/fonts/a.ttf:text='Hello':fontsize=24:fontcolor=white:x=10:y=h-th-10:alpha=1",
        "out.mp4",
    ]


def test_text_overlay_box_color_only_with_box():
    vf = command_builder.drawtext_filter("Hi", "a.ttf", 12, "black", 0, 0, 0.5, box=True, box_color="white@0.5")
    assert vf.endswith(":alpha=0.5:box=1:boxcolor=white@0.5")
    vf = command_builder.drawtext_filter("Hi", "a.ttf", 12, "black", 0, 0, 0.5, box=True)
    assert vf.endswith(":alpha=0.5:box=1")


def test_text_overlay_escapes_quotes():
    vf = command_builder.drawtext_filter("It's", "a.ttf", 12, "black", 0, 0)
    assert "text='It'\\\\\\''s'" in vf


def test_text_overlay_rejects_alpha_out_of_range():
    with pytest.raises(ValidationException):
        command_builder.build_text_overlay("in.mp4", "out.mp4", "x", "a.ttf", 12, "black", 0, 0, alpha=2)


def test_image_overlay_loads_logo_as_named_stream():
    args = command_builder.build_image_overlay("in.mp4", "out.mp4", "logo.png", 10, 20)
    assert args == ["-y", "-i", "in.mp4", "-vf", "movie=logo.png [logo]; [in][logo] overlay=10:20 [out]", "out.mp4"]


def test_images_to_video_input_frame_rate_is_count_over_duration():
    args = command_builder.build_images_to_video("/tmp/ws/%06d.jpg", 3, "out.mp4", 6)
    assert args == [
        "-y", "-framerate", "3/6", "-i", "/tmp/ws/%06d.jpg",
        "-r", "25", "-c:v", "libx264", "-pix_fmt", "yuv420p", "out.mp4",
    ]


def test_images_to_video_accepts_timestamp_duration():
    args = command_builder.build_images_to_video("%06d.jpg", 3, "out.mp4", "00:00:06")
    assert args[:3] == ["-y", "-framerate", "3/6"]


def test_images_to_video_can_drop_codec_and_pixel_format():
    args = command_builder.build_images_to_video("%06d.png", 2, "out.webm", 4.5, "30", "", "")
    assert args == ["-y", "-framerate", "2/4.5", "-i", "%06d.png", "-r", "30", "out.webm"]


def test_image_sequence_concat():
    args = command_builder.build_image_sequence_concat("/tmp/ws/list.txt", "out.mp4", "30")
    assert args == [
        "-y", "-f", "concat", "-safe", "0", "-i", "/tmp/ws/list.txt",
        "-r", "30", "-pix_fmt", "yuv420p", "out.mp4",
    ]


def test_looped_single_image_scales_and_adds_silent_audio():
    args = command_builder.build_looped_images(
        ["end.png"], "tmp.mp4", 3,
        size="1280x720", sample_aspect_ratio="1/1", codec="libx264", pixel_format="yuv420p",
        frame_rate="25/1", silent_audio=SilentAudio("stereo", "44100", "aac"),
    )
    assert args == [
        "-y",
        "-loop", "1", "-t", "3", "-i", "end.png",
        "-f", "lavfi", "-t", "3", "-i", "anullsrc=channel_layout=stereo:sample_rate=44100",
        "-vf", "scale=1280:720,setsar=1/1",
        "-map", "0:v", "-map", "1:a",
        "-c:v", "libx264", "-pix_fmt", "yuv420p", "-r", "25/1", "-c:a", "aac",
        "tmp.mp4",
    ]


def test_looped_images_without_options_is_minimal():
    args = command_builder.build_looped_images(["a.png"], "out.mp4", "2")
    assert args == ["-y", "-loop", "1", "-t", "2", "-i", "a.png", "out.mp4"]


def test_looped_multiple_images_are_joined_with_concat_filter():
    args = command_builder.build_looped_images(["a.png", "b.png"], "out.mp4", 5, size="640x480")
    assert args[:13] == [
        "-y",
        "-loop", "1", "-t", "2.5", "-i", "a.png",
        "-loop", "1", "-t", "2.5", "-i", "b.png",
    ]
    assert args[13:] == [
        "-filter_complex",
        "[0:v]scale=640:480[v0];[1:v]scale=640:480[v1];[v0][v1]concat=n=2:v=1:a=0[v]",
        "-map", "[v]",
        "out.mp4",
    ]


def test_looped_images_require_images():
    with pytest.raises(ValidationException):
        command_builder.build_looped_images([], "out.mp4", 3)


def test_concat_copy():
    args = command_builder.build_concat_copy("/tmp/ws/list.txt", "out.mp4")
    assert args == ["-y", "-f", "concat", "-safe", "0", "-i", "/tmp/ws/list.txt", "-c", "copy", "out.mp4"]


def test_filter_graph_has_one_label_pair_per_video():
    graph = command_builder.build_filter_graph(3, [0, 3, 2])
    assert graph == "[0:v][0:a][1:v][3:a][2:v][2:a] concat=n=3:v=1:a=1 [v] [a]"


def test_filter_graph_rejects_mismatched_audio_sources():
    with pytest.raises(ValidationException):
        command_builder.build_filter_graph(3, [0, 1])


def test_filter_graph_concat_redirects_missing_audio_to_silent_input():
    args = command_builder.build_filter_graph_concat(
        ["a.mp4", "b.mp4", "c.mp4"], [True, False, True], "stereo", "44100", "out.mp4"
    )
    assert args == [
        "-y",
        "-i", "a.mp4", "-i", "b.mp4", "-i", "c.mp4",
        "-f", "lavfi", "-t", "0.1", "-i", "anullsrc=channel_layout=stereo:sample_rate=44100",
        "-filter_complex", "[0:v][0:a][1:v][3:a][2:v][2:a] concat=n=3:v=1:a=1 [v] [a]",
        "-map", "[v]", "-map", "[a]",
        "out.mp4",
    ]


def test_filter_graph_concat_shares_one_silent_input_between_videos_without_audio():
    args = command_builder.build_filter_graph_concat(
        ["a.mp4", "b.mp4", "c.mp4"], [False, False, False], "mono", "22050", "out.mp4"
    )
    assert args.count("anullsrc=channel_layout=mono:sample_rate=22050") == 1
    assert args.count("lavfi") == 1
    graph = args[args.index("-filter_complex") + 1]
    assert graph == "[0:v][3:a][1:v][3:a][2:v][3:a] concat=n=3:v=1:a=1 [v] [a]"


def test_filter_graph_concat_without_missing_audio_adds_no_silence():
    args = command_builder.build_filter_graph_concat(["a.mp4", "b.mp4"], [True, True], "", "", "out.mp4")
    assert "lavfi" not in args
    assert args[args.index("-filter_complex") + 1] == "[0:v][0:a][1:v][1:a] concat=n=2:v=1:a=1 [v] [a]"
