"""
Configuration settings related to video processing.

This module defines default encoding parameters, the mapping from probed codec
names to FFmpeg encoder names, and the parameters of the synthetic silent audio
used to fill gaps in filter-graph concatenation.
"""

# --- General Video Settings ---
DEFAULT_FRAME_RATE = "25"
DEFAULT_GIF_FRAME_RATE = 25
DEFAULT_VIDEO_CODEC = "libx264"
DEFAULT_PIXEL_FORMAT = "yuv420p"

# ffprobe reports "0:1" when the sample aspect ratio is unknown.
UNKNOWN_SAMPLE_ASPECT_RATIO = "0/1"
DEFAULT_SAMPLE_ASPECT_RATIO = "1/1"

# --- Encoder Settings ---
# Probed codec name -> encoder able to produce a stream with that codec.
VIDEO_CODEC_ENCODERS = {
    "h264": "libx264",
    "flv1": "flv",
    "hevc": "libx265",
    "mpeg4": "mpeg4",
    "vp8": "libvpx",
    "vp9": "libvpx-vp9",
    "av1": "libsvtav1",
    "mpeg2video": "mpeg2video",
}
AUDIO_CODEC_ENCODERS = {
    "aac": "aac",
    "mp3": "libmp3lame",
    "opus": "libopus",
    "vorbis": "libvorbis",
}

# --- Silent Audio Settings ---
# Duration (seconds) of each anullsrc input. The concat filter pads shorter
# audio segments with silence, so a short source is enough.
SILENT_AUDIO_DURATION = "0.1"
DEFAULT_CHANNEL_LAYOUT = "stereo"
DEFAULT_SAMPLE_RATE = "44100"
