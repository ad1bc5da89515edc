"""
Services Package for ffmpeg-util.

This package contains the service layer: the pieces that talk to the external
tools or turn domain objects into FFmpeg arguments.

- **Command builders (`command_builder`):** one pure function per operation,
  returning the FFmpeg argument list.
- **Engine (`FFmpegEngine`):** runs an argument list as a subprocess and
  reports success and FFmpeg's raw output.
- **Probing (`FFprobeClient`, `StreamInspector`):** runs ffprobe through
  ffmpeg-python and normalizes the result into a `StreamProfile`.
- **Logging service (`ErrorLog`):** appends failed commands and their output
  to a text file.
"""
