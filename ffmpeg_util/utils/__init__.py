"""
Utilities Package for ffmpeg-util.

Modules:
    - ffmpeg_utils.py: Runs external commands (FFmpeg) with logging and renders
      argument lists as shell commands for display.
    - format_utils.py: Formats numbers, durations and sizes into FFmpeg
      argument syntax.
"""
