"""
This package contains the media pipeline of ffmpeg-util.

A pipeline orchestrates one media operation from start to finish: probing
inputs, choosing a concatenation strategy, building and running FFmpeg
commands, and cleaning up temporary workspaces.
"""
