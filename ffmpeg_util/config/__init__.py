"""
Configuration Package for ffmpeg-util.

This package centralizes the static configuration settings for the library.
By separating configuration from the application logic, it becomes easier to
manage and modify parameters without changing the core code.

This package includes settings for:
- Common settings like logging formats, temporary workspace naming and
  user-overridable paths for external tools like FFmpeg.
- Video defaults: frame rates, codecs, pixel formats, encoder mappings and the
  silent audio source used by filter-graph concatenation.
"""
