"""
This package contains the core domain models of ffmpeg-util.

The domain layer represents the fundamental concepts of the media operations
this library performs. It is independent of the external tools: nothing in
here starts a subprocess or calls ffprobe.

Modules:
    command.py: `FFmpegCommand`, the ordered builder that keeps every flag
                next to its value and the output path last.
    exceptions.py: Custom exception types (`ProbeException`,
                   `ValidationException`, `EngineException`,
                   `ResourceException`).
    manifest.py: `ConcatManifest`, the file list read by FFmpeg's concat
                 demuxer.
    media.py: `StreamRecord` and `StreamProfile`, the normalized summary of a
              media file's streams.
    temp_models.py: `TempWorkspace`, the scoped scratch directory for
                    intermediate artifacts.
"""
