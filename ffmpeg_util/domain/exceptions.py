"""
Defines custom exception types for ffmpeg-util.

These exceptions allow for specific error handling around media operations.
Instead of catching a generic `Exception`, callers can catch `ProbeException`
or `EngineException` and react accordingly (for example by showing the raw
FFmpeg diagnostic output that `EngineException` carries).

All custom exceptions inherit from the base `FFmpegUtilException`.
"""


class FFmpegUtilException(Exception):
    """Base class for all custom exceptions in ffmpeg-util."""

    pass


class ProbeException(FFmpegUtilException):
    """
    Raised when ffprobe cannot open or parse a media file.

    Probe failures are never retried; the operation that needed the probe
    data is aborted immediately.
    """

    pass


class ValidationException(FFmpegUtilException):
    """
    Raised when operation parameters are inconsistent or missing.

    For example, an image sequence whose files do not share one extension, an
    empty input list or a non-positive duration. Validation always happens
    before any subprocess is started.
    """

    pass


class EngineException(FFmpegUtilException):
    """
    Raised when an FFmpeg invocation does not report success.

    The `EngineResult` of the failed invocation is kept on the exception so
    the caller can inspect the command and FFmpeg's raw output.
    """

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result

    @property
    def output(self) -> str:
        return self.result.output if self.result is not None else ""


class ResourceException(FFmpegUtilException):
    """
    Raised when a temporary workspace or a file operation fails.

    Only failures while *creating* resources raise this exception. Failures
    while cleaning up are logged and ignored so they never mask the original
    outcome of an operation.
    """

    pass
