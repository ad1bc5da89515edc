"""
The FFmpeg engine boundary: runs a built argument list as a subprocess.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger

from ..config.common import COMMAND_TEXT, ERROR_LOG_DIR, FFMPEG_BINARY
from ..utils.ffmpeg_utils import display_command, run_cmd
from .logging_service import ErrorLog


@dataclass(frozen=True)
class EngineResult:
    """
    Outcome of one FFmpeg invocation.

    Attributes:
        success: True when FFmpeg exited with return code 0.
        output: FFmpeg's diagnostic output (stderr), or a description of why
                the process could not be run.
        returncode: The process return code; None if it never ran.
        command: The full command line, binary included.
    """

    success: bool
    output: str = ""
    returncode: Optional[int] = None
    command: List[str] = field(default_factory=list)


class FFmpegEngine:
    """
    Executes FFmpeg argument lists built by the command builders.

    Success is decided by the process return code only; FFmpeg's output is
    passed through untouched as `EngineResult.output`.
    """

    def __init__(
        self,
        binary: str = FFMPEG_BINARY,
        timeout: Optional[float] = None,
        error_log_dir: Optional[Path] = ERROR_LOG_DIR,
        command_log_dir: Optional[Path] = None,
    ):
        """
        Args:
            binary: Name or path of the ffmpeg executable.
            timeout: Optional per-invocation timeout in seconds. A timed out
                     invocation is reported as a failure.
            error_log_dir: Directory for `error.txt`; None disables it.
            command_log_dir: Directory for `cmd.txt`, which records every
                             executed command; None disables it.
        """
        self.binary = binary
        self.timeout = timeout
        self.error_log = ErrorLog(error_log_dir) if error_log_dir else None
        self.cmd_log_file_path = Path(command_log_dir) / COMMAND_TEXT if command_log_dir else None

    def execute(self, args: Sequence) -> EngineResult:
        command = [self.binary] + [str(arg) for arg in args]
        process = run_cmd(
            command,
            show_cmd=True,
            cmd_log_file_path=self.cmd_log_file_path,
            timeout=self.timeout,
        )
        if process is None:
            result = EngineResult(False, f"Could not run {self.binary}", None, command)
        else:
            result = EngineResult(process.returncode == 0, process.stderr or "", process.returncode, command)

        if not result.success:
            logger.error(f"FFmpeg failed (rc={result.returncode}): {display_command(command)}")
            if self.error_log:
                self.error_log.write(
                    f"Command: {display_command(command)}",
                    f"Return code: {result.returncode}",
                    result.output,
                )
        return result
