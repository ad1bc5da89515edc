"""
This module provides file-based logs that complement the console logger.

`ErrorLog` appends a human-readable record of every failed FFmpeg invocation
(command plus FFmpeg's diagnostic output) to a text file, which makes it easy
to replay a failing command by hand. Console logging goes through loguru.
"""

from pathlib import Path

from loguru import logger


class ErrorLog:
    """
    Handles the writing of error logs to a plain text file.

    Each call to `write` appends to the file, producing a chronological record
    of failures separated by a marker line.
    """

    DEFAULT_ERROR_FILENAME = "error.txt"
    linesep_marker: str = "=" * 50

    def __init__(self, error_log_dir: Path, filename: str = DEFAULT_ERROR_FILENAME):
        """
        Args:
            error_log_dir: The directory where the error log file will be stored.
                           It is created if it does not exist.
            filename: The name of the error log file (defaults to "error.txt").
        """
        self.log_dir: Path = Path(error_log_dir).resolve()
        self.log_file_path: Path = self.log_dir / filename

    def write(self, *error_messages: str):
        """
        Appends one or more messages, followed by a separator line.

        If the file cannot be written, the messages are sent to the console
        logger instead so they are not lost.
        """
        if not error_messages:
            return

        content_to_write = "\n".join(error_messages) + "\n" + self.linesep_marker + "\n"
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with self.log_file_path.open("a", encoding="utf-8") as f:
                f.write(content_to_write)
        except OSError as e:
            logger.error(f"Failed to write to error log {self.log_file_path}: {e}")
            logger.error("Original error messages attempted to log:")
            for msg in error_messages:
                logger.error(f"  - {msg}")
