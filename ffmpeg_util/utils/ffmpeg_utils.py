"""
This module provides utility functions for running external tools like FFmpeg.
It includes a robust function for running command-line processes with logging
and a helper that renders an argument list as a copy-pasteable shell command.
"""

import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger


def display_command(cmd_list: Sequence[str]) -> str:
    """Quotes and joins an argument list for logging, using the platform's conventions."""
    cmd_list = [str(part) for part in cmd_list]
    if os.name == "nt":
        return subprocess.list2cmdline(cmd_list)
    return shlex.join(cmd_list)


def run_cmd(
    cmd_parts: Sequence[str],
    show_cmd: bool = False,
    cmd_log_file_path: Optional[Path] = None,
    timeout: Optional[float] = None,
) -> Optional[subprocess.CompletedProcess]:
    """
    Executes an external command and captures its output.

    This is a wrapper around `subprocess.run` that adds logging. The command
    is always passed as an argument list and never through a shell.

    Args:
        cmd_parts: The command to execute as a sequence of arguments. Non-string
                   tokens (numbers, paths) are converted with `str()`.
        show_cmd: If True, the command is logged at the DEBUG level before execution.
        cmd_log_file_path: If provided, the executed command string is appended
                           to this file.
        timeout: Optional timeout in seconds.

    Returns:
        A `subprocess.CompletedProcess` when the process ran (whatever its
        return code). Returns `None` if the command could not be started
        (e.g. the executable is missing) or timed out.
    """
    cmd_list: List[str] = [str(part) for part in cmd_parts]
    if not cmd_list:
        logger.error("run_cmd received an empty command list.")
        return None

    display_cmd_str = display_command(cmd_list)
    if show_cmd:
        logger.debug(f"Executing command: {display_cmd_str}")

    if cmd_log_file_path:
        try:
            cmd_log_file_path.parent.mkdir(parents=True, exist_ok=True)
            with cmd_log_file_path.open("a", encoding="utf-8") as cmd_f:
                cmd_f.write(display_cmd_str + "\n")
        except OSError as e:
            logger.error(f"Failed to write command to log file {cmd_log_file_path}: {e}")

    try:
        result = subprocess.run(
            cmd_list,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.error(
            f"Error: Command not found (e.g., '{cmd_list[0]}'). Ensure it's in your system's PATH or configured correctly."
        )
        return None
    except subprocess.TimeoutExpired:
        logger.error(f"Error: Command timed out after {timeout}s. Command: {display_cmd_str}")
        return None

    if result.stdout and len(result.stdout) > 500:
        logger.trace(f"Command stdout (truncated): {result.stdout[:500]}...")
    elif result.stdout:
        logger.trace(f"Command stdout: {result.stdout}")

    # FFmpeg writes progress and diagnostics to stderr even on success.
    if result.stderr and result.returncode != 0:
        logger.debug(f"Command stderr (error, rc={result.returncode}): {result.stderr}")
    elif result.stderr:
        logger.trace(f"Command stderr (non-error, rc={result.returncode}): {result.stderr}")

    return result
