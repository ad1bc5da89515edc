"""
Main entry point for ffmpeg-util.

This script configures logging, parses command-line arguments and runs the
requested media operation.
"""

import sys
from typing import List, Optional

from loguru import logger

from ffmpeg_util.cli import build_pipeline, get_args, run_command
from ffmpeg_util.config.common import LOGGER_FORMAT
from ffmpeg_util.domain.exceptions import EngineException, FFmpegUtilException


def main(argv: Optional[List[str]] = None) -> int:
    """
    Runs one media operation and returns the process exit code.

    0 on success, 1 when the operation fails. FFmpeg's diagnostic output is
    logged for engine failures.
    """
    args = get_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level, format=LOGGER_FORMAT)
    logger.debug(f"Parsed arguments: {args}")

    pipeline = build_pipeline(args)
    try:
        run_command(pipeline, args)
    except EngineException as e:
        logger.error(f"{e}\n{e.output}")
        return 1
    except FFmpegUtilException as e:
        logger.error(str(e))
        return 1

    logger.success(f"'{args.command}' finished.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
