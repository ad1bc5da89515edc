"""
The ffprobe boundary, implemented with ffmpeg-python's `ffmpeg.probe`.
"""

from pathlib import Path
from pprint import pformat
from typing import List, Union

import ffmpeg
from loguru import logger

from ..config.common import FFPROBE_BINARY
from ..domain.exceptions import ProbeException
from ..domain.media import StreamRecord


class FFprobeClient:
    """Runs ffprobe on a file and returns its streams as `StreamRecord` objects."""

    def __init__(self, binary: str = FFPROBE_BINARY):
        self.binary = binary

    def probe(self, path: Union[str, Path]) -> List[StreamRecord]:
        """
        Probes `path` and returns one record per stream, in file order.

        Raises:
            ProbeException: If the file is missing, ffprobe cannot be run, or
                            ffprobe cannot open or parse the file.
        """
        path = Path(path)
        if not path.exists():
            raise ProbeException(f"Media file not found: {path}")
        try:
            data = ffmpeg.probe(str(path), cmd=self.binary)
        except ffmpeg.Error as e:
            stderr = e.stderr.decode("utf-8", errors="replace") if isinstance(e.stderr, bytes) else e.stderr
            logger.error(f"ffmpeg.probe failed for {path}: {stderr}")
            raise ProbeException(f"Failed to probe media file {path}: {stderr}") from e
        except FileNotFoundError as e:
            raise ProbeException(f"ffprobe executable '{self.binary}' not found") from e
        except ValueError as e:
            # ffprobe produced output that is not valid JSON.
            raise ProbeException(f"Could not parse ffprobe output for {path}: {e}") from e

        logger.trace(f"Probe data for {path.name}:\n{pformat(data)}")
        return [StreamRecord(stream) for stream in data.get("streams", [])]
