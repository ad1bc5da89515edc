"""
Concat manifest model consumed by FFmpeg's concat demuxer.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import ValidationException


@dataclass(frozen=True)
class ManifestEntry:
    path: Path
    duration: Optional[float] = None


class ConcatManifest:
    """
    Ordered list of files (and optional per-file durations) for `-f concat`.

    Paths are resolved to absolute paths when added because FFmpeg resolves
    relative manifest entries against the manifest's directory, which is a
    temporary workspace rather than the caller's working directory.
    """

    def __init__(self):
        self.entries: List[ManifestEntry] = []

    def add(self, path: Union[str, Path], duration: Optional[float] = None) -> "ManifestEntry":
        if path is None or str(path).strip() == "":
            raise ValidationException("Manifest entries need a file path.")
        entry = ManifestEntry(Path(path).resolve(), duration)
        self.entries.append(entry)
        return entry

    def __len__(self) -> int:
        return len(self.entries)

    def render(self) -> str:
        """Renders the manifest text, one `file` line per entry plus optional `duration` lines."""
        lines = []
        for entry in self.entries:
            lines.append(f"file '{_quote(str(entry.path))}'")
            if entry.duration is not None:
                lines.append(f"duration {entry.duration:g}")
        return "\n".join(lines) + "\n"


def _quote(path: str) -> str:
    # Concat demuxer quoting: close the quote, emit an escaped quote, reopen.
    return path.replace("'", "'\\''")
