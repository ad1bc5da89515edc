from pathlib import Path

import pytest

from ffmpeg_util.domain.exceptions import ValidationException
from ffmpeg_util.domain.manifest import ConcatManifest


def test_entries_are_resolved_to_absolute_paths(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    tmp_path = tmp_path.resolve()
    manifest = ConcatManifest()
    manifest.add("clips/a.mp4")
    manifest.add(tmp_path / "b.mp4")

    lines = manifest.render().splitlines()
    assert lines == [
        f"file '{tmp_path / 'clips' / 'a.mp4'}'",
        f"file '{tmp_path / 'b.mp4'}'",
    ]
    assert all(Path(entry.path).is_absolute() for entry in manifest.entries)


def test_durations_follow_their_file_line(tmp_path):
    tmp_path = tmp_path.resolve()
    manifest = ConcatManifest()
    manifest.add(tmp_path / "a.jpg", 1.67)
    manifest.add(tmp_path / "b.jpg", 2.0)
    assert manifest.render().splitlines() == [
        f"file '{tmp_path / 'a.jpg'}'",
        "duration 1.67",
        f"file '{tmp_path / 'b.jpg'}'",
        "duration 2",
    ]


def test_single_quotes_in_paths_are_escaped(tmp_path):
    tmp_path = tmp_path.resolve()
    manifest = ConcatManifest()
    manifest.add(tmp_path / "it's.mp4")
    assert manifest.render().strip() == f"file '{tmp_path}/it'\\''s.mp4'"


@pytest.mark.parametrize("blank", ["", " ", None])
def test_blank_entries_are_rejected(blank):
    manifest = ConcatManifest()
    with pytest.raises(ValidationException):
        manifest.add(blank)
    assert len(manifest) == 0
