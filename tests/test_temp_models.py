import pytest

from conftest import leftover

from ffmpeg_util.domain.exceptions import ResourceException
from ffmpeg_util.domain.temp_models import TempWorkspace


def test_workspace_is_created_under_root_with_hint(temp_root):
    with TempWorkspace(temp_root, hint="concat") as workspace:
        assert workspace.dir.parent == temp_root.resolve()
        assert workspace.dir.name.startswith("concat_")
        assert workspace.path("list.txt") == workspace.dir / "list.txt"
    assert leftover(temp_root) == []


def test_workspaces_get_unique_names(temp_root):
    first = TempWorkspace(temp_root, hint="same")
    second = TempWorkspace(temp_root, hint="same")
    try:
        assert first.create() != second.create()
    finally:
        first.cleanup()
        second.cleanup()
    assert leftover(temp_root) == []


def test_tracked_artifacts_are_removed_on_success(tmp_path, temp_root):
    source = tmp_path / "a.jpg"
    source.write_bytes(b"jpeg")
    with TempWorkspace(temp_root) as workspace:
        copy = workspace.copy_in(source, "000000.jpg")
        manifest = workspace.write_text("list.txt", "file 'x'\n")
        assert copy.read_bytes() == b"jpeg"
        assert manifest.read_text(encoding="utf-8") == "file 'x'\n"
        assert workspace.artifacts == [copy, manifest]
    assert leftover(temp_root) == []
    assert source.exists()


def test_workspace_is_removed_when_the_operation_fails(temp_root):
    with pytest.raises(RuntimeError):
        with TempWorkspace(temp_root) as workspace:
            workspace.write_text("list.txt", "")
            raise RuntimeError("engine failed")
    assert leftover(temp_root) == []


def test_partial_copy_cleans_only_what_was_created(tmp_path, temp_root):
    good = tmp_path / "a.png"
    good.write_bytes(b"png")
    with pytest.raises(ResourceException):
        with TempWorkspace(temp_root) as workspace:
            workspace.copy_in(good, "000000.png")
            workspace.copy_in(tmp_path / "missing.png", "000001.png")
    assert leftover(temp_root) == []


def test_cleanup_twice_and_already_removed_items_are_tolerated(temp_root):
    workspace = TempWorkspace(temp_root)
    workspace.create()
    artifact = workspace.write_text("list.txt", "")
    workspace.track(workspace.path("never-created.mp4"))
    artifact.unlink()

    workspace.cleanup()
    workspace.cleanup()
    assert leftover(temp_root) == []


def test_untracked_files_do_not_keep_the_directory_alive(temp_root):
    with TempWorkspace(temp_root) as workspace:
        (workspace.dir / "ffmpeg2pass-0.log").write_text("stats")
    assert leftover(temp_root) == []


def test_creation_failure_raises_resource_exception(tmp_path):
    not_a_dir = tmp_path / "file"
    not_a_dir.write_text("")
    with pytest.raises(ResourceException):
        TempWorkspace(not_a_dir).create()


def test_path_requires_a_created_workspace():
    with pytest.raises(ResourceException):
        TempWorkspace().path("x")
