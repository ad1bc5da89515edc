"""
Defines the temporary workspace used by multi-step media operations.
"""

import random
import shutil
import string
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from ..config.common import DEFAULT_WORKSPACE_HINT, WORKSPACE_RANDOM_LENGTH
from .exceptions import ResourceException


class TempWorkspace:
    """
    A uniquely named scratch directory plus the artifacts created inside it.

    Operations that need intermediate files (renumbered images, concat
    manifests, intermediate videos) open a workspace, create their artifacts
    through it, and rely on it to remove everything again, whether the
    operation succeeded or raised.

    Lifecycle:
    1. Entering the context creates `<root>/<hint>_<timestamp>_<random>`.
       `root` is the configured temp root; None means the system default.
    2. `copy_in()` / `write_text()` create artifacts and track them. An
       artifact is tracked only once it exists, so a failure halfway through
       a batch leaves exactly the already-created files to clean up.
    3. Leaving the context calls `cleanup()`: tracked artifacts are deleted,
       then the directory itself. Cleanup never raises; problems are logged.

    Attributes:
        root (Optional[Path]): Directory the workspace is created in.
        hint (str): Human-readable prefix of the directory name.
        dir (Optional[Path]): The workspace directory while it exists.
        artifacts (List[Path]): Tracked artifact paths, in creation order.
    """

    def __init__(self, root: Optional[Path] = None, hint: str = ""):
        self.root = Path(root) if root else None
        self.hint = hint or DEFAULT_WORKSPACE_HINT
        self.dir: Optional[Path] = None
        self.artifacts: List[Path] = []

    def __enter__(self) -> "TempWorkspace":
        self.create()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.cleanup()
        return False

    def create(self) -> Path:
        """
        Creates the workspace directory.

        Raises:
            ResourceException: If the root cannot be created or the directory
                               cannot be made.
        """
        timestamp = datetime.now().strftime("%Y%m%d%H%M%S%f")
        suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=WORKSPACE_RANDOM_LENGTH))
        prefix = f"{self.hint}_{timestamp}_{suffix}_"
        try:
            if self.root is not None:
                self.root.mkdir(parents=True, exist_ok=True)
            self.dir = Path(tempfile.mkdtemp(prefix=prefix, dir=self.root)).resolve()
        except OSError as e:
            raise ResourceException(f"Could not create temporary workspace under {self.root or 'system temp'}: {e}") from e
        logger.debug(f"Created temporary workspace {self.dir}")
        return self.dir

    def path(self, name: str) -> Path:
        """Returns the absolute path of `name` inside the workspace (nothing is created)."""
        if self.dir is None:
            raise ResourceException("Temporary workspace has not been created.")
        return self.dir / name

    def track(self, artifact: Union[str, Path]) -> Path:
        """Registers an artifact for removal at cleanup."""
        artifact = Path(artifact)
        if artifact not in self.artifacts:
            self.artifacts.append(artifact)
        return artifact

    def copy_in(self, source: Union[str, Path], name: str) -> Path:
        """
        Copies `source` into the workspace as `name` and tracks the copy.

        Raises:
            ResourceException: If the copy fails.
        """
        target = self.path(name)
        try:
            shutil.copyfile(source, target)
        except OSError as e:
            if target.exists():
                self.track(target)
            raise ResourceException(f"Could not copy {source} to {target}: {e}") from e
        return self.track(target)

    def write_text(self, name: str, content: str) -> Path:
        """
        Writes `content` to `name` inside the workspace and tracks the file.

        Raises:
            ResourceException: If the file cannot be written.
        """
        target = self.path(name)
        try:
            with target.open("w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            if target.exists():
                self.track(target)
            raise ResourceException(f"Could not write {target}: {e}") from e
        return self.track(target)

    def cleanup(self) -> None:
        """
        Removes every tracked artifact and the workspace directory.

        Safe to call more than once. Items that are already gone are skipped;
        any other failure is logged as a warning and otherwise ignored so it
        cannot mask the result of the operation that used the workspace.
        """
        for artifact in self.artifacts:
            try:
                artifact.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove temporary artifact {artifact}: {e}")
        self.artifacts = []

        if self.dir is None:
            return
        workspace_dir, self.dir = self.dir, None
        if not workspace_dir.exists():
            return
        try:
            workspace_dir.rmdir()
        except OSError:
            # Files written by FFmpeg itself are not tracked.
            logger.debug(f"Temporary workspace {workspace_dir} not empty, removing remaining content.")
            shutil.rmtree(workspace_dir, ignore_errors=True)
            if workspace_dir.exists():
                logger.warning(f"Could not remove temporary workspace {workspace_dir}")
            return
        logger.debug(f"Removed temporary workspace {workspace_dir}")
