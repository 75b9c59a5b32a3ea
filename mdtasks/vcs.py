"""Git integration used before inserting a timestamped note."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .session import DocumentHost

logger = logging.getLogger(__name__)


class VersionControl(Protocol):
    """The narrow stage/commit interface the note flow needs."""

    def is_tracked(self, path: Path) -> bool: ...

    def stage(self, path: Path) -> bool: ...

    def commit(self, path: Path, message: str) -> bool: ...


class GitVersionControl:
    """VersionControl backed by the ``git`` executable."""

    def __init__(self, git: str = "git") -> None:
        self.git = git

    def _run(self, path: Path, *args: str) -> bool:
        cmd = [self.git, "-C", str(path.parent), *args]
        try:
            proc = subprocess.run(
                cmd,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            logger.warning("Could not run %s: %s", cmd[0], e)
            return False
        if proc.returncode != 0:
            logger.debug(
                "%s exited %d: %s", " ".join(cmd), proc.returncode, proc.stderr.strip()
            )
            return False
        return True

    def is_tracked(self, path: Path) -> bool:
        if shutil.which(self.git) is None:
            logger.debug("git executable not found")
            return False
        if not self._run(path, "rev-parse", "--is-inside-work-tree"):
            return False
        return self._run(path, "ls-files", "--error-unmatch", str(path))

    def stage(self, path: Path) -> bool:
        return self._run(path, "add", str(path))

    def commit(self, path: Path, message: str) -> bool:
        return self._run(path, "commit", "-m", message)


def commit_before_note(host: DocumentHost, vcs: VersionControl, timestamp: str) -> bool:
    """Commit the document with ``timestamp`` as the message.

    Failures are reported through the host and never raise.
    """
    path = host.source_path()
    if path is None or not vcs.is_tracked(path):
        logger.debug("%s is not tracked by git; skipping commit", path)
        return False

    host.save()

    if not vcs.stage(path):
        logger.warning("Failed to stage %s", path)
        host.notify("mdtasks: Failed to stage file for commit")
        return False

    if not vcs.commit(path, timestamp):
        logger.warning("Failed to commit %s", path)
        host.notify("mdtasks: Failed to commit file")
        return False

    logger.info("Committed %s as %r", path, timestamp)
    host.notify(f"mdtasks: Committed changes to git with timestamp: {timestamp}")
    return True
