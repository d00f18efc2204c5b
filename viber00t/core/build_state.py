"""Persistent per-project build-state records."""

import fcntl
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from pydantic import ValidationError

from ..models.image import BuildStateRecord, CleanupResult
from ..utils.paths import state_home
from .constants import LOCK_SUFFIX, STATE_IMAGES_DIR, STATE_SUFFIX

logger = logging.getLogger(__name__)


class BuildStateStore:
    """Reads and writes one BuildStateRecord per project.

    Records are stored as JSON in ``<state_dir>/<project>.state``. A record
    that is missing, unreadable or malformed reads as ``None``.
    """

    def __init__(self, state_dir: Optional[Path] = None):
        self.state_dir = state_dir or (state_home() / STATE_IMAGES_DIR)

    def state_file(self, project_name: str) -> Path:
        return self.state_dir / f"{project_name}{STATE_SUFFIX}"

    def lock_file(self, project_name: str) -> Path:
        return self.state_dir / f"{project_name}{LOCK_SUFFIX}"

    def read(self, project_name: str) -> Optional[BuildStateRecord]:
        """Load the record for a project, or None if there is no usable one."""
        path = self.state_file(project_name)
        if not path.exists():
            return None
        try:
            record = BuildStateRecord.model_validate_json(path.read_text())
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable build state {path}: {e}")
            return None
        if record.project_name != project_name:
            logger.warning(f"Ignoring build state {path} recorded for '{record.project_name}'")
            return None
        return record

    def write(self, record: BuildStateRecord) -> None:
        """Persist a record, replacing any previous one atomically."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        path = self.state_file(record.project_name)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(record.model_dump_json(indent=2))
        tmp_path.replace(path)

    def delete(self, project_name: str) -> CleanupResult:
        """Remove a project's record; a missing record counts as success."""
        path = self.state_file(project_name)
        try:
            path.unlink(missing_ok=True)
            return CleanupResult.ok(str(path))
        except OSError as e:
            logger.warning(f"Failed to remove build state {path}: {e}")
            return CleanupResult.failed(str(path), e)

    @contextmanager
    def lock(self, project_name: str) -> Iterator[None]:
        """Hold an exclusive advisory lock on a project's build state."""
        self.state_dir.mkdir(parents=True, exist_ok=True)
        lock_path = self.lock_file(project_name)
        with lock_path.open("a+") as handle:
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
