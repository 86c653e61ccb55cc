"""JSON file state store for the rolling-window record.

This module provides the StateStore class that handles:
- Loading the record, defaulting to an empty one when the file is absent
  or corrupt
- Atomic saves (write to a temp file, fsync, then os.replace)
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from pydantic import ValidationError

from votetracker.state.record import RollingRecord

logger = logging.getLogger(__name__)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


class StateSaveError(Exception):
    """Raised when the state file cannot be written."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        """Initialize StateSaveError.

        Args:
            message: Error description
            path: State file that could not be written
        """
        self.path = path
        super().__init__(message)


class StateStore:
    """File-backed persistence for a RollingRecord.

    The path is always passed in; see ``votetracker.paths`` for the default
    location.

    Args:
        path: Path to the JSON state file

    Example:
        >>> from votetracker.paths import get_default_state_path
        >>> store = StateStore(get_default_state_path())
        >>> record = store.load()
        >>> store.save(record)
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser().resolve()

    @property
    def exists(self) -> bool:
        """Check whether the state file is present."""
        return self.path.is_file()

    def load(self) -> RollingRecord:
        """Load the record from disk.

        Never raises: a missing, unreadable or malformed file yields the
        empty record.

        Returns:
            Loaded RollingRecord, or an empty one
        """
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("No state file at %s, starting empty", self.path)
            return RollingRecord()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Cannot read state file %s, starting empty: %s", self.path, e)
            return RollingRecord()

        try:
            record = RollingRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "State file %s is malformed (%d error(s)), starting empty",
                self.path,
                e.error_count(),
            )
            return RollingRecord()

        logger.debug(
            "Loaded state: %d row(s), %d participant(s)",
            record.row_count,
            len(record.vote_increments),
        )
        return record

    def _file_mode(self) -> int:
        """Mode for a fresh write: keep the existing file's, else honour the umask."""
        try:
            return stat.S_IMODE(self.path.stat().st_mode)
        except FileNotFoundError:
            return 0o666 & ~_current_umask()

    def save(self, record: RollingRecord) -> None:
        """Write the full record, replacing the previous file atomically.

        Args:
            record: Record to persist

        Raises:
            StateSaveError: If the file cannot be written
        """
        content = json.dumps(record.to_json_dict(), indent=2, ensure_ascii=False) + "\n"

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    os.fchmod(f.fileno(), self._file_mode())
                    f.write(content)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, self.path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)  # noqa: PTH108
                raise
        except OSError as e:
            msg = f"Cannot write state file: {e}"
            raise StateSaveError(msg, self.path) from e

        logger.debug("Saved state to %s", self.path)
