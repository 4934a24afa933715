"""Whole-document JSON persistence.

Every store keeps its collection in a single JSON file that is read, changed
and written back as a whole. All access to one file goes through a lock
shared by every ``JsonDocument`` pointing at the same path, so writers inside
this process never lose each other's updates. Writers in other processes are
not arbitrated.
"""

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Iterator, Union

from contract_assistant.exceptions import PersistenceError

logger = logging.getLogger(__name__)

_locks: dict[str, threading.RLock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.RLock:
    """Get the process-wide lock for a document path"""
    key = str(path.resolve())
    with _locks_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.RLock()
        return lock


class JsonDocument:
    """A JSON file holding one collection, with a default for when it is absent"""

    def __init__(self, path: Union[str, Path], default: Callable[[], Any]):
        self.path = Path(path)
        self._default = default
        self.lock = _lock_for(self.path)

    def ensure_exists(self) -> bool:
        """Create the file with default contents if missing. Returns True if created."""
        with self.lock:
            if self.path.exists():
                logger.info(f"{self.path.name} exists")
                return False
            logger.info(f"Creating {self.path.name}...")
            self.write(self._default())
            return True

    def read(self) -> Any:
        """Read the whole collection.

        A missing or empty file reads as the default collection. A file that
        cannot be read or parsed raises PersistenceError rather than passing
        for an empty store, since the next write would wipe it.
        """
        with self.lock:
            try:
                text = self.path.read_text(encoding="utf-8")
            except FileNotFoundError:
                return self._default()
            except OSError as e:
                logger.exception(f"Error reading {self.path.name}")
                raise PersistenceError(f"Could not read {self.path.name}: {e}") from e

            if not text.strip():
                logger.warning(f"{self.path.name} is empty, using default value")
                return self._default()

            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                logger.exception(f"Corrupt JSON in {self.path.name}")
                raise PersistenceError(f"Corrupt JSON in {self.path.name}: {e}") from e

            expected = type(self._default())
            if not isinstance(data, expected):
                raise PersistenceError(
                    f"{self.path.name} should hold a JSON {expected.__name__}, "
                    f"found {type(data).__name__}"
                )
            return data

    def write(self, data: Any) -> None:
        """Replace the whole collection on disk"""
        with self.lock:
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                tmp_path.write_text(
                    json.dumps(data, indent=2, ensure_ascii=False),
                    encoding="utf-8",
                )
                tmp_path.replace(self.path)
            except (OSError, TypeError, ValueError) as e:
                logger.exception(f"Error writing {self.path.name}")
                raise PersistenceError(f"Could not write {self.path.name}: {e}") from e
            logger.debug(f"Wrote {self.path.name}")

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Read-modify-write under the document lock.

        The yielded collection is written back when the block exits normally;
        if the block raises, nothing is written.
        """
        with self.lock:
            data = self.read()
            yield data
            self.write(data)
