"""A JSON list on disk shared by several kprint processes.

The worker, ``queue add --print-now`` and staff commands may all touch the
same file at once.  Every read-modify-write runs under an inter-process
lock, and writes land through a temp file and ``os.replace`` so a reader
never sees a truncated document.
"""

from __future__ import annotations

import json
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock

LOCK_TIMEOUT = 10.0


class JsonFileStore:

    def __init__(self, file_path: Path, lock_timeout: float = LOCK_TIMEOUT) -> None:
        self._file_path = file_path
        self._lock = FileLock(f"{file_path}.lock", timeout=lock_timeout)
        self._ensure_file()

    @property
    def path(self) -> Path:
        return self._file_path

    def load(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def persist(self, rows: list[dict]) -> None:
        with self._lock:
            self._replace(rows)

    @contextmanager
    def update(self) -> Iterator[list[dict]]:
        """Yield the stored rows for in-place edits, then write them back.

        Nothing is written if the block raises.
        """
        with self._lock:
            rows = self.load()
            yield rows
            self._replace(rows)

    def _replace(self, rows: list[dict]) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=self._file_path.parent, prefix=f".{self._file_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(rows, fh, indent=2)
                fh.write("\n")
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self._file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _ensure_file(self) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            if not self._file_path.exists():
                self._replace([])
