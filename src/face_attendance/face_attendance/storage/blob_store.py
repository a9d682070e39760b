"""Key-value persistence of opaque named text records.

Each logical collection is one record, so a write always replaces a whole
collection. ``set_many`` commits several records at once or none of them.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional, Protocol

from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)


class BlobStore(Protocol):
    def get(self, name: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, name: str, body: str) -> None:
        raise NotImplementedError

    def delete(self, name: str) -> None:
        raise NotImplementedError

    def set_many(self, records: Mapping[str, Optional[str]]) -> None:
        """Write all ``records`` atomically; a ``None`` value deletes that name."""

        raise NotImplementedError


class InMemoryBlobStore:
    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._records: dict[str, str] = dict(initial or {})

    def get(self, name: str) -> Optional[str]:
        return self._records.get(name)

    def set(self, name: str, body: str) -> None:
        self.set_many({name: body})

    def delete(self, name: str) -> None:
        self.set_many({name: None})

    def set_many(self, records: Mapping[str, Optional[str]]) -> None:
        staged = dict(self._records)
        for name, body in records.items():
            if body is None:
                staged.pop(name, None)
            else:
                staged[name] = str(body)
        self._records = staged

    def names(self) -> list[str]:
        return sorted(self._records)


class JsonFileBlobStore:
    """All records in one JSON document, rewritten through a temp file and ``os.replace``."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except (OSError, ValueError) as e:
            raise StorageError(f"Cannot read data file {self._path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Data file {self._path} is not a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def _write_all(self, records: Mapping[str, str]) -> None:
        body = json.dumps(dict(records), ensure_ascii=False, indent=2)
        tmp_name = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=self._path.name, suffix=".tmp", dir=self._path.parent)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(body)
            os.replace(tmp_name, self._path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise StorageError(f"Cannot write data file {self._path}: {e}") from e

    def get(self, name: str) -> Optional[str]:
        return self._read_all().get(name)

    def set(self, name: str, body: str) -> None:
        self.set_many({name: body})

    def delete(self, name: str) -> None:
        self.set_many({name: None})

    def set_many(self, records: Mapping[str, Optional[str]]) -> None:
        staged = self._read_all()
        for name, body in records.items():
            if body is None:
                staged.pop(name, None)
            else:
                staged[name] = str(body)
        self._write_all(staged)
