"""
JSON File Progress Repository: Infrastructure adapter for a local JSON document.

Implements ProgressRepository on top of one file mapping item keys to
record objects in the camelCase format of ProgressRecord.to_dict().
"""

import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

from retenta.domain.progress.models import ProgressRecord
from retenta.domain.progress.ports import ProgressRepository

logger = logging.getLogger(__name__)


class JsonFileProgressRepository(ProgressRepository):
    """
    Stores every record in a single JSON file.

    Writes are serialized with an asyncio.Lock and land atomically
    (temp file + os.replace), so a crash never leaves a half-written file.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _load(self) -> dict[str, ProgressRecord]:
        if not self.path.exists():
            return {}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Corrupt progress file {self.path}: {e}") from e

        if not isinstance(raw, dict):
            raise ValueError(f"Corrupt progress file {self.path}: expected a JSON object")

        try:
            return {key: ProgressRecord.from_dict(data, item=key) for key, data in raw.items()}
        except ValueError as e:
            raise ValueError(f"Corrupt progress file {self.path}: {e}") from e

    def _dump(self, records: dict[str, ProgressRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {key: record.to_dict() for key, record in records.items()}

        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".progress-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _upsert(self, item: str, record: ProgressRecord) -> None:
        records = self._load()
        records[item] = record
        self._dump(records)

    # File I/O runs in a worker thread so the server's event loop stays free.

    async def get(self, item: str) -> ProgressRecord | None:
        records = await asyncio.to_thread(self._load)
        return records.get(item)

    async def set(self, item: str, record: ProgressRecord) -> None:
        async with self._lock:
            await asyncio.to_thread(self._upsert, item, record)
        logger.debug(f"Saved progress for {item} to {self.path}")

    async def all(self) -> dict[str, ProgressRecord]:
        return await asyncio.to_thread(self._load)
