from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from clapboard.errors import StoreIoError
from clapboard.schemas import IndexFile, IndexRecord, utcnow
from clapboard.storage.atomic import atomic_write
from clapboard.storage.content_store import ContentStore

logger = logging.getLogger(__name__)


class HistoryIndex:
    """Most-recent-first list of clip ids, capped at ``history_size``.

    The whole list is rewritten atomically after every mutation. Each mutation
    starts from the file on disk, so entries recorded by another process since
    this one loaded are kept. Entries pushed off the tail have their blobs
    deleted from the content store.
    """

    def __init__(
        self,
        path: Path,
        store: ContentStore,
        history_size: int,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if history_size <= 0:
            raise ValueError("history_size must be > 0")
        self.path = path
        self.store = store
        self.history_size = history_size
        self._clock = clock
        self._records: List[IndexRecord] = []
        # Tail cut off at load time, evicted together with the next write.
        self._overflow: List[str] = []
        self._reload()

    def _reload(self) -> None:
        records = self._load()
        self._records = records[: self.history_size]
        self._overflow = [r.id for r in records[self.history_size :]]

    def _load(self) -> List[IndexRecord]:
        if not self.path.exists():
            return []

        try:
            raw = self.path.read_bytes()
        except OSError as e:
            logger.warning(f"Could not read history index {self.path}, starting empty: {e}")
            return []

        if not raw.strip():
            return []

        try:
            index = IndexFile.model_validate_json(raw)
        except (ValidationError, ValueError) as e:
            logger.warning(f"History index {self.path} is corrupt, starting empty: {e}")
            return []

        records: List[IndexRecord] = []
        seen = set()
        for record in index.entries:
            if record.id in seen:
                continue
            seen.add(record.id)
            records.append(record)
        return records

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, clip_id: str) -> bool:
        return self._position(clip_id) is not None

    def ids(self) -> List[str]:
        return [r.id for r in self._records]

    def records(self) -> List[IndexRecord]:
        return [r.model_copy() for r in self._records]

    def front(self) -> Optional[IndexRecord]:
        return self._records[0].model_copy() if self._records else None

    def get(self, clip_id: str) -> Optional[IndexRecord]:
        pos = self._position(clip_id)
        return self._records[pos].model_copy() if pos is not None else None

    def _position(self, clip_id: str) -> Optional[int]:
        for i, record in enumerate(self._records):
            if record.id == clip_id:
                return i
        return None

    def record(self, clip_id: str) -> IndexRecord:
        """Move ``clip_id`` to the front (or insert it there) and persist."""
        self._reload()
        now = self._clock()
        pos = self._position(clip_id)
        if pos is not None:
            entry = self._records.pop(pos)
            entry.last_used_at = now
        else:
            entry = IndexRecord(id=clip_id, created_at=now, last_used_at=now)
        self._records.insert(0, entry)
        self._write()
        return entry.model_copy()

    def prune(self, clip_id: str) -> bool:
        """Drop a stale id whose blob has gone missing and persist."""
        self._reload()
        pos = self._position(clip_id)
        if pos is None:
            return False
        self._records.pop(pos)
        logger.info(f"Pruned stale history entry {clip_id[:12]}")
        self._write()
        return True

    def _evict_overflow(self) -> List[str]:
        kept = set(self.ids())
        evicted = [clip_id for clip_id in self._overflow if clip_id not in kept]
        self._overflow = []
        while len(self._records) > self.history_size:
            evicted.append(self._records.pop().id)
        return evicted

    def _drop_missing(self) -> None:
        kept = [r for r in self._records if self.store.exists(r.id)]
        if len(kept) != len(self._records):
            logger.info(f"Dropped {len(self._records) - len(kept)} history entries with missing blobs")
            self._records = kept

    def _write(self) -> None:
        self._drop_missing()
        evicted = self._evict_overflow()

        data = IndexFile(entries=self._records).model_dump(mode="json")
        try:
            atomic_write(self.path, json.dumps(data, indent=2).encode("utf-8"))
        except OSError as e:
            raise StoreIoError(f"could not write history index {self.path}", e) from e

        # Blobs go only after the index no longer references them.
        for clip_id in evicted:
            self.store.delete(clip_id)
            logger.debug(f"Evicted {clip_id[:12]} from history")
        if evicted:
            self.store.collect_garbage(keep=self.ids())
