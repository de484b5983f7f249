"""On-disk schema of the history index file.

history.json layout:
{
    "version": 1,
    "entries": [
        {
            "id": "<sha256 of mime + payload>",
            "created_at": "2026-10-18T12:45:00+00:00",
            "last_used_at": "2026-10-18T12:47:10+00:00"
        },
        ...
    ]
}

Entries are ordered most-recent-first.
"""

from datetime import datetime, timezone
from typing import List

from pydantic import BaseModel, Field

INDEX_VERSION = 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IndexRecord(BaseModel):
    id: str = Field(pattern=r"^[0-9a-f]{64}$")
    created_at: datetime = Field(default_factory=utcnow)
    last_used_at: datetime = Field(default_factory=utcnow)


class IndexFile(BaseModel):
    version: int = INDEX_VERSION
    entries: List[IndexRecord] = Field(default_factory=list)
