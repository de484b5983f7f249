from clapboard.storage.content_store import ContentStore, compute_clip_id
from clapboard.storage.history_index import HistoryIndex

__all__ = [
    "ContentStore",
    "HistoryIndex",
    "compute_clip_id",
]
