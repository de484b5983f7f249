import logging
from enum import Enum
from typing import Optional

from clapboard.storage import ContentStore, HistoryIndex, compute_clip_id

logger = logging.getLogger(__name__)

# Values of CLIPBOARD_STATE (set by `wl-paste --watch`) that must not be recorded.
SKIPPED_CLIPBOARD_STATES = {"sensitive", "nil", "clear"}


class StoreOutcome(Enum):
    STORED = "stored"
    PROMOTED = "promoted"
    DUPLICATE = "duplicate"
    EMPTY = "empty"
    SKIPPED = "skipped"


class StoreService:
    """Records newly copied payloads into the content store and history."""

    def __init__(self, store: ContentStore, history: HistoryIndex, store_empty: bool = False) -> None:
        self.content_store = store
        self.history = history
        self.store_empty = store_empty

    def store(self, mime: str, payload: bytes, clipboard_state: Optional[str] = None) -> StoreOutcome:
        if clipboard_state and clipboard_state.strip().lower() in SKIPPED_CLIPBOARD_STATES:
            logger.info(f"Not recording clipboard in state {clipboard_state!r}")
            return StoreOutcome.SKIPPED

        if not payload and not self.store_empty:
            logger.debug("Ignoring empty clipboard payload")
            return StoreOutcome.EMPTY

        new_id = compute_clip_id(mime, payload)
        front = self.history.front()
        if front is not None and front.id == new_id and self.content_store.exists(new_id):
            # Some watchers fire several events for one copy.
            self.history.record(new_id)
            logger.debug(f"Absorbed repeated copy of {new_id[:12]}")
            return StoreOutcome.DUPLICATE

        promoted = new_id in self.history
        self.content_store.put(mime, payload)
        self.history.record(new_id)
        logger.info(f"Clipboard {'promoted' if promoted else 'stored'}: {mime}, {len(payload)} bytes")
        return StoreOutcome.PROMOTED if promoted else StoreOutcome.STORED
