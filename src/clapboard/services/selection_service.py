import logging
import re
from typing import List, Optional

from clapboard.clipboard.base import ClipboardWriter
from clapboard.errors import NotFound, SelectionCancelled, SelectionError, StoreIoError
from clapboard.models import ClipEntry, MenuEntry, Selectable
from clapboard.schemas import IndexRecord
from clapboard.services.favorites import FavoritesService
from clapboard.services.picker import Picker
from clapboard.storage import ContentStore, HistoryIndex
from clapboard.utils.mime import base_type, decode_preview, escape_line, human_size

logger = logging.getLogger(__name__)

_ORDINAL_RE = re.compile(r"^\s*(\d+): ")


def _truncate(text: str, limit: int, complete: bool = True) -> str:
    if complete and len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


class SelectionService:
    """Builds the picker menu, runs the picker and restores the chosen clip.

    Every menu line starts with its ordinal (``"3: ..."``). The picker's answer
    is mapped back through that ordinal into the side table built alongside
    the lines, so entries that render identically still resolve to the one
    that was picked.
    """

    def __init__(
        self,
        store: ContentStore,
        history: HistoryIndex,
        favorites: FavoritesService,
        picker: Picker,
        clipboard: ClipboardWriter,
        preview_length: int = 200,
    ) -> None:
        self.store = store
        self.history = history
        self.favorites = favorites
        self.picker = picker
        self.clipboard = clipboard
        self.preview_length = preview_length
        self._menu: List[MenuEntry] = []

    def build_menu(self) -> List[MenuEntry]:
        menu: List[MenuEntry] = []
        for favorite in self.favorites.list():
            line = f"{len(menu) + 1}: {FavoritesService.render(favorite)}"
            menu.append(MenuEntry(line=line, favorite=favorite))

        for record in self.history.records():
            body = self._render_history(record)
            if body is None:
                continue
            menu.append(MenuEntry(line=f"{len(menu) + 1}: {body}", clip_id=record.id))

        self._menu = menu
        return menu

    def _render_history(self, record: IndexRecord) -> Optional[str]:
        # Four bytes per character covers any UTF-8 text up to the preview limit.
        limit = self.preview_length * 4
        try:
            mime, prefix, size = self.store.peek(record.id, limit)
        except NotFound:
            logger.warning(f"History entry {record.id[:12]} has no stored content, skipping")
            return None
        except StoreIoError as e:
            logger.warning(f"Cannot read history entry {record.id[:12]}: {e}")
            return None

        complete = size <= limit
        text = decode_preview(mime, prefix, complete=complete)
        if text is not None:
            return _truncate(escape_line(text), self.preview_length, complete)

        stamp = record.created_at.astimezone().strftime("%Y-%m-%d %H:%M")
        return f"[{base_type(mime)}, {human_size(size)}, {stamp}]"

    def invoke(self, menu: Optional[List[MenuEntry]] = None) -> Optional[str]:
        menu = self._menu if menu is None else menu
        return self.picker.present([entry.line for entry in menu])

    def resolve(self, selection: str, menu: Optional[List[MenuEntry]] = None) -> Selectable:
        menu = self._menu if menu is None else menu
        match = _ORDINAL_RE.match(selection)
        if not match:
            raise SelectionError(f"launcher returned an unknown line: {selection!r}")
        ordinal = int(match.group(1))
        if not 1 <= ordinal <= len(menu):
            raise SelectionError(f"launcher returned an out-of-range entry: {selection!r}")

        entry = menu[ordinal - 1]
        if entry.favorite is not None:
            logger.debug(f"Selected favorite {entry.favorite.label!r}")
            return entry.favorite

        try:
            mime, payload = self.store.get(entry.clip_id)
        except NotFound:
            self.history.prune(entry.clip_id)
            raise
        record = self.history.record(entry.clip_id)
        return ClipEntry(
            id=entry.clip_id,
            mime=mime,
            payload=payload,
            created_at=record.created_at,
            last_used_at=record.last_used_at,
        )

    def run(self) -> Optional[Selectable]:
        """Full interactive round trip.

        Returns None when there is nothing to offer and raises
        :class:`SelectionCancelled` when the picker is closed without a choice.
        """
        menu = self.build_menu()
        if not menu:
            logger.info("Clipboard history is empty and no favorites are configured")
            return None

        selection = self.invoke(menu)
        if selection is None:
            raise SelectionCancelled("selection cancelled")

        chosen = self.resolve(selection, menu)
        self.clipboard.set_clipboard(chosen.mime, chosen.payload)
        return chosen
