from .clip_entry import TEXT_MIME, ClipEntry, Favorite, MenuEntry, Selectable

__all__ = [
    "TEXT_MIME",
    "ClipEntry",
    "Favorite",
    "MenuEntry",
    "Selectable",
]
