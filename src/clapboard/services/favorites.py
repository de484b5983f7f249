from typing import List, Mapping

from clapboard.models import Favorite
from clapboard.utils.mime import escape_line

FAVORITE_MARKER = "★ "


class FavoritesService:
    """Favorites from the parsed configuration, in declaration order."""

    def __init__(self, favorites: Mapping[str, str]) -> None:
        self._favorites = dict(favorites)

    def list(self) -> List[Favorite]:
        return [Favorite(label=label, text=text) for label, text in self._favorites.items()]

    def __len__(self) -> int:
        return len(self._favorites)

    @staticmethod
    def render(favorite: Favorite) -> str:
        return f"{FAVORITE_MARKER}{escape_line(favorite.label)}"
