from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

TEXT_MIME = "text/plain;charset=utf-8"


@dataclass(frozen=True)
class ClipEntry:
	"""Immutable snapshot of one recorded clipboard payload."""
	id: str
	mime: str
	payload: bytes
	created_at: datetime
	last_used_at: datetime


@dataclass(frozen=True)
class Favorite:
	"""User-configured text entry; lives in config, never in history."""
	label: str
	text: str

	@property
	def mime(self) -> str:
		return TEXT_MIME

	@property
	def payload(self) -> bytes:
		return self.text.encode("utf-8")


Selectable = Union[ClipEntry, Favorite]


@dataclass(frozen=True)
class MenuEntry:
	"""One picker line and what it stands for: a history id or a favorite."""
	line: str
	clip_id: Optional[str] = None
	favorite: Optional[Favorite] = None

	@property
	def is_favorite(self) -> bool:
		return self.favorite is not None
