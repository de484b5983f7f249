"""Shared fixtures: temp cache dirs, a scripted picker and a recording clipboard."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Sequence, Tuple, Union

import pytest

from clapboard.clipboard.base import ClipboardWriter
from clapboard.config import ClapboardConfig
from clapboard.models import TEXT_MIME
from clapboard.storage import ContentStore, HistoryIndex

Answer = Union[None, str, Callable[[List[str]], Optional[str]]]


class ScriptedPicker:
    """Answers from a fixed script instead of running a launcher."""

    def __init__(self, *answers: Answer) -> None:
        self._answers = list(answers)
        self.shown: List[List[str]] = []

    def present(self, lines: Sequence[str]) -> Optional[str]:
        self.shown.append(list(lines))
        if not self._answers:
            return None
        answer = self._answers.pop(0)
        if callable(answer):
            return answer(list(lines))
        return answer


class RecordingClipboard(ClipboardWriter):
    def __init__(self) -> None:
        self.calls: List[Tuple[str, bytes]] = []

    def _set_clipboard(self, mime: str, payload: bytes) -> None:
        self.calls.append((mime, payload))


class FakeClock:
    """Strictly increasing timestamps, one second apart."""

    def __init__(self) -> None:
        self.now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "cache"


@pytest.fixture
def config(cache_dir) -> ClapboardConfig:
    return ClapboardConfig(cache_dir=cache_dir, history_size=5)


@pytest.fixture
def content_store(config) -> ContentStore:
    return ContentStore(config.blobs_dir)


@pytest.fixture
def make_history(config, content_store, clock):
    def _make(history_size: int = 5) -> HistoryIndex:
        return HistoryIndex(config.index_path, content_store, history_size, clock=clock)

    return _make


@pytest.fixture
def history(make_history) -> HistoryIndex:
    return make_history()


@pytest.fixture
def put_text(content_store):
    def _put(text: str, mime: str = TEXT_MIME) -> str:
        return content_store.put(mime, text.encode("utf-8"))

    return _put


@pytest.fixture
def clipboard() -> RecordingClipboard:
    return RecordingClipboard()
