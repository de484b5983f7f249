from typing import List

from clapboard.clipboard.base import ClipboardWriter


class CommandClipboard(ClipboardWriter):
    """User-configured copy command; ``{mime}`` in an argument is replaced by the mime type."""

    def __init__(self, command: List[str]):
        self.command = list(command)

    def _set_clipboard(self, mime: str, payload: bytes) -> None:
        self._run_command([arg.replace("{mime}", mime) for arg in self.command], payload)
