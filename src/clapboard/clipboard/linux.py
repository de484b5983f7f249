import os
import shutil
from typing import List, Optional

from clapboard.clipboard.base import ClipboardWriter
from clapboard.errors import ClipboardWriteError
from clapboard.utils.mime import is_text_mime


class LinuxClipboard(ClipboardWriter):
    """wl-copy on Wayland, xclip on X11."""

    def _set_clipboard(self, mime: str, payload: bytes) -> None:
        strategies = (
            self._wayland_command,
            self._xclip_command,
        )

        for strategy in strategies:
            command = strategy(mime)
            if command:
                self._run_command(command, payload)
                return

        raise ClipboardWriteError("neither wl-copy nor xclip is available")

    def _wayland_command(self, mime: str) -> Optional[List[str]]:
        if not os.environ.get("WAYLAND_DISPLAY") or not shutil.which("wl-copy"):
            return None
        return ["wl-copy", "--type", mime]

    def _xclip_command(self, mime: str) -> Optional[List[str]]:
        if not shutil.which("xclip"):
            return None
        if is_text_mime(mime):
            # Let xclip advertise the usual text targets (UTF8_STRING, STRING, ...).
            return ["xclip", "-selection", "clipboard"]
        return ["xclip", "-selection", "clipboard", "-t", mime]
