import shutil

from clapboard.clipboard.base import ClipboardWriter
from clapboard.errors import ClipboardWriteError
from clapboard.utils.mime import is_text_mime


class MacOSClipboard(ClipboardWriter):

    def _set_clipboard(self, mime: str, payload: bytes) -> None:
        if not is_text_mime(mime):
            raise ClipboardWriteError(f"pbcopy cannot set {mime} content")
        if not shutil.which("pbcopy"):
            raise ClipboardWriteError("pbcopy is not available")
        self._run_command(["pbcopy"], payload)
