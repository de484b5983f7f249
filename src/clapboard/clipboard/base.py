import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List

from clapboard.errors import ClipboardWriteError

logger = logging.getLogger(__name__)

COPY_TIMEOUT = 2.0


class ClipboardWriter(ABC):
    """Puts a (mime, payload) pair on the system clipboard."""

    @abstractmethod
    def _set_clipboard(self, mime: str, payload: bytes) -> None:
        pass

    def set_clipboard(self, mime: str, payload: bytes) -> None:
        self._set_clipboard(mime, payload)
        logger.info(f"Clipboard set: {mime}, {len(payload)} bytes")

    def _run_command(self, command: List[str], payload: bytes) -> None:
        # stdout/stderr are not captured: copy tools fork a daemon that keeps
        # inherited pipes open and would block the read.
        try:
            subprocess.run(command, input=payload, check=True, timeout=COPY_TIMEOUT)
        except FileNotFoundError as e:
            raise ClipboardWriteError(f"clipboard tool {command[0]!r} is not installed", e) from e
        except subprocess.CalledProcessError as e:
            raise ClipboardWriteError(f"{command[0]} exited with status {e.returncode}", e) from e
        except (subprocess.TimeoutExpired, OSError) as e:
            raise ClipboardWriteError(f"could not run {command[0]}", e) from e
