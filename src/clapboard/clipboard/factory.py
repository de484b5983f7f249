import platform
from typing import Optional, Type

from clapboard.clipboard.base import ClipboardWriter
from clapboard.config import ClapboardConfig
from clapboard.errors import ClipboardWriteError


def get_clipboard_class() -> Type[ClipboardWriter]:
    system = platform.system()

    if system == "Linux" or system.endswith("BSD"):
        from clapboard.clipboard.linux import LinuxClipboard
        return LinuxClipboard
    elif system == "Darwin":
        from clapboard.clipboard.macos import MacOSClipboard
        return MacOSClipboard
    else:
        raise ClipboardWriteError(f"Platform '{system}' is not supported")


def get_clipboard_writer(config: Optional[ClapboardConfig] = None) -> ClipboardWriter:
    if config is not None and config.copy_command:
        from clapboard.clipboard.command import CommandClipboard
        return CommandClipboard(config.copy_command)
    clipboard_class = get_clipboard_class()
    return clipboard_class()
