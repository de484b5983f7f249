from clapboard.clipboard.base import ClipboardWriter
from clapboard.clipboard.factory import get_clipboard_class, get_clipboard_writer

__all__ = [
    'ClipboardWriter',
    'get_clipboard_class',
    'get_clipboard_writer',
]
