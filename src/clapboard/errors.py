"""Exceptions raised by clapboard components."""

from typing import Optional


class ClapboardError(Exception):
    """Base exception for all clapboard errors."""

    exit_code = 1

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        super().__init__(message)
        self.original_error = original_error

    def __str__(self):
        base_msg = super().__str__()
        if self.original_error:
            return f"{base_msg} (caused by {type(self.original_error).__name__}: {self.original_error})"
        return base_msg


class ConfigError(ClapboardError):
    """Configuration file could not be parsed or holds invalid values."""
    pass


class StoreIoError(ClapboardError):
    """A blob or index file could not be read or written."""
    pass


class NotFound(ClapboardError):
    """A content id does not resolve to a blob."""

    def __init__(self, clip_id: str, original_error: Optional[BaseException] = None):
        super().__init__(f"no stored clip with id {clip_id}", original_error)
        self.clip_id = clip_id


class LauncherError(ClapboardError):
    """The picker program failed to start or exited abnormally."""
    pass


class SelectionError(ClapboardError):
    """The picker returned a line that maps to no menu entry."""
    pass


class SelectionCancelled(ClapboardError):
    """The user closed the picker without choosing anything."""

    exit_code = 0


class ClipboardWriteError(ClapboardError):
    """The clipboard-set utility is missing or failed."""
    pass
