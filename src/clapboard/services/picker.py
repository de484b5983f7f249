import logging
import subprocess
from typing import List, Optional, Protocol, Sequence

from clapboard.errors import LauncherError

logger = logging.getLogger(__name__)

# dmenu-style launchers exit 1 when the user dismisses them.
CANCEL_EXIT_CODES = (0, 1)


class Picker(Protocol):
    def present(self, lines: Sequence[str]) -> Optional[str]:
        """Show ``lines`` and return the chosen one, or None when cancelled."""
        ...


class LauncherPicker:
    """Runs an external launcher: menu lines on stdin, chosen line on stdout."""

    def __init__(self, command: List[str]) -> None:
        if not command:
            raise ValueError("launcher command is empty")
        self.command = list(command)

    def present(self, lines: Sequence[str]) -> Optional[str]:
        data = "\n".join(lines).encode("utf-8")
        logger.debug(f"Starting launcher {self.command[0]} with {len(lines)} lines")
        try:
            result = subprocess.run(
                self.command,
                input=data,
                stdout=subprocess.PIPE,
                check=False,
            )
        except OSError as e:
            raise LauncherError(f"could not start launcher {self.command[0]!r}", e) from e

        if result.returncode < 0:
            raise LauncherError(f"{self.command[0]} was killed by signal {-result.returncode}")

        chosen = result.stdout.decode("utf-8", errors="replace").split("\n", 1)[0].rstrip("\r")
        if not chosen:
            if result.returncode in CANCEL_EXIT_CODES:
                return None
            raise LauncherError(f"{self.command[0]} exited with status {result.returncode}")
        if result.returncode != 0:
            raise LauncherError(f"{self.command[0]} exited with status {result.returncode}")
        return chosen

