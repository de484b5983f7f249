#!/usr/bin/env python3

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO, List, Optional

from clapboard.clipboard import ClipboardWriter, get_clipboard_writer
from clapboard.config import ClapboardConfig
from clapboard.errors import ClapboardError
from clapboard.models import Favorite, Selectable
from clapboard.services import (
    FavoritesService,
    LauncherPicker,
    Picker,
    SelectionService,
    StoreOutcome,
    StoreService,
)
from clapboard.storage import ContentStore, HistoryIndex
from clapboard.utils.mime import sniff_mime

logger = logging.getLogger("clapboard")


class ClapboardApp:
    """Wires the stores and services for one invocation."""

    def __init__(
        self,
        config: ClapboardConfig,
        picker: Optional[Picker] = None,
        clipboard: Optional[ClipboardWriter] = None,
    ):
        self.config = config
        self.content_store = ContentStore(config.blobs_dir)
        self.history = HistoryIndex(config.index_path, self.content_store, config.history_size)
        self._picker = picker
        self._clipboard = clipboard

    @property
    def picker(self) -> Picker:
        if self._picker is None:
            self._picker = LauncherPicker(self.config.launcher)
        return self._picker

    @property
    def clipboard(self) -> ClipboardWriter:
        if self._clipboard is None:
            self._clipboard = get_clipboard_writer(self.config)
        return self._clipboard

    def store(self, mime: str, payload: bytes, clipboard_state: Optional[str] = None) -> StoreOutcome:
        service = StoreService(self.content_store, self.history, store_empty=self.config.store_empty)
        return service.store(mime, payload, clipboard_state=clipboard_state)

    def select(self) -> Optional[Selectable]:
        service = SelectionService(
            self.content_store,
            self.history,
            FavoritesService(self.config.favorites),
            self.picker,
            self.clipboard,
            preview_length=self.config.preview_length,
        )
        return service.run()


def setup_logging(verbosity: int = 0) -> None:
    level_name = os.getenv("CLAPBOARD_LOG_LEVEL")
    if verbosity > 0:
        level = logging.DEBUG if verbosity > 1 else logging.INFO
    elif level_name:
        level = getattr(logging, level_name.upper(), logging.WARNING)
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s", stream=sys.stderr)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="clapboard",
        description="clapboard - clipboard history with an external picker",
    )

    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Configuration file (default: $CLAPBOARD_CONFIG or ~/.config/clapboard/config.toml)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log more (-v info, -vv debug)"
    )

    subparsers = parser.add_subparsers(dest="command")

    store_parser = subparsers.add_parser(
        "store",
        help="Record the payload on stdin (use as `wl-paste --watch clapboard store`)"
    )
    store_parser.add_argument(
        "-t", "--type",
        dest="mime",
        default=None,
        help="Mime type of the payload (default: $CLAPBOARD_MIME or sniffed)"
    )

    subparsers.add_parser(
        "select",
        help="Pick an entry with the launcher and copy it (default command)"
    )

    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "select"
    return args


def run_store(app: ClapboardApp, mime: Optional[str], stdin: BinaryIO, is_tty: bool) -> int:
    if is_tty:
        logger.info("stdin is a terminal, nothing to store")
        return 0

    payload = stdin.read()
    mime = (mime or os.getenv("CLAPBOARD_MIME") or sniff_mime(payload)).strip()
    try:
        outcome = app.store(mime, payload, clipboard_state=os.getenv("CLIPBOARD_STATE"))
    except ValueError as e:
        logger.error(f"Cannot store clipboard: {e}")
        return 2
    logger.debug(f"Store outcome: {outcome.value}")
    return 0


def run_select(app: ClapboardApp) -> int:
    chosen = app.select()
    if isinstance(chosen, Favorite):
        logger.info(f"Copied favorite {chosen.label!r}")
    elif chosen is not None:
        logger.info(f"Copied history entry {chosen.id[:12]}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = ClapboardConfig.from_env(config_path=args.config)
        app = ClapboardApp(config)
        if args.command == "store":
            return run_store(app, args.mime, sys.stdin.buffer, sys.stdin.isatty())
        return run_select(app)
    except ClapboardError as e:
        if e.exit_code:
            logger.error(str(e))
        else:
            logger.info(str(e))
        return e.exit_code
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
