import logging
import os
from pathlib import Path

from ulid import ULID

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".tmp"


def temp_path_for(target: Path) -> Path:
    # Dot-prefixed and unique per writer so concurrent writers never share a temp file.
    return target.with_name(f".{target.name}.{ULID()}{TMP_SUFFIX}")


def atomic_write(target: Path, data: bytes) -> None:
    """Write ``data`` to ``target`` so readers only ever see the old or the new file.

    The bytes go to a sibling temp file which is flushed, fsynced and then
    renamed over ``target``. On failure the temp file is removed and the
    original ``target`` is left as it was.
    """
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = temp_path_for(target)
    try:
        with open(tmp_path, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
    except BaseException:
        try:
            tmp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temp file {tmp_path}: {e}")
        raise
