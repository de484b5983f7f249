import hashlib
import logging
import os
import re
import time
from pathlib import Path
from typing import Iterable, List, Tuple

from clapboard.errors import NotFound, StoreIoError
from clapboard.storage.atomic import TMP_SUFFIX, atomic_write

logger = logging.getLogger(__name__)

CLIP_ID_RE = re.compile(r"^[0-9a-f]{64}$")

# Blobs younger than this may belong to a store invocation that has not
# recorded its id in the index yet.
GC_GRACE_SECONDS = 60.0

MAX_HEADER_BYTES = 256


def compute_clip_id(mime: str, payload: bytes) -> str:
    """Content address of a clip: SHA-256 over the mime type, a NUL and the payload."""
    digest = hashlib.sha256()
    digest.update(mime.encode("utf-8"))
    digest.update(b"\0")
    digest.update(payload)
    return digest.hexdigest()


def _check_mime(mime: str) -> None:
    if not mime or "\n" in mime or "\r" in mime or "\0" in mime:
        raise ValueError(f"invalid mime type: {mime!r}")
    if len(mime.encode("utf-8")) >= MAX_HEADER_BYTES:
        raise ValueError(f"invalid mime type: {mime!r}")


def _split_blob(path: Path, raw: bytes) -> Tuple[str, bytes]:
    header, sep, payload = raw.partition(b"\n")
    if not sep or not header:
        raise StoreIoError(f"blob {path} has no mime header")
    try:
        mime = header.decode("utf-8")
    except UnicodeDecodeError as e:
        raise StoreIoError(f"blob {path} has an unreadable mime header", e) from e
    return mime, payload


class ContentStore:
    """Content-addressed blob files, one per (mime, payload).

    Each blob is stored as ``<mime>\\n<payload bytes>`` in a file named by
    its :func:`compute_clip_id`.
    """

    def __init__(self, base_dir: Path):
        self.base_dir = base_dir

    def path_for(self, clip_id: str) -> Path:
        if not CLIP_ID_RE.match(clip_id):
            raise ValueError(f"not a clip id: {clip_id!r}")
        return self.base_dir / clip_id

    def put(self, mime: str, payload: bytes) -> str:
        _check_mime(mime)
        new_id = compute_clip_id(mime, payload)
        path = self.path_for(new_id)
        if path.exists():
            logger.debug(f"Blob {new_id[:12]} already stored")
            return new_id

        try:
            atomic_write(path, mime.encode("utf-8") + b"\n" + payload)
        except OSError as e:
            raise StoreIoError(f"could not write blob {path}", e) from e
        logger.debug(f"Stored blob {new_id[:12]} ({mime}, {len(payload)} bytes)")
        return new_id

    def get(self, clip_id: str) -> Tuple[str, bytes]:
        path = self.path_for(clip_id)
        try:
            raw = path.read_bytes()
        except FileNotFoundError as e:
            raise NotFound(clip_id, e) from e
        except OSError as e:
            raise StoreIoError(f"could not read blob {path}", e) from e

        return _split_blob(path, raw)

    def peek(self, clip_id: str, limit: int) -> Tuple[str, bytes, int]:
        """Return the mime type, up to ``limit`` payload bytes and the full payload size."""
        path = self.path_for(clip_id)
        try:
            with path.open("rb") as handle:
                raw = handle.read(limit + MAX_HEADER_BYTES)
                total = os.fstat(handle.fileno()).st_size
        except FileNotFoundError as e:
            raise NotFound(clip_id, e) from e
        except OSError as e:
            raise StoreIoError(f"could not read blob {path}", e) from e

        mime, payload = _split_blob(path, raw)
        return mime, payload[:limit], total - len(mime.encode("utf-8")) - 1

    def exists(self, clip_id: str) -> bool:
        return self.path_for(clip_id).is_file()

    def delete(self, clip_id: str) -> None:
        path = self.path_for(clip_id)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StoreIoError(f"could not delete blob {path}", e) from e
        logger.debug(f"Deleted blob {clip_id[:12]}")

    def ids(self) -> List[str]:
        if not self.base_dir.is_dir():
            return []
        return sorted(p.name for p in self.base_dir.iterdir() if CLIP_ID_RE.match(p.name))

    def collect_garbage(self, keep: Iterable[str]) -> List[str]:
        """Remove blobs not in ``keep`` and leftover temp files; return removed ids."""
        if not self.base_dir.is_dir():
            return []

        keep = set(keep)
        cutoff = time.time() - GC_GRACE_SECONDS
        removed: List[str] = []
        for path in self.base_dir.iterdir():
            is_blob = CLIP_ID_RE.match(path.name) is not None
            is_tmp = path.name.startswith(".") and path.name.endswith(TMP_SUFFIX)
            if not (is_blob or is_tmp) or path.name in keep:
                continue
            try:
                if path.stat().st_mtime > cutoff:
                    continue
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove unreferenced file {path}: {e}")
                continue
            if is_blob:
                removed.append(path.name)

        if removed:
            logger.info(f"Removed {len(removed)} unreferenced blob(s)")
        return removed
