import os

import pytest

from clapboard.errors import NotFound, StoreIoError
from clapboard.storage import ContentStore, compute_clip_id


def test_put_get_returns_exact_bytes(content_store):
    payload = bytes(range(256)) + b"\n\r\n\x00tail"
    clip_id = content_store.put("application/octet-stream", payload)

    assert clip_id == compute_clip_id("application/octet-stream", payload)
    assert content_store.get(clip_id) == ("application/octet-stream", payload)
    assert content_store.exists(clip_id)


def test_same_content_same_id_without_rewrite(content_store):
    first = content_store.put("text/plain", b"hello")
    path = content_store.path_for(first)
    mtime = path.stat().st_mtime_ns
    os.utime(path, ns=(mtime - 10_000_000_000, mtime - 10_000_000_000))
    before = path.stat().st_mtime_ns

    second = content_store.put("text/plain", b"hello")

    assert first == second
    assert path.stat().st_mtime_ns == before
    assert content_store.ids() == [first]


def test_mime_type_is_part_of_identity(content_store):
    a = content_store.put("text/plain", b"same")
    b = content_store.put("text/html", b"same")

    assert a != b
    assert content_store.get(a)[0] == "text/plain"
    assert content_store.get(b)[0] == "text/html"


def test_id_separates_mime_from_payload():
    assert compute_clip_id("text/plain", b"a") != compute_clip_id("text/plai", b"na")


def test_get_missing_raises_not_found(content_store):
    missing = compute_clip_id("text/plain", b"never stored")
    with pytest.raises(NotFound) as exc:
        content_store.get(missing)
    assert exc.value.clip_id == missing


def test_delete_is_idempotent(content_store):
    clip_id = content_store.put("text/plain", b"bye")
    content_store.delete(clip_id)
    content_store.delete(clip_id)

    assert not content_store.exists(clip_id)


def test_corrupt_blob_is_an_io_error(content_store):
    clip_id = content_store.put("text/plain", b"fine")
    content_store.path_for(clip_id).write_bytes(b"no header at all")

    with pytest.raises(StoreIoError):
        content_store.get(clip_id)


def test_peek_reports_prefix_and_full_size(content_store):
    clip_id = content_store.put("image/png", b"\x89PNG" + b"x" * 5000)
    mime, prefix, size = content_store.peek(clip_id, 10)

    assert mime == "image/png"
    assert prefix == b"\x89PNGxxxxxx"
    assert size == 5004


@pytest.mark.parametrize("mime", ["", "text/plain\nX-Evil: 1", "a" * 300])
def test_rejects_unstorable_mime(content_store, mime):
    with pytest.raises(ValueError):
        content_store.put(mime, b"data")


def test_rejects_non_id_names(content_store):
    with pytest.raises(ValueError):
        content_store.get("../history.json")


def test_failed_write_leaves_no_partial_blob(content_store, monkeypatch):
    def boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", boom)

    with pytest.raises(StoreIoError):
        content_store.put("text/plain", b"lost")

    assert list(content_store.base_dir.iterdir()) == []


def test_collect_garbage_spares_recent_and_kept_blobs(content_store, monkeypatch):
    kept = content_store.put("text/plain", b"kept")
    orphan = content_store.put("text/plain", b"orphan")
    fresh = content_store.put("text/plain", b"fresh")
    for clip_id in (kept, orphan):
        path = content_store.path_for(clip_id)
        old = path.stat().st_mtime - 3600
        os.utime(path, (old, old))
    stray_tmp = content_store.base_dir / f".{kept}.01ABC.tmp"
    stray_tmp.write_bytes(b"partial")
    os.utime(stray_tmp, (0, 0))

    removed = content_store.collect_garbage(keep=[kept])

    assert removed == [orphan]
    assert content_store.exists(kept)
    assert content_store.exists(fresh)
    assert not stray_tmp.exists()


def test_empty_store_lists_nothing(tmp_path):
    store = ContentStore(tmp_path / "nowhere")
    assert store.ids() == []
    assert store.collect_garbage(keep=[]) == []
