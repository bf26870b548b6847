from __future__ import annotations

from pathlib import Path

import pytest

from autovista.adapters.local_blob_store import InMemoryBlobStore, LocalBlobStore


def test_upload_writes_file_and_returns_public_url(tmp_path: Path) -> None:
    store = LocalBlobStore(base_dir=str(tmp_path), public_base_url="http://cdn.test/blobs/")

    url = store.upload("user-1-front.jpg-abc", b"jpeg-bytes", "image/jpeg")

    assert url == "http://cdn.test/blobs/user-1-front.jpg-abc"
    assert (tmp_path / "user-1-front.jpg-abc").read_bytes() == b"jpeg-bytes"


def test_url_quotes_key(tmp_path: Path) -> None:
    store = LocalBlobStore(base_dir=str(tmp_path), public_base_url="http://cdn.test")

    url = store.upload("user-1-my photo.jpg-abc", b"x", "image/jpeg")

    assert url == "http://cdn.test/user-1-my%20photo.jpg-abc"


def test_key_cannot_escape_base_dir(tmp_path: Path) -> None:
    store = LocalBlobStore(base_dir=str(tmp_path / "blobs"), public_base_url="http://cdn.test")

    with pytest.raises(ValueError, match="Invalid blob key"):
        store.upload("../outside.jpg", b"x", "image/jpeg")


def test_in_memory_store_keeps_objects() -> None:
    store = InMemoryBlobStore()

    url = store.upload("k", b"data", "image/png")

    assert url == "memory://blobs/k"
    assert store.objects == {"k": b"data"}
