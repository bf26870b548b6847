from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import quote

from autovista.ports.blob_store import BlobStore

logger = logging.getLogger(__name__)


class LocalBlobStore(BlobStore):
    """
    Blob store backed by a local directory.

    Objects are written to ``base_dir/key`` and served by the API under
    ``public_base_url/key``.
    """

    def __init__(self, base_dir: str, public_base_url: str) -> None:
        self.base = Path(base_dir)
        self.base.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")

    def upload(self, key: str, content: bytes, content_type: str) -> str:
        path = self.resolve_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)

        logger.info(
            "Blob stored",
            extra={"key": key, "size": len(content), "content_type": content_type},
        )
        return f"{self.public_base_url}/{quote(key)}"

    def resolve_path(self, key: str) -> Path:
        """
        Resolve an object key to a path under the base directory.

        Raises:
            ValueError: If the key escapes the base directory
        """
        base = self.base.resolve()
        path = (base / key).resolve()
        if base not in path.parents:
            raise ValueError(f"Invalid blob key: {key}")
        return path


class InMemoryBlobStore(BlobStore):
    """Keeps uploads in a dict. Used by tests and local demos."""

    def __init__(self, public_base_url: str = "memory://blobs") -> None:
        self.public_base_url = public_base_url.rstrip("/")
        self.objects: dict[str, bytes] = {}

    def upload(self, key: str, content: bytes, content_type: str) -> str:
        self.objects[key] = content
        return f"{self.public_base_url}/{key}"
