from __future__ import annotations

from abc import ABC, abstractmethod


class BlobStore(ABC):
    """Port for the store holding uploaded listing images."""

    @abstractmethod
    def upload(self, key: str, content: bytes, content_type: str) -> str:
        """
        Store a binary payload under a unique key.

        Args:
            key: Unique object key (caller guarantees uniqueness)
            content: Raw bytes
            content_type: MIME type of the payload

        Returns:
            Publicly resolvable URL of the stored object
        """
        ...
