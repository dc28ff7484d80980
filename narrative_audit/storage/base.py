from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StoredObject:
    path: str
    public_url: str


class BaseObjectStore(ABC):
    """Contract for a single bucket/namespace of a blob store."""

    @abstractmethod
    def get(self, path: str) -> bytes:
        """Return the raw bytes stored at path.

        Raises:
            StorageError: if the object is missing or cannot be read.
        """

    @abstractmethod
    def put(self, path: str, data: bytes, content_type: str) -> StoredObject:
        """Store bytes at path and return its publicly retrievable location.

        Raises:
            StorageError: if the object cannot be written.
        """
