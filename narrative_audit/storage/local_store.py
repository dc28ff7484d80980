from pathlib import Path
from urllib.parse import quote

from narrative_audit.logging.logger import Log
from narrative_audit.storage.base import BaseObjectStore, StoredObject
from narrative_audit.storage.exceptions import ObjectNotFoundError, StorageError


class LocalObjectStore(BaseObjectStore):
    """Stores objects as files under {files_root}/{bucket}/{path}.

    Used for local development and tests; public URLs are built from a
    configured base URL that is expected to serve the same directory.
    """

    FILES_ROOT = Path("/app/files")

    def __init__(
        self,
        bucket: str,
        public_base_url: str,
        files_root: Path | None = None,
    ) -> None:
        root = files_root if files_root is not None else self.FILES_ROOT
        self._bucket_root = (root / bucket).resolve()
        self._bucket = bucket
        self._public_base_url = public_base_url.rstrip("/")

    def get(self, path: str) -> bytes:
        file_path = self._resolve_path(path)
        if not file_path.is_file():
            raise ObjectNotFoundError(f"File not found: {path}")
        try:
            return file_path.read_bytes()
        except OSError as exc:
            raise StorageError(f"Failed to read {path}: {exc}") from exc

    def put(self, path: str, data: bytes, content_type: str) -> StoredObject:
        file_path = self._resolve_path(path)
        if file_path.exists():
            raise StorageError(f"Object already exists: {path}")
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to write {path}: {exc}") from exc
        Log.info(f"Stored {len(data)} bytes at {file_path}", content_type=content_type)
        return StoredObject(
            path=path,
            public_url=f"{self._public_base_url}/{self._bucket}/{quote(path)}",
        )

    def _resolve_path(self, path: str) -> Path:
        resolved = (self._bucket_root / path.lstrip("/")).resolve()
        if not resolved.is_relative_to(self._bucket_root):
            raise StorageError(f"Path escapes storage root: {path}")
        return resolved
