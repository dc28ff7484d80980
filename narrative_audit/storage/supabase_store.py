from supabase import Client

from narrative_audit.logging.logger import Log
from narrative_audit.storage.base import BaseObjectStore, StoredObject
from narrative_audit.storage.exceptions import StorageError


class SupabaseObjectStore(BaseObjectStore):
    """Reads and writes objects in one Supabase Storage bucket."""

    def __init__(self, client: Client, bucket: str) -> None:
        self._client = client
        self._bucket = bucket

    @property
    def bucket(self) -> str:
        return self._bucket

    def get(self, path: str) -> bytes:
        try:
            data = self._client.storage.from_(self._bucket).download(path)
        except Exception as exc:
            raise StorageError(f"Failed to download {path}: {exc}") from exc
        if data is None:
            raise StorageError(f"Failed to download {path}: no data returned")
        Log.debug(f"Downloaded {len(data)} bytes from {self._bucket}/{path}")
        return data

    def put(self, path: str, data: bytes, content_type: str) -> StoredObject:
        bucket = self._client.storage.from_(self._bucket)
        try:
            bucket.upload(
                path,
                data,
                file_options={"content-type": content_type, "upsert": "false"},
            )
            public_url = bucket.get_public_url(path)
        except Exception as exc:
            raise StorageError(f"Failed to upload {path}: {exc}") from exc
        Log.info(f"Uploaded {len(data)} bytes to {self._bucket}/{path}")
        return StoredObject(path=path, public_url=public_url)
