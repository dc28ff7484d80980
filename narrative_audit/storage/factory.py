from pathlib import Path

from supabase import Client, create_client

from narrative_audit.config.settings import Settings
from narrative_audit.storage.base import BaseObjectStore
from narrative_audit.storage.local_store import LocalObjectStore
from narrative_audit.storage.supabase_store import SupabaseObjectStore


class ObjectStoreFactory:
    """Creates object stores for the upload and report buckets."""

    BACKENDS = ("supabase", "local")

    @classmethod
    def create_upload_store(cls, settings: Settings) -> BaseObjectStore:
        return cls.create(settings, settings.upload_bucket)

    @classmethod
    def create_report_store(cls, settings: Settings) -> BaseObjectStore:
        return cls.create(settings, settings.report_bucket)

    @classmethod
    def create(cls, settings: Settings, bucket: str) -> BaseObjectStore:
        backend = settings.storage_backend.lower()
        if backend == "supabase":
            return SupabaseObjectStore(cls._supabase_client(settings), bucket)
        if backend == "local":
            return LocalObjectStore(
                bucket=bucket,
                public_base_url=settings.local_public_base_url,
                files_root=Path(settings.local_files_root),
            )
        raise ValueError(
            f"Unknown storage backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )

    @staticmethod
    def _supabase_client(settings: Settings) -> Client:
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "supabase_url and supabase_service_key are required for storage_backend=supabase"
            )
        return create_client(settings.supabase_url, settings.supabase_service_key)
