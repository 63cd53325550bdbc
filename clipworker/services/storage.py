"""Object storage (Supabase Storage) access.

The pipeline only needs two calls, described by the ``Storage`` protocol;
``SupabaseStorage`` is the production implementation.
"""

import logging
from pathlib import Path
from typing import Protocol

from supabase import Client, create_client

from clipworker.core.errors import UploadError

logger = logging.getLogger(__name__)


class Storage(Protocol):
    def upload(
        self,
        bucket: str,
        key: str,
        local_path: Path,
        content_type: str,
        overwrite: bool = True,
    ) -> None: ...

    def get_public_url(self, bucket: str, key: str) -> str: ...


class SupabaseStorage:
    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_settings(cls, settings) -> "SupabaseStorage":
        return cls(
            create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        )

    def upload(
        self,
        bucket: str,
        key: str,
        local_path: Path,
        content_type: str,
        overwrite: bool = True,
    ) -> None:
        """Upload a local file; the open handle is streamed, not read into memory."""
        logger.info("Uploading %s -> %s/%s", local_path, bucket, key)
        try:
            with open(local_path, "rb") as f:
                self.client.storage.from_(bucket).upload(
                    key,
                    f,
                    file_options={
                        "content-type": content_type,
                        "upsert": "true" if overwrite else "false",
                    },
                )
        except Exception as e:
            logger.error("Upload error: %s", e)
            raise UploadError(f"Upload failed: {e}") from e
        logger.info("Upload complete")

    def get_public_url(self, bucket: str, key: str) -> str:
        return self.client.storage.from_(bucket).get_public_url(key)
