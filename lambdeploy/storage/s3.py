#!/usr/bin/env python3
"""S3 storage backend for function archives."""

from pathlib import Path

from boto3.exceptions import S3UploadFailedError
from botocore.exceptions import BotoCoreError, ClientError

from .base import StorageBackend
from ..deployment.errors import UploadError


class S3Storage(StorageBackend):
    """S3 storage backend; credentials come from the AuthContext profile."""

    def __init__(self, auth, config=None):
        config = config or {}
        self.auth = auth
        self.endpoint_url = config.get('endpoint_url')
        self._client = None

    def _get_client(self):
        """Lazy initialization of boto3 client."""
        if self._client is None:
            self._client = self.auth.session().client('s3', endpoint_url=self.endpoint_url)
        return self._client

    def _get_s3_url(self, bucket, storage_key):
        return f"s3://{bucket}/{storage_key}"

    def upload_file(self, local_path, bucket, storage_key):
        s3_url = self._get_s3_url(bucket, storage_key)
        if not Path(local_path).is_file():
            raise UploadError(f"Archive not found: {local_path}")

        print(f"Uploading to S3: {s3_url} ({self.auth.describe()})")
        try:
            self._get_client().upload_file(str(local_path), bucket, storage_key)
        except (S3UploadFailedError, ClientError, BotoCoreError) as e:
            raise UploadError(f"Error uploading '{local_path}' to '{bucket}': {e}") from e
        print("[OK] Uploaded")
        return s3_url
