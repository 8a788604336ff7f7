#!/usr/bin/env python3
"""
Local storage backend for offline/development mode.
Objects are copied to <local_dir>/<bucket>/<key>.
"""

import shutil
from pathlib import Path

from .base import StorageBackend
from ..deployment.errors import UploadError


class LocalStorage(StorageBackend):
    """Local storage backend for offline/development mode."""

    def __init__(self, config):
        self.storage_dir = Path(config.get('local_dir', './local-storage'))

    def object_path(self, bucket, storage_key):
        return self.storage_dir / bucket / storage_key

    def upload_file(self, local_path, bucket, storage_key):
        destination = self.object_path(bucket, storage_key)
        print(f"Copying to local storage: {destination}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(local_path, destination)
        except OSError as e:
            raise UploadError(f"Error uploading '{local_path}' to '{bucket}': {e}") from e
        print("[OK] Uploaded")
        return f"file://{destination.resolve()}"
