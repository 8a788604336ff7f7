#!/usr/bin/env python3
"""
Base storage backend interface for function archives.
"""


class StorageBackend:
    """Base interface for storage backends."""

    def upload_file(self, local_path, bucket, storage_key):
        """Upload a local archive under exactly storage_key. Returns the object URL."""
        raise NotImplementedError
