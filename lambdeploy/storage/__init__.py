"""
Storage backend abstraction package.

This package provides abstraction for different storage backends
(local filesystem, S3) for function archives.
"""

from .local import LocalStorage
from .s3 import S3Storage
from ..deployment.errors import ConfigError


def get_storage_backend(config, auth):
    """Factory function to get appropriate storage backend."""
    storage_config = (config or {}).get('storage') or {}
    storage_mode = storage_config.get('backend', 's3')

    if storage_mode == 'local':
        return LocalStorage(storage_config)
    elif storage_mode == 's3':
        return S3Storage(auth, (config or {}).get('s3') or {})
    else:
        raise ConfigError(f"Unknown storage backend: {storage_mode}")


__all__ = ['LocalStorage', 'S3Storage', 'get_storage_backend']
