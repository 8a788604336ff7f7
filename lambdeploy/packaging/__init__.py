"""
Packager factory and package exports.
"""

from .base import Packager
from .zip import ZipPackager

NODE_IMPLICIT_PATHS = ('package.json', 'node_modules')


def implicit_paths_for(function_config, config):
    """
    Dependency manifest and tree shipped with every archive.
    packaging.implicit_paths in the config wins; otherwise derived from the runtime.
    """
    configured = ((config or {}).get('packaging') or {}).get('implicit_paths')
    if configured is not None:
        return list(configured)

    runtime = (function_config.runtime or '').lower()
    if runtime.startswith('nodejs'):
        return list(NODE_IMPLICIT_PATHS)
    return []


def get_packager(config=None):
    """Factory function to create the packager."""
    return ZipPackager()


__all__ = ['Packager', 'ZipPackager', 'get_packager', 'implicit_paths_for']
