"""
Lambda spec types and validation package.

This package contains the immutable spec model and the loader that
validates spec files against the JSON schema.
"""

__all__ = ['spec', 'validation']
