"""
Remote function platform package (AWS Lambda).
"""

from .base import FunctionPlatform, LATEST_VERSION
from .aws import LambdaPlatform


def get_platform(config, auth):
    """Factory function to create the platform client."""
    return LambdaPlatform(auth, (config or {}).get('lambda') or {})


__all__ = ['FunctionPlatform', 'LambdaPlatform', 'LATEST_VERSION', 'get_platform']
