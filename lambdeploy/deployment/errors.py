#!/usr/bin/env python3
"""
Errors raised by the deployment workflow.
Every stage failure is terminal; the CLI reports it and exits non-zero.
"""


class DeploymentError(Exception):
    """Base class for every aborting failure."""

    stage = 'deployment'

    def __str__(self):
        message = super().__str__()
        return f"[{self.stage}] {message}" if message else f"[{self.stage}] failed"


class SpecMissing(DeploymentError):
    stage = 'spec'


class SpecLoadError(DeploymentError):
    stage = 'spec'


class ConfigError(DeploymentError):
    stage = 'config'


class ArchiveError(DeploymentError):
    stage = 'package'


class UploadError(DeploymentError):
    stage = 'upload'


class PlatformError(DeploymentError):
    """Remote create/update/alias failure; keeps the platform's message verbatim."""

    stage = 'platform'

    def __init__(self, operation, message, code=None):
        self.operation = operation
        self.platform_message = message
        self.code = code
        detail = f"{code}: {message}" if code else message
        super().__init__(f"{operation} failed: {detail}")


class LedgerLoadError(DeploymentError):
    stage = 'history'


class LedgerWriteError(DeploymentError):
    stage = 'history'
