"""
Deployment and orchestration package.

This package contains the create/update workflows, the version history
ledger and the command line entry point.
"""

__all__ = ['orchestrator', 'provisioner', 'history', 'identity', 'utils', 'errors']
