#!/usr/bin/env python3
"""
Resolves the operator name recorded with each deployment.
"""

import getpass
import os
import subprocess

GIT_IDENTITY_KEYS = ('github.user', 'user.name')


def _git_config(key):
    try:
        result = subprocess.run(
            ['git', 'config', key],
            capture_output=True, text=True
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def resolve_actor_identity(config=None):
    """
    First non-empty of: identity.user in the deployment config,
    LAMBDEPLOY_USER, git config github.user, git config user.name,
    the login name.
    """
    configured = ((config or {}).get('identity') or {}).get('user')
    if configured:
        return str(configured)

    env_user = os.environ.get('LAMBDEPLOY_USER', '').strip()
    if env_user:
        return env_user

    for key in GIT_IDENTITY_KEYS:
        value = _git_config(key)
        if value:
            return value

    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return 'unknown'
