#!/usr/bin/env python3
"""
Deployment utilities - shared helper functions.
"""

import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import boto3
import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path("config") / "deployment-config.yaml"
LOCAL_OVERRIDE_NAME = "deployment-config.local.yaml"


@dataclass(frozen=True)
class AuthContext:
    """Credential profile and region passed to every remote call."""

    profile: Optional[str] = None
    region: Optional[str] = None

    @classmethod
    def from_args(cls, profile=None, region=None, config=None):
        """CLI flags win over the aws section of the deployment config."""
        aws = (config or {}).get('aws') or {}
        return cls(
            profile=profile or aws.get('profile'),
            region=region or aws.get('region'),
        )

    def session(self):
        return boto3.Session(profile_name=self.profile, region_name=self.region)

    def describe(self):
        parts = []
        if self.profile:
            parts.append(f"profile={self.profile}")
        if self.region:
            parts.append(f"region={self.region}")
        return ', '.join(parts) or 'default credentials'


def replacement_mode(path):
    """Permission bits for a file about to replace path: the existing file's, else the umask default."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def load_yaml(file_path):
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f)


def deep_merge(base, override):
    """Deep merge override dict into base dict."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def _read_config_file(path):
    try:
        return load_yaml(path) or {}
    except (OSError, yaml.YAMLError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error loading {path}: {e}") from e


def load_config(config_path=None):
    """
    Load configuration with optional local overrides.
    - Default: config/deployment-config.yaml under the working directory,
      or the file named by LAMBDEPLOY_CONFIG. A missing file means defaults.
    - DEPLOYMENT_ENV=local: merges deployment-config.local.yaml overrides
    """
    explicit = config_path or os.environ.get('LAMBDEPLOY_CONFIG', '').strip()
    base_path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH

    if base_path.exists():
        base_config = _read_config_file(base_path)
    elif explicit:
        raise ConfigError(f"Config file not found: {base_path}")
    else:
        base_config = {}

    env = os.environ.get('DEPLOYMENT_ENV', '').strip()
    if env == 'local':
        override_path = base_path.parent / LOCAL_OVERRIDE_NAME
        if override_path.exists():
            return deep_merge(base_config, _read_config_file(override_path))

    return base_config


def print_phase(phase_name, detail=None):
    """Helper to print phase headers."""
    print(f"\n{'='*60}")
    print(f"{phase_name} ({detail})" if detail else phase_name)
    print(f"{'='*60}")
