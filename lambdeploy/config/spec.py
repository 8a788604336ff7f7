#!/usr/bin/env python3
"""
Immutable lambda spec model.
Built once per invocation by config.validation.build_spec().
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


# Keys the workflow reads itself; everything else is passed through untouched.
RECOGNIZED_FUNCTION_KEYS = ('FunctionName', 'FunctionArn', 'Publish', 'Runtime')


@dataclass(frozen=True)
class NetworkConfig:
    subnet_ids: Tuple[str, ...]
    security_group_ids: Tuple[str, ...]

    @classmethod
    def from_dict(cls, data):
        return cls(
            subnet_ids=tuple(data.get('SubnetIds', [])),
            security_group_ids=tuple(data.get('SecurityGroupIds', [])),
        )

    def to_vpc_config(self):
        return {
            'SubnetIds': list(self.subnet_ids),
            'SecurityGroupIds': list(self.security_group_ids),
        }


@dataclass(frozen=True)
class FunctionConfig:
    """
    Function configuration with the fields the workflow depends on pulled out.
    Platform specific keys (Role, Handler, MemorySize, ...) stay in `extra`.
    """

    function_name: str
    function_arn: Optional[str] = None
    publish: bool = False
    runtime: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data):
        extra = {k: v for k, v in data.items() if k not in RECOGNIZED_FUNCTION_KEYS}
        return cls(
            function_name=data['FunctionName'],
            function_arn=data.get('FunctionArn'),
            publish=bool(data.get('Publish', False)),
            runtime=data.get('Runtime'),
            extra=MappingProxyType(extra),
        )

    @property
    def resource_ref(self):
        """Stable reference for update/alias calls: the ARN if known, else the name."""
        return self.function_arn or self.function_name

    def create_params(self):
        """Payload for the platform create call (FunctionArn is not a create parameter)."""
        params = {'FunctionName': self.function_name}
        if self.runtime is not None:
            params['Runtime'] = self.runtime
        params.update(self.extra)
        params['Publish'] = self.publish
        return params


@dataclass(frozen=True)
class DeploymentSpec:
    archive_path: str
    source_paths: Tuple[str, ...]
    remote_bucket: str
    remote_key_prefix: str
    function_config: FunctionConfig
    module_version: Optional[str] = None
    network_config: Optional[NetworkConfig] = None

    @property
    def remote_key(self):
        """Object key shared by the upload and the provisioning call."""
        return f"{self.remote_key_prefix}{Path(self.archive_path).name}"

    def resolved_archive_path(self, cwd=None):
        path = Path(self.archive_path)
        if path.is_absolute():
            return path
        return Path(cwd or Path.cwd()) / path

    def code_location(self):
        return {'S3Bucket': self.remote_bucket, 'S3Key': self.remote_key}
