#!/usr/bin/env python3
"""
Function provisioning workflows.

create: [package -> upload] -> create function -> [create alias] -> [new history]
update: [load history] -> [package -> upload] -> update function code -> [append history]

Every step is a blocking call on an injected collaborator. A failure stops the
workflow where it is: nothing already uploaded, created or aliased is undone,
and the history file is only written after the platform calls succeeded.

A spec without a module version has no history: update then neither requires
nor writes one, so the missing-history check only applies to versioned specs.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from . import history as ledger
from .errors import DeploymentError
from .identity import resolve_actor_identity
from ..packaging import implicit_paths_for
from ..remote import LATEST_VERSION


class ProvisionState(Enum):
    UNPROVISIONED = 'unprovisioned'
    CREATING = 'creating'
    CREATED = 'created'
    ALIASING = 'aliasing'
    ALIASED = 'aliased'
    EXISTING = 'existing'
    UPDATING = 'updating'
    UPDATED = 'updated'
    FAILED = 'failed'


TRANSITIONS = {
    None: {ProvisionState.UNPROVISIONED, ProvisionState.EXISTING},
    ProvisionState.UNPROVISIONED: {ProvisionState.CREATING},
    ProvisionState.CREATING: {ProvisionState.CREATED},
    ProvisionState.CREATED: {ProvisionState.ALIASING},
    ProvisionState.ALIASING: {ProvisionState.ALIASED},
    ProvisionState.EXISTING: {ProvisionState.UPDATING},
    ProvisionState.UPDATING: {ProvisionState.UPDATED},
}


class InvalidTransition(DeploymentError):
    stage = 'provision'


@dataclass(frozen=True)
class DeploymentResult:
    resource_id: str
    remote_version: Optional[str]
    last_modified: Optional[str]
    alias_version: Optional[str] = None
    history_path: Optional[str] = None


class Provisioner:
    """Runs one create or update workflow against the injected collaborators."""

    def __init__(self, packager, storage, platform, config=None, identity_resolver=None):
        self.packager = packager
        self.storage = storage
        self.platform = platform
        self.config = config or {}
        self.identity_resolver = identity_resolver or (lambda: resolve_actor_identity(self.config))
        self.state = None

    def _transition(self, new_state):
        if new_state is not ProvisionState.FAILED and new_state not in TRANSITIONS.get(self.state, ()):
            current = self.state.value if self.state else 'start'
            raise InvalidTransition(f"Cannot move from {current} to {new_state.value}")
        self.state = new_state

    def package_and_upload(self, spec):
        """Build the archive and push it to spec.remote_key. Returns the key used."""
        archive_path = spec.resolved_archive_path()
        sources = list(spec.source_paths) + implicit_paths_for(spec.function_config, self.config)

        print(f"Creating lambda function distribution package '{spec.archive_path}' "
              f"from [{', '.join(spec.source_paths)}]...")
        self.packager.archive(archive_path, sources)

        key = spec.remote_key
        print(f"Uploading '{spec.archive_path}' to '{spec.remote_bucket}' with key '{key}'...")
        self.storage.upload_file(archive_path, spec.remote_bucket, key)
        return key

    def create(self, spec, spec_path, stage=None, skip_upload=False):
        self._transition(ProvisionState.UNPROVISIONED)
        try:
            return self._create(spec, spec_path, stage, skip_upload)
        except DeploymentError:
            self.state = ProvisionState.FAILED
            raise

    def _create(self, spec, spec_path, stage, skip_upload):
        if skip_upload:
            print("Skipping packaging and upload, using the archive already in the bucket")
        else:
            self.package_and_upload(spec)

        function_config = spec.function_config
        vpc_config = spec.network_config.to_vpc_config() if spec.network_config else None

        self._transition(ProvisionState.CREATING)
        print(f"Creating lambda function '{function_config.function_name}'...")
        res = self.platform.create_function(
            function_config.create_params(), spec.code_location(), vpc_config
        )
        self._transition(ProvisionState.CREATED)
        resource_id = res['resource_id']
        print(f"[OK] Lambda function created with resource ARN '{resource_id}'")

        alias_version = None
        if stage:
            self._transition(ProvisionState.ALIASING)
            print(f"Creating alias '{stage}' for lambda function '{function_config.function_name}'...")
            alias = self.platform.create_alias(resource_id, stage, LATEST_VERSION)
            alias_version = alias['alias_version']
            self._transition(ProvisionState.ALIASED)
            print(f"[OK] Alias '{stage}' created -> {alias_version}")

        history_path = None
        if spec.module_version:
            record = ledger.make_record(res['version'], res['last_modified'], self.identity_resolver())
            history = ledger.new_history(spec.module_version, record, stage, alias_version)
            history_path = ledger.save_history(ledger.history_path_for(spec_path), history)

        return DeploymentResult(
            resource_id=resource_id,
            remote_version=res['version'],
            last_modified=res['last_modified'],
            alias_version=alias_version,
            history_path=str(history_path) if history_path else None,
        )

    def update(self, spec, spec_path, skip_upload=False):
        self._transition(ProvisionState.EXISTING)
        try:
            return self._update(spec, spec_path, skip_upload)
        except DeploymentError:
            self.state = ProvisionState.FAILED
            raise

    def _update(self, spec, spec_path, skip_upload):
        history_path = ledger.history_path_for(spec_path)
        history = None
        if spec.module_version:
            # An update presumes a previous create; check before any side effect.
            history = ledger.load_history(history_path)

        if skip_upload:
            print("Skipping packaging and upload, using the archive already in the bucket")
        else:
            self.package_and_upload(spec)

        function_config = spec.function_config
        self._transition(ProvisionState.UPDATING)
        print(f"Updating lambda function '{function_config.function_name}'...")
        res = self.platform.update_function_code(
            function_config.resource_ref, spec.code_location(), function_config.publish
        )
        self._transition(ProvisionState.UPDATED)
        print(f"[OK] Lambda function updated (version {res['version']})")

        saved = None
        if history is not None:
            record = ledger.make_record(res['version'], res['last_modified'], self.identity_resolver())
            history = ledger.append_record(history, spec.module_version, record)
            saved = ledger.save_history(history_path, history)

        return DeploymentResult(
            resource_id=res.get('resource_id', function_config.resource_ref),
            remote_version=res['version'],
            last_modified=res['last_modified'],
            history_path=str(saved) if saved else None,
        )
