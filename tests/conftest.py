"""
PyTest fixtures and fakes for the deployment workflow tests.
"""

import json

import pytest

from lambdeploy.deployment.errors import ArchiveError, PlatformError, UploadError
from lambdeploy.deployment.provisioner import Provisioner
from lambdeploy.packaging import Packager
from lambdeploy.remote import FunctionPlatform, LATEST_VERSION
from lambdeploy.storage.base import StorageBackend


class FakePackager(Packager):
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def archive(self, target_path, source_paths):
        self.calls.append((str(target_path), list(source_paths)))
        if self.fail:
            raise ArchiveError("zip failed")
        return target_path


class FakeStorage(StorageBackend):
    def __init__(self, fail=False):
        self.uploads = []
        self.fail = fail

    def upload_file(self, local_path, bucket, storage_key):
        self.uploads.append((str(local_path), bucket, storage_key))
        if self.fail:
            raise UploadError("access denied")
        return f"s3://{bucket}/{storage_key}"


class FakePlatform(FunctionPlatform):
    """Records every call; versions and failures are configurable per test."""

    def __init__(self, version='3', update_version='4', alias_version=LATEST_VERSION,
                 fail_on=None, last_modified='2026-10-19T10:00:00.000+0000'):
        self.version = version
        self.update_version = update_version
        self.alias_version = alias_version
        self.fail_on = fail_on or set()
        self.last_modified = last_modified
        self.calls = []

    def _maybe_fail(self, operation):
        if operation in self.fail_on:
            raise PlatformError(operation, f"{operation} rejected", 'ResourceConflictException')

    def create_function(self, params, code, vpc_config=None):
        self.calls.append(('create_function', params, code, vpc_config))
        self._maybe_fail('create_function')
        return {
            'resource_id': f"arn:aws:lambda:us-east-1:123456789012:function:{params['FunctionName']}",
            'version': self.version,
            'last_modified': self.last_modified,
        }

    def update_function_code(self, resource_ref, code, publish=False):
        self.calls.append(('update_function_code', resource_ref, code, publish))
        self._maybe_fail('update_function_code')
        return {
            'resource_id': resource_ref,
            'version': self.update_version,
            'last_modified': self.last_modified,
        }

    def create_alias(self, resource_ref, name, function_version=LATEST_VERSION):
        self.calls.append(('create_alias', resource_ref, name, function_version))
        self._maybe_fail('create_alias')
        return {
            'alias_arn': f"{resource_ref}:{name}",
            'alias_version': self.alias_version,
        }

    def operations(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory with a src/ tree; no deployment config."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('LAMBDEPLOY_CONFIG', raising=False)
    monkeypatch.delenv('DEPLOYMENT_ENV', raising=False)
    src = tmp_path / 'src'
    src.mkdir()
    (src / 'handler.py').write_text("def handler(event, context):\n    return event\n")
    return tmp_path


@pytest.fixture
def spec_data():
    return {
        'zipfile': 'dist.zip',
        'files': ['src/'],
        's3bucket': 'b',
        's3keyprefix': 'fn/',
        'lambdaconfig': {
            'FunctionName': 'f1',
            'Runtime': 'python3.12',
            'Role': 'arn:aws:iam::123456789012:role/lambda-exec',
            'Handler': 'src/handler.handler',
        },
        'version': '0.1.0',
    }


@pytest.fixture
def write_spec(workdir):
    def _write(data, name='spec.json'):
        path = workdir / name
        path.write_text(json.dumps(data, indent=2))
        return path
    return _write


@pytest.fixture
def make_provisioner():
    def _make(packager=None, storage=None, platform=None, config=None, user='alice'):
        return Provisioner(
            packager=packager or FakePackager(),
            storage=storage or FakeStorage(),
            platform=platform or FakePlatform(),
            config=config or {},
            identity_resolver=lambda: user,
        )
    return _make
