"""Tests for configuration loading, AuthContext and identity resolution."""

import os

import pytest

from lambdeploy.deployment import identity
from lambdeploy.deployment.errors import ConfigError
from lambdeploy.deployment.utils import AuthContext, deep_merge, load_config, replacement_mode


class TestLoadConfig:

    def test_missing_default_config_means_defaults(self, workdir):
        assert load_config() == {}

    def test_reads_default_location(self, workdir):
        (workdir / 'config').mkdir()
        (workdir / 'config' / 'deployment-config.yaml').write_text("storage:\n  backend: s3\n")
        assert load_config() == {'storage': {'backend': 's3'}}

    def test_local_override_merged(self, workdir, monkeypatch):
        (workdir / 'config').mkdir()
        (workdir / 'config' / 'deployment-config.yaml').write_text(
            "storage:\n  backend: s3\n  local_dir: ./store\naws:\n  region: us-east-1\n"
        )
        (workdir / 'config' / 'deployment-config.local.yaml').write_text("storage:\n  backend: local\n")
        monkeypatch.setenv('DEPLOYMENT_ENV', 'local')

        assert load_config() == {
            'storage': {'backend': 'local', 'local_dir': './store'},
            'aws': {'region': 'us-east-1'},
        }

    def test_explicit_path_from_env(self, workdir, monkeypatch):
        path = workdir / 'custom.yaml'
        path.write_text("identity:\n  user: ci-bot\n")
        monkeypatch.setenv('LAMBDEPLOY_CONFIG', str(path))
        assert load_config() == {'identity': {'user': 'ci-bot'}}

    def test_explicit_path_missing(self, workdir, monkeypatch):
        monkeypatch.setenv('LAMBDEPLOY_CONFIG', str(workdir / 'nope.yaml'))
        with pytest.raises(ConfigError):
            load_config()

    def test_broken_yaml(self, workdir):
        (workdir / 'config').mkdir()
        (workdir / 'config' / 'deployment-config.yaml').write_text("storage: [\n")
        with pytest.raises(ConfigError):
            load_config()

    def test_non_utf8_config(self, workdir):
        (workdir / 'config').mkdir()
        (workdir / 'config' / 'deployment-config.yaml').write_bytes(b'aws:\n  region: \xff\n')
        with pytest.raises(ConfigError):
            load_config()


def test_deep_merge_does_not_mutate_base():
    base = {'a': {'b': 1, 'c': 2}, 'd': 3}
    merged = deep_merge(base, {'a': {'b': 10}})
    assert merged == {'a': {'b': 10, 'c': 2}, 'd': 3}
    assert base == {'a': {'b': 1, 'c': 2}, 'd': 3}


@pytest.mark.skipif(os.name != 'posix', reason="POSIX permission bits")
def test_replacement_mode_for_new_file_follows_umask(tmp_path):
    umask = os.umask(0o022)
    try:
        assert replacement_mode(tmp_path / 'new.json') == 0o644
    finally:
        os.umask(umask)


class TestAuthContext:

    def test_flags_win_over_config(self):
        auth = AuthContext.from_args('cli', None, {'aws': {'profile': 'cfg', 'region': 'eu-west-1'}})
        assert auth == AuthContext(profile='cli', region='eu-west-1')

    def test_describe(self):
        assert AuthContext().describe() == 'default credentials'
        assert AuthContext('ops', 'us-east-1').describe() == 'profile=ops, region=us-east-1'


class TestIdentity:

    def test_config_user_first(self, monkeypatch):
        monkeypatch.setenv('LAMBDEPLOY_USER', 'env-user')
        assert identity.resolve_actor_identity({'identity': {'user': 'cfg-user'}}) == 'cfg-user'

    def test_env_user(self, monkeypatch):
        monkeypatch.setenv('LAMBDEPLOY_USER', 'env-user')
        assert identity.resolve_actor_identity({}) == 'env-user'

    def test_git_identity(self, monkeypatch):
        monkeypatch.delenv('LAMBDEPLOY_USER', raising=False)
        values = {'github.user': None, 'user.name': 'Jo Dev'}
        monkeypatch.setattr(identity, '_git_config', lambda key: values[key])
        assert identity.resolve_actor_identity() == 'Jo Dev'

    def test_login_name_fallback(self, monkeypatch):
        monkeypatch.delenv('LAMBDEPLOY_USER', raising=False)
        monkeypatch.setattr(identity, '_git_config', lambda key: None)
        monkeypatch.setattr(identity.getpass, 'getuser', lambda: 'login')
        assert identity.resolve_actor_identity() == 'login'
