#!/usr/bin/env python3
"""
Version history ledger.

The ledger lives next to the lambda spec as <spec name>-history.<ext> and is
written in the spec's own format (JSON or YAML):

    versions: {<module version>: [{version, date, user}, ...]}
    aliases:  {<stage>: <function version>}

Records are only ever appended; the file is replaced atomically on save.
Concurrent runs against the same spec are not coordinated: the last writer wins.
"""

import copy
import json
import os
import tempfile
from pathlib import Path

import yaml

from .errors import LedgerLoadError, LedgerWriteError
from .utils import replacement_mode
from ..config.validation import is_yaml_file

UNVERSIONED_KEY = 'unversioned'


def history_path_for(spec_path):
    """<dir>/<name>.json -> <dir>/<name>-history.json"""
    spec_path = Path(spec_path).resolve()
    suffix = spec_path.suffix or '.json'
    return spec_path.with_name(f"{spec_path.stem}-history{suffix}")


def history_exists(path):
    return Path(path).is_file()


def parse_remote_version(raw):
    """Platform versions arrive as text; numeric ones become ints, others stay opaque."""
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    try:
        return int(text)
    except ValueError:
        return text


def make_record(remote_version, date, user):
    return {
        'version': parse_remote_version(remote_version),
        'date': date,
        'user': user,
    }


def new_history(module_version, record, stage=None, alias_version=None):
    history = {'versions': {module_version: [record]}}
    if stage:
        history['aliases'] = {stage: alias_version}
    return history


def append_record(history, module_version, record):
    """Return a copy of history with record appended under module_version."""
    updated = copy.deepcopy(history)
    versions = updated.setdefault('versions', {})
    versions.setdefault(module_version or UNVERSIONED_KEY, []).append(record)
    return updated


def _migrate_flat_versions(records):
    """Fold a flat record list into the keyed-by-module-version layout."""
    keyed = {}
    for entry in records:
        if not isinstance(entry, dict):
            raise LedgerLoadError(f"Unexpected history record: {entry!r}")
        module_version = entry.get('moduleVersion') or UNVERSIONED_KEY
        raw_version = entry.get('lambdaVersion', entry.get('version'))
        keyed.setdefault(module_version, []).append(
            make_record(raw_version, entry.get('date'), entry.get('user'))
        )
    return keyed


def _normalize(history, path):
    if not isinstance(history, dict):
        raise LedgerLoadError(f"History file {path} does not contain an object")

    versions = history.get('versions', {})
    if isinstance(versions, list):
        print(f"Migrating flat version list in {path} to per-module-version entries")
        history['versions'] = _migrate_flat_versions(versions)
    elif not isinstance(versions, dict):
        raise LedgerLoadError(f"History file {path} has an invalid 'versions' entry")
    else:
        history['versions'] = versions

    aliases = history.get('aliases')
    if aliases is not None and not isinstance(aliases, dict):
        raise LedgerLoadError(f"History file {path} has an invalid 'aliases' entry")
    return history


def load_history(path):
    """Load the ledger at path. Raises LedgerLoadError if missing or unreadable."""
    path = Path(path)
    if not path.is_file():
        raise LedgerLoadError(
            f"History file not found: {path} (run 'create' before 'update')"
        )

    try:
        with open(path, 'r', encoding='utf-8') as f:
            if is_yaml_file(path):
                history = yaml.safe_load(f)
            else:
                history = json.load(f)
    except (OSError, yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise LedgerLoadError(f"Error reading history file {path}: {e}") from e

    return _normalize(history, path)


def _serialize(path, history):
    if is_yaml_file(path):
        return yaml.safe_dump(history, default_flow_style=False, sort_keys=False)
    return json.dumps(history, indent=2) + '\n'


def save_history(path, history):
    """Write the ledger via a temp file in the same directory, then rename over the target."""
    path = Path(path)
    tmp_name = None
    try:
        content = _serialize(path, history)
        with tempfile.NamedTemporaryFile(
            'w', encoding='utf-8', dir=path.parent, prefix=f".{path.name}.", suffix='.tmp', delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(content)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, replacement_mode(path))
        os.replace(tmp_name, path)
    except (OSError, TypeError, ValueError, yaml.YAMLError) as e:
        if tmp_name and os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise LedgerWriteError(f"Error writing history file {path}: {e}") from e

    print(f"Saved history: {path}")
    return path
