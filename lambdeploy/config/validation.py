#!/usr/bin/env python3
"""
Lambda spec loading and validation.
Validates spec files (JSON or YAML) against the JSON schema and builds the
immutable DeploymentSpec the workflows run on.
"""

import json
from pathlib import Path

import jsonschema
import yaml

from .spec import DeploymentSpec, FunctionConfig, NetworkConfig
from ..deployment.errors import SpecLoadError

SCHEMA_FILE = Path(__file__).parent.parent / 'schemas' / 'lambda-spec-schema.json'
YAML_SUFFIXES = ('.yaml', '.yml')


def is_yaml_file(file_path):
    return Path(file_path).suffix.lower() in YAML_SUFFIXES


def load_document(file_path):
    """Load a JSON or YAML document. Returns (data, error)."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            if is_yaml_file(file_path):
                return yaml.safe_load(f), None
            return json.load(f), None
    except (yaml.YAMLError, json.JSONDecodeError, UnicodeDecodeError) as e:
        return None, f"Syntax error: {e}"
    except OSError as e:
        return None, str(e)


def load_schema():
    with open(SCHEMA_FILE, 'r', encoding='utf-8') as f:
        return json.load(f)


def validate_against_schema(spec):
    """
    Validate spec against the lambda spec JSON schema.
    Returns (is_valid, errors_list)
    """
    try:
        schema = load_schema()
    except (OSError, json.JSONDecodeError) as e:
        return False, [f"Error loading schema file: {e}"]

    validator = jsonschema.Draft7Validator(schema)
    errors = []
    for error in sorted(validator.iter_errors(spec), key=lambda e: list(e.path)):
        error_path = ' -> '.join(str(p) for p in error.path) if error.path else 'root'
        errors.append(f"Schema validation failed at '{error_path}': {error.message}")
    return len(errors) == 0, errors


def validate_spec(spec_file):
    """
    Validate a single lambda spec file.
    Returns (is_valid, errors_list)
    """
    spec_path = Path(spec_file)

    if not spec_path.exists():
        return False, [f"File not found: {spec_file}"]

    spec, err = load_document(spec_path)
    if err:
        return False, [err]

    if not spec:
        return False, ["Spec file is empty"]

    if not isinstance(spec, dict):
        return False, ["Spec file must contain an object at the top level"]

    return validate_against_schema(spec)


def build_spec(data):
    """Build the DeploymentSpec from an already validated spec document."""
    vpc = data.get('vpcconfig')
    return DeploymentSpec(
        archive_path=data['zipfile'],
        source_paths=tuple(data['files']),
        remote_bucket=data['s3bucket'],
        remote_key_prefix=data.get('s3keyprefix', ''),
        function_config=FunctionConfig.from_dict(data['lambdaconfig']),
        module_version=data.get('version'),
        network_config=NetworkConfig.from_dict(vpc) if vpc else None,
    )


def load_spec(spec_file):
    """Validate and load a lambda spec. Raises SpecLoadError."""
    is_valid, errors = validate_spec(spec_file)
    if not is_valid:
        raise SpecLoadError(f"Invalid lambda spec '{spec_file}': " + '; '.join(errors))

    data, _ = load_document(spec_file)
    return build_spec(data)
