#!/usr/bin/env python3
"""
Lambda Deployment Orchestrator
Packages, uploads and provisions functions described by a lambda spec
"""

import argparse
import sys
from pathlib import Path

from .errors import DeploymentError, SpecMissing
from .history import history_exists, history_path_for
from .provisioner import Provisioner
from .utils import AuthContext, load_config, print_phase
from ..config.validation import load_spec
from ..packaging import get_packager
from ..remote import get_platform
from ..storage import get_storage_backend


def _require_spec(spec_file):
    if not spec_file:
        raise SpecMissing("No lambda spec given")
    return Path(spec_file)


def build_provisioner(config, auth):
    """Wire the default collaborators for a run."""
    return Provisioner(
        packager=get_packager(config),
        storage=get_storage_backend(config, auth),
        platform=get_platform(config, auth),
        config=config,
    )


def create_command(spec_file, stage=None, no_upload=False, profile=None, region=None, provisioner=None):
    """Create a new lambda function (and optionally a stage alias)."""
    spec_path = _require_spec(spec_file)
    spec = load_spec(spec_path)
    config = load_config()
    auth = AuthContext.from_args(profile, region, config)

    print_phase("CREATE", spec.function_config.function_name)
    print(f"Spec: {spec_path}, Stage: {stage or 'none'}, Auth: {auth.describe()}\n")

    provisioner = provisioner or build_provisioner(config, auth)
    result = provisioner.create(spec, spec_path, stage=stage, skip_upload=no_upload)

    if result.history_path:
        print(f"History: {result.history_path}")
    print("=" * 60)
    print(f"CREATE COMPLETE: {result.resource_id} (version {result.remote_version})")
    print("=" * 60)
    return result


def update_command(spec_file, skip_upload=False, profile=None, region=None, provisioner=None):
    """Update the code of an existing lambda function."""
    spec_path = _require_spec(spec_file)
    spec = load_spec(spec_path)
    config = load_config()
    auth = AuthContext.from_args(profile, region, config)

    print_phase("UPDATE", spec.function_config.function_name)
    print(f"Spec: {spec_path}, Auth: {auth.describe()}\n")

    provisioner = provisioner or build_provisioner(config, auth)
    result = provisioner.update(spec, spec_path, skip_upload=skip_upload)

    if result.history_path:
        print(f"History: {result.history_path}")
    print("=" * 60)
    print(f"UPDATE COMPLETE: {result.resource_id} (version {result.remote_version})")
    print("=" * 60)
    return result


def validate_command(spec_file):
    """Validate the lambda spec without touching any remote resource."""
    spec_path = _require_spec(spec_file)
    print_phase("VALIDATING LAMBDA SPEC")
    spec = load_spec(spec_path)
    history_path = history_path_for(spec_path)

    print("[OK] Spec is valid")
    print(f"  - Function: {spec.function_config.function_name}")
    print(f"  - Archive: {spec.archive_path} -> s3://{spec.remote_bucket}/{spec.remote_key}")
    print(f"  - Module version: {spec.module_version or 'none (history not recorded)'}")
    print(f"  - History: {history_path} ({'present' if history_exists(history_path) else 'absent'})")
    return spec


def build_parser():
    parser = argparse.ArgumentParser(
        prog='lambdeploy',
        description='Lambda Deployment Orchestrator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Package, upload, create the function and a 'dev' alias
  lambdeploy create specs/orders.json --stage dev

  # Create from an archive already in the bucket
  lambdeploy create specs/orders.json --no-upload --profile deploy --region eu-west-1

  # Package, upload and update the function code
  lambdeploy update specs/orders.json

  # Check a spec
  lambdeploy validate specs/orders.json
        """
    )
    subparsers = parser.add_subparsers(dest='command', metavar='command')
    subparsers.required = True

    create = subparsers.add_parser('create', help='Creates a new lambda function')
    create.add_argument('spec', nargs='?', help='Lambda spec file (JSON or YAML)')
    create.add_argument('-n', '--no-upload', '--disable-upload', dest='no_upload', action='store_true',
                        help='Skip creating the zip package and uploading it to S3')
    create.add_argument('-s', '--stage', '--stage-name', dest='stage', help='The stage alias to create')
    create.add_argument('-p', '--profile', '--auth-profile', dest='profile', help='The profile to use for deployment')
    create.add_argument('-r', '--region', help='The region in which to deploy the function')

    update = subparsers.add_parser('update', help='Updates an existing lambda function')
    update.add_argument('spec', nargs='?', help='Lambda spec file (JSON or YAML)')
    update.add_argument('-n', '--skip-upload', dest='skip_upload', action='store_true',
                        help='Skip creating the zip package and uploading it to S3')
    update.add_argument('-p', '--profile', '--auth-profile', dest='profile', help='The profile to use for deployment')
    update.add_argument('-r', '--region', help='The region in which to deploy the function')

    validate = subparsers.add_parser('validate', help='Validates a lambda spec')
    validate.add_argument('spec', nargs='?', help='Lambda spec file (JSON or YAML)')

    return parser


def main(argv=None):
    """Main entry point - parse command line and run the deployment."""
    args = build_parser().parse_args(argv)

    try:
        if args.command == 'create':
            create_command(args.spec, stage=args.stage, no_upload=args.no_upload,
                           profile=args.profile, region=args.region)
        elif args.command == 'update':
            update_command(args.spec, skip_upload=args.skip_upload,
                           profile=args.profile, region=args.region)
        elif args.command == 'validate':
            validate_command(args.spec)
    except DeploymentError as e:
        sys.stdout.flush()
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)

    sys.exit(0)


if __name__ == '__main__':
    main()
