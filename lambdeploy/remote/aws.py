#!/usr/bin/env python3
"""AWS Lambda implementation of the function platform."""

from botocore.exceptions import BotoCoreError, ClientError

from .base import FunctionPlatform, LATEST_VERSION
from ..deployment.errors import PlatformError


class LambdaPlatform(FunctionPlatform):
    """Function platform backed by the boto3 lambda client."""

    def __init__(self, auth, config=None):
        config = config or {}
        self.auth = auth
        self.endpoint_url = config.get('endpoint_url')
        self._client = None

    def _get_client(self):
        """Lazy initialization of boto3 client."""
        if self._client is None:
            self._client = self.auth.session().client('lambda', endpoint_url=self.endpoint_url)
        return self._client

    def _call(self, operation, **kwargs):
        """Invoke a lambda API operation, mapping botocore failures to PlatformError."""
        try:
            client = self._get_client()
            return getattr(client, operation)(**kwargs)
        except ClientError as e:
            error = e.response.get('Error', {})
            raise PlatformError(operation, error.get('Message', str(e)), error.get('Code')) from e
        except BotoCoreError as e:
            raise PlatformError(operation, str(e)) from e

    def create_function(self, params, code, vpc_config=None):
        request = dict(params)
        request['Code'] = code
        if vpc_config:
            request['VpcConfig'] = vpc_config

        res = self._call('create_function', **request)
        return {
            'resource_id': res['FunctionArn'],
            'version': res.get('Version'),
            'last_modified': res.get('LastModified'),
        }

    def update_function_code(self, resource_ref, code, publish=False):
        res = self._call(
            'update_function_code',
            FunctionName=resource_ref,
            S3Bucket=code['S3Bucket'],
            S3Key=code['S3Key'],
            Publish=publish,
        )
        return {
            'resource_id': res.get('FunctionArn', resource_ref),
            'version': res.get('Version'),
            'last_modified': res.get('LastModified'),
        }

    def create_alias(self, resource_ref, name, function_version=LATEST_VERSION):
        res = self._call(
            'create_alias',
            FunctionName=resource_ref,
            Name=name,
            FunctionVersion=function_version,
        )
        return {
            'alias_arn': res.get('AliasArn'),
            'alias_version': res.get('FunctionVersion'),
        }
