#!/usr/bin/env python3
"""
Base interface for the remote function platform.
"""

LATEST_VERSION = '$LATEST'


class FunctionPlatform:
    """Interface for create/update/alias operations on remote functions."""

    def create_function(self, params, code, vpc_config=None):
        """
        Create a function.

        Returns:
            dict with resource_id, version, last_modified
        """
        raise NotImplementedError("Subclasses must implement create_function()")

    def update_function_code(self, resource_ref, code, publish=False):
        """Returns dict with resource_id, version, last_modified."""
        raise NotImplementedError("Subclasses must implement update_function_code()")

    def create_alias(self, resource_ref, name, function_version=LATEST_VERSION):
        """Returns dict with alias_arn, alias_version."""
        raise NotImplementedError("Subclasses must implement create_alias()")
