#!/usr/bin/env python3
"""
Base packager interface for function archives.
"""


class Packager:
    """Interface for packagers that turn a file set into one archive."""

    def archive(self, target_path, source_paths):
        """
        Produce a single archive at target_path.

        Args:
            target_path: Archive file to write (absolute)
            source_paths: Paths or glob patterns to include

        Returns:
            Path of the written archive
        """
        raise NotImplementedError("Subclasses must implement archive()")
