#!/usr/bin/env python3
"""
Zip packager for function distribution archives.
"""

import glob
import os
import tempfile
import zipfile
from pathlib import Path

from .base import Packager
from ..deployment.errors import ArchiveError
from ..deployment.utils import replacement_mode


class ZipPackager(Packager):
    """Writes a deflated zip, keeping paths relative to the working directory."""

    def __init__(self, cwd=None):
        self.cwd = Path(cwd) if cwd else None

    def _base_dir(self):
        return (self.cwd or Path.cwd()).resolve()

    def expand_sources(self, source_paths):
        """Resolve every path/glob to existing entries. Raises ArchiveError on no match."""
        base = self._base_dir()
        resolved = []
        for source in source_paths:
            pattern = source if os.path.isabs(source) else str(base / source)
            matches = sorted(glob.glob(pattern, recursive=True))
            if not matches:
                raise ArchiveError(f"Source path not found: {source}")
            for match in matches:
                path = Path(match).resolve()
                if path not in resolved:
                    resolved.append(path)
        return resolved

    def _arcname(self, path, root):
        """Path inside the archive: relative to the working dir, else to the source's parent."""
        base = self._base_dir()
        try:
            return path.relative_to(base).as_posix()
        except ValueError:
            return path.relative_to(root.parent).as_posix()

    def _iter_files(self, source):
        if source.is_dir():
            for dirpath, dirnames, filenames in os.walk(source):
                dirnames.sort()
                for name in sorted(filenames):
                    yield Path(dirpath) / name
        else:
            yield source

    def archive(self, target_path, source_paths):
        target = Path(target_path)
        if not target.is_absolute():
            target = self._base_dir() / target
        sources = self.expand_sources(source_paths)

        tmp_name = None
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix='.tmp')
            os.close(fd)
            skip = {target.resolve(), Path(tmp_name).resolve()}
            written = set()

            with zipfile.ZipFile(tmp_name, 'w', zipfile.ZIP_DEFLATED) as zipf:
                for source in sources:
                    for file_path in self._iter_files(source):
                        if file_path.resolve() in skip:
                            continue
                        arcname = self._arcname(file_path, source)
                        if arcname in written:
                            continue
                        zipf.write(file_path, arcname=arcname)
                        written.add(arcname)

            os.chmod(tmp_name, replacement_mode(target))
            os.replace(tmp_name, target)
        except (OSError, zipfile.BadZipFile, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise ArchiveError(f"Error zipping file: {e}") from e

        print(f"[OK] Archive created: {target} ({len(written)} files)")
        return target
