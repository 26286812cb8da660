"""
Recursive file discovery for the duplicate finder.

Walks a directory tree and returns one FileRecord per regular file found.
Symlinks and special files are skipped. Unreadable subtrees and entries
are collected as warnings instead of aborting the scan.
"""

import os
import stat
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


class ScanError(Exception):
    """Raised when the scan root is missing or is not a directory."""


@dataclass(frozen=True)
class FileRecord:
    path: Path
    size: int
    mtime_ns: int = 0
    signature: Optional[str] = None


@dataclass
class ScanResult:
    root: Path
    files: List[FileRecord] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_root(root):
    path = Path(root)
    if not path.exists():
        raise ScanError(f"Invalid directory: {path} does not exist")
    if not path.is_dir():
        raise ScanError(f"Invalid directory: {path} is not a directory")
    return path


def scan_directory(root):
    """Collect every regular file under root with its size and mtime."""
    root = validate_root(root)
    result = ScanResult(root=root)

    def on_walk_error(err):
        # os.walk skips the subtree after reporting it here
        result.warnings.append(f"Cannot enter {err.filename}: {err.strerror}")

    for dirpath, _, filenames in os.walk(root, onerror=on_walk_error):
        for name in filenames:
            full_path = Path(dirpath) / name
            try:
                st = os.lstat(full_path)
            except OSError as e:
                result.warnings.append(f"Error accessing {full_path}: {e}")
                continue
            if not stat.S_ISREG(st.st_mode):
                logging.debug(f"Skipping non-regular file {full_path}")
                continue
            result.files.append(FileRecord(full_path, st.st_size, st.st_mtime_ns))

    logging.debug(f"Scanned {root}: {len(result.files)} files, {len(result.warnings)} warnings")
    return result
