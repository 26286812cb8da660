"""
Groups scanned files into sets of identical content.

Files are first bucketed by size; only buckets with two or more members are
hashed, so a file with a unique size is never read. Each candidate bucket
is then split by content signature and every signature shared by at least
two files becomes a duplicate group.
"""

import filecmp
import hashlib
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List

from file_scanner import FileRecord

DIGEST_SIZE = 16  # bytes, 128-bit digest


@dataclass
class GroupingResult:
    groups: Dict[str, List[FileRecord]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    hashed: int = 0


def content_signature(file_path):
    """Return "<length>_<hex digest>" for the full content of a file."""
    with open(file_path, 'rb') as f:
        content = f.read()
    digest = hashlib.blake2b(content, digest_size=DIGEST_SIZE).hexdigest()
    return f"{len(content)}_{digest}"


def group_by_size(files):
    size_dict = {}
    for record in files:
        size_dict.setdefault(record.size, []).append(record)
    return size_dict


def _split_by_content(members, result):
    # Partition same-signature members by byte-for-byte equality
    partitions = []
    for record in members:
        try:
            for part in partitions:
                if filecmp.cmp(part[0].path, record.path, shallow=False):
                    part.append(record)
                    break
            else:
                partitions.append([record])
        except OSError as e:
            result.warnings.append(f"Error verifying {record.path}: {e}")
    return partitions


def find_duplicates(files, verify=False):
    """
    Return a GroupingResult mapping signature -> records for every set of
    two or more files with identical content.

    With verify=True each signature group is confirmed byte by byte; files
    that share a signature but not their content are reported as a
    collision and kept apart.
    """
    result = GroupingResult()

    for size, bucket in group_by_size(files).items():
        if len(bucket) < 2:
            continue

        hash_dict = {}
        for record in bucket:
            try:
                signature = content_signature(record.path)
            except OSError as e:
                result.warnings.append(f"Error processing {record.path}: {e}")
                continue
            result.hashed += 1
            hash_dict.setdefault(signature, []).append(replace(record, signature=signature))

        for signature, members in hash_dict.items():
            if len(members) < 2:
                continue
            if not verify:
                result.groups[signature] = members
                continue

            partitions = _split_by_content(members, result)
            if len(partitions) > 1:
                result.warnings.append(
                    f"Signature collision on {signature}: "
                    f"{len(partitions)} distinct contents among {len(members)} files"
                )
            n = 0
            for part in partitions:
                if len(part) < 2:
                    continue
                key = signature if n == 0 else f"{signature}~{n}"
                result.groups[key] = part
                n += 1

    logging.debug(f"Hashed {result.hashed} of {len(files)} files, {len(result.groups)} duplicate groups")
    return result
