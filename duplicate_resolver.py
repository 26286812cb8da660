"""
Chooses the copy to keep in each duplicate group and applies the requested
action to the others.

The oldest file (by modification time) is the original and is never
touched. Every filesystem step is attempted once and its outcome is
returned as data, so a hard link whose removal succeeded but whose link
failed shows up as its own state rather than as a generic failure.
"""

import os
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from file_scanner import FileRecord


class Action(Enum):
    REPORT_ONLY = "list"
    DELETE = "delete"
    HARD_LINK = "hardlink"


@dataclass(frozen=True)
class StepResult:
    ok: bool
    error: Optional[str] = None


@dataclass
class MemberResolution:
    record: FileRecord
    action: Action
    removal: Optional[StepResult] = None
    link: Optional[StepResult] = None

    @property
    def removed(self) -> bool:
        return self.removal is not None and self.removal.ok

    @property
    def linked(self) -> bool:
        return self.link is not None and self.link.ok

    @property
    def lost(self) -> bool:
        """True when the file was removed but its hard link was not created."""
        return self.removed and self.link is not None and not self.link.ok

    @property
    def failed(self) -> bool:
        if self.action is Action.DELETE:
            return not self.removed
        if self.action is Action.HARD_LINK:
            return not self.linked
        return False


@dataclass
class GroupResolution:
    signature: str
    canonical: FileRecord
    duplicates: List[MemberResolution] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.duplicates) + 1


def order_by_age(records):
    """Sort oldest first. Ties keep their input order."""
    return sorted(records, key=lambda r: r.mtime_ns)


def _remove(path):
    try:
        os.remove(path)
    except OSError as e:
        return StepResult(False, str(e))
    return StepResult(True)


def _link(source, target):
    try:
        os.link(source, target)
    except OSError as e:
        return StepResult(False, str(e))
    return StepResult(True)


def resolve_group(signature, records, action):
    ordered = order_by_age(records)
    original = ordered[0]
    resolution = GroupResolution(signature, original)

    for dup in ordered[1:]:
        member = MemberResolution(dup, action)
        if action is Action.DELETE:
            member.removal = _remove(dup.path)
        elif action is Action.HARD_LINK:
            member.removal = _remove(dup.path)
            if member.removal.ok:
                member.link = _link(original.path, dup.path)
        logging.debug(f"{action.value}: {dup.path} (original {original.path})")
        resolution.duplicates.append(member)

    return resolution


def resolve_duplicates(groups, action=Action.REPORT_ONLY):
    """Resolve every duplicate group; returns one GroupResolution per group."""
    return [resolve_group(signature, records, action) for signature, records in groups.items()]
