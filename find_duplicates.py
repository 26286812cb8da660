#!/usr/bin/env python3

"""

python3 find_duplicates.py /path/to/scan              # reports duplicates
python3 find_duplicates.py /path/to/scan --delete     # deletes duplicates, keeps the oldest copy
python3 find_duplicates.py /path/to/scan --hardlink   # replaces duplicates with hard links to the oldest copy
python3 find_duplicates.py /path/to/scan --verify     # confirms every match byte by byte


"""

import sys
import logging
import argparse

from file_scanner import ScanError, scan_directory, validate_root
from duplicate_grouper import find_duplicates
from duplicate_resolver import Action, resolve_duplicates

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_ACTION = Action.REPORT_ONLY


def setup_logging(level=logging.INFO):
    logging.basicConfig(level=level, format=LOG_FORMAT)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Find duplicate files and optionally delete or hard-link them.")
    parser.add_argument("directory", help="Directory to scan recursively.")
    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("--list", dest="action", action="store_const", const=Action.REPORT_ONLY,
                         help="List duplicates only (default).")
    actions.add_argument("--delete", dest="action", action="store_const", const=Action.DELETE,
                         help="Delete duplicates, keeping the oldest file.")
    actions.add_argument("--hardlink", dest="action", action="store_const", const=Action.HARD_LINK,
                         help="Replace duplicates with hard links to the oldest file.")
    parser.add_argument("--verify", action="store_true",
                        help="Compare duplicates byte by byte before acting on them.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors.")
    parser.set_defaults(action=DEFAULT_ACTION)
    return parser.parse_args(argv)


def print_report(resolutions, out=None):
    """Print one block per duplicate group and return a summary dict."""
    out = out or sys.stdout
    summary = {"deleted": 0, "linked": 0, "failed": 0, "lost": 0, "reclaimed": 0}

    for group in resolutions:
        print(f"\nDuplicate group ({group.size} files)", file=out)
        print(f"Hash: {group.signature}", file=out)
        print(f"Original: {group.canonical.path}", file=out)

        for member in group.duplicates:
            path = member.record.path
            print(f"Duplicate: {path}", file=out)

            if member.action is Action.DELETE:
                if member.removed:
                    print(f"  Deleted: {path}", file=out)
                    summary["deleted"] += 1
                    summary["reclaimed"] += member.record.size
                else:
                    print(f"  Delete failed: {path}: {member.removal.error}", file=out)
                    logging.warning(f"Could not delete {path}: {member.removal.error}")
                    summary["failed"] += 1

            elif member.action is Action.HARD_LINK:
                if member.linked:
                    print(f"  Created hardlink: {path}", file=out)
                    summary["linked"] += 1
                    summary["reclaimed"] += member.record.size
                elif member.lost:
                    print(f"  Hardlink failed after removal, file is gone: {path}: {member.link.error}", file=out)
                    logging.error(f"{path} was removed but the hard link to {group.canonical.path} "
                                  f"could not be created: {member.link.error}")
                    summary["lost"] += 1
                else:
                    print(f"  Hardlink failed: {path}: {member.removal.error}", file=out)
                    logging.warning(f"Could not replace {path} with a hard link: {member.removal.error}")
                    summary["failed"] += 1

    return summary


def run(directory, action=DEFAULT_ACTION, verify=False):
    """Scan, group and resolve; returns the process exit status."""
    try:
        root = validate_root(directory)
    except ScanError as e:
        logging.error(str(e))
        return 1

    print(f"Scanning directory: {root}")
    scan = scan_directory(root)
    for warning in scan.warnings:
        logging.warning(warning)
    print(f"Found {len(scan.files)} files")

    print("Looking for duplicates...")
    grouping = find_duplicates(scan.files, verify=verify)
    for warning in grouping.warnings:
        logging.warning(warning)
    logging.info(f"Hashed {grouping.hashed} of {len(scan.files)} files")

    if not grouping.groups:
        print("\nNo duplicates found.")
        return 0

    print(f"\nFound {len(grouping.groups)} groups of duplicates")
    resolutions = resolve_duplicates(grouping.groups, action)
    summary = print_report(resolutions)

    if action is not Action.REPORT_ONLY:
        print(f"\nDeleted: {summary['deleted']}, hard-linked: {summary['linked']}, "
              f"failed: {summary['failed']}, removed without link: {summary['lost']}, "
              f"reclaimed: {summary['reclaimed']} bytes")
    return 0


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    setup_logging(level)
    return run(args.directory, args.action, verify=args.verify)


def cli():
    sys.exit(main())


if __name__ == "__main__":
    cli()
