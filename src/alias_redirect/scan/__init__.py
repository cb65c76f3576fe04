"""Alias discovery over directory trees."""

from alias_redirect.scan.discover import ScanErrorHandler, check_root, scan_aliases, scan_candidates

__all__ = [
    "ScanErrorHandler",
    "check_root",
    "scan_aliases",
    "scan_candidates",
]
