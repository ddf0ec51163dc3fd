"""Cargo.lock parsing and conversion into the resolved dependency graph."""

from bbcargo.lockfile.io import parse_lockfile, read_lockfile
from bbcargo.lockfile.model import CargoLock, LockedPackage
from bbcargo.lockfile.resolve import parse_source_id, resolve_graph, to_resolved

__all__ = [
    "CargoLock",
    "LockedPackage",
    "parse_lockfile",
    "parse_source_id",
    "read_lockfile",
    "resolve_graph",
    "to_resolved",
]
