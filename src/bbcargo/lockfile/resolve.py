"""Turn locked packages into resolved dependencies with typed origins."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import parse_qs, unquote, urlsplit, urlunsplit

from bbcargo.lockfile.io import LOCKFILE_NAME, read_lockfile
from bbcargo.lockfile.model import LockedPackage
from bbcargo.models import (
    BranchRef,
    DefaultBranchRef,
    GitOrigin,
    GitReference,
    Origin,
    PathOrigin,
    RegistryOrigin,
    RemoteOrigin,
    ResolvedDependency,
    RevRef,
    TagRef,
)

REGISTRY_KINDS = ("registry", "sparse")


def parse_source_id(source: str | None) -> Origin:
    """Parse a Cargo source id such as ``git+https://host/repo?tag=v1#<sha>``.

    Packages without a source are path dependencies (Cargo omits the source
    for them in the lockfile).
    """
    if source is None:
        return PathOrigin()
    kind, sep, url = source.partition("+")
    if not sep:
        return RemoteOrigin(url=source)
    if kind in REGISTRY_KINDS:
        return RegistryOrigin(url=url)
    if kind == "path":
        return PathOrigin(path=url)
    if kind == "git":
        return _parse_git_source(url)
    return RemoteOrigin(url=url)


def _parse_git_source(url: str) -> GitOrigin:
    parts = urlsplit(url)
    query = parse_qs(parts.query)
    precise = unquote(parts.fragment) or None
    base_url = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))

    reference: GitReference
    if "tag" in query:
        reference = TagRef(query["tag"][0])
    elif "branch" in query:
        reference = BranchRef(query["branch"][0])
    elif "rev" in query:
        reference = RevRef(query["rev"][0])
    else:
        reference = DefaultBranchRef()
    return GitOrigin(url=base_url, reference=reference, precise=precise)


def to_resolved(package: LockedPackage) -> ResolvedDependency:
    origin = parse_source_id(package.source)
    checksum = package.checksum if isinstance(origin, RegistryOrigin) else None
    return ResolvedDependency(
        name=package.name,
        version=package.version,
        origin=origin,
        checksum=checksum,
    )


def resolve_graph(workspace_root: str | Path) -> tuple[ResolvedDependency, ...]:
    """Read the workspace lockfile as the already-resolved dependency graph."""
    lock = read_lockfile(Path(workspace_root) / LOCKFILE_NAME)
    return tuple(to_resolved(package) for package in lock.packages)
