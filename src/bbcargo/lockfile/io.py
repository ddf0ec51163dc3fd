"""Cargo.lock parser."""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any

from bbcargo.errors import LockfileError, ResolutionError
from bbcargo.lockfile.model import CargoLock, LockedPackage

LOCKFILE_NAME = "Cargo.lock"

# v1 lockfiles keep checksums in [metadata] rather than on each package
LEGACY_CHECKSUM_KEY = re.compile(r"\Achecksum (?P<name>\S+) (?P<version>\S+) \((?P<source>.+)\)\Z")
NO_CHECKSUM = "<none>"


def parse_lockfile(raw: str) -> CargoLock:
    try:
        payload = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise LockfileError("Invalid Cargo.lock TOML.", hint=str(exc)) from exc

    version = payload.get("version", 1)
    if not isinstance(version, int):
        raise LockfileError("Invalid Cargo.lock `version` value.")

    entries = payload.get("package", [])
    if not isinstance(entries, list):
        raise LockfileError("Invalid Cargo.lock `package` value.")
    root = payload.get("root")
    if root is not None:
        entries = [root, *entries]

    legacy_checksums = _legacy_checksums(payload.get("metadata"))
    packages = []
    for entry in entries:
        package = _parse_package(entry)
        if package.checksum is None:
            checksum = legacy_checksums.get((package.name, package.version, package.source))
            if checksum is not None:
                package = LockedPackage(
                    name=package.name,
                    version=package.version,
                    source=package.source,
                    checksum=checksum,
                )
        packages.append(package)
    return CargoLock(version=version, packages=tuple(packages))


def read_lockfile(path: str | Path) -> CargoLock:
    lock_path = Path(path)
    try:
        raw = lock_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ResolutionError(
            "Cargo.lock does not exist.",
            hint="Run `cargo generate-lockfile` in the workspace root first.",
            context={"path": str(lock_path)},
        ) from exc
    return parse_lockfile(raw)


def _parse_package(entry: Any) -> LockedPackage:
    if not isinstance(entry, dict):
        raise LockfileError("Invalid package entry in Cargo.lock.")
    checksum = _optional_str(entry, "checksum")
    if checksum == NO_CHECKSUM:
        checksum = None
    return LockedPackage(
        name=_required_str(entry, "name"),
        version=_required_str(entry, "version"),
        source=_optional_str(entry, "source"),
        checksum=checksum,
    )


def _legacy_checksums(metadata: Any) -> dict[tuple[str, str, str], str]:
    if metadata is None:
        return {}
    if not isinstance(metadata, dict):
        raise LockfileError("Invalid Cargo.lock `metadata` value.")
    checksums: dict[tuple[str, str, str], str] = {}
    for key, value in metadata.items():
        match = LEGACY_CHECKSUM_KEY.match(key)
        if match is None or not isinstance(value, str) or value == NO_CHECKSUM:
            continue
        checksums[(match.group("name"), match.group("version"), match.group("source"))] = value
    return checksums


def _required_str(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise LockfileError(f"Invalid Cargo.lock `{key}` value.")
    return value


def _optional_str(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise LockfileError(f"Invalid Cargo.lock `{key}` value.")
    return value
