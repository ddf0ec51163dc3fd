"""Cargo.toml discovery, project metadata, and workspace membership."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from bbcargo.errors import AmbiguousRepoLocationError, ManifestError, MissingMetadataError
from bbcargo.models import ProjectMetadata

logger = logging.getLogger(__name__)

MANIFEST_NAME = "Cargo.toml"

METADATA_FIELDS = {
    "description": "description",
    "homepage": "homepage",
    "repository": "repository",
    "license": "license",
    "license_file": "license-file",
}


@dataclass(frozen=True, slots=True)
class CargoProject:
    """The package a recipe is generated for, and the workspace it lives in."""

    manifest_path: Path
    workspace_manifest: Path

    @classmethod
    def locate(cls, start: str | Path | None = None) -> CargoProject:
        manifest_path = find_package_manifest(Path.cwd() if start is None else Path(start))
        return cls(
            manifest_path=manifest_path,
            workspace_manifest=find_workspace_manifest(manifest_path),
        )

    @property
    def workspace_root(self) -> Path:
        return self.workspace_manifest.parent

    def metadata(self) -> ProjectMetadata:
        return load_metadata(self.workspace_manifest)

    def members(self) -> tuple[str, ...]:
        return workspace_members(self.workspace_manifest)

    def rel_dir(self) -> PurePosixPath:
        return relative_dir(self.workspace_root, self.manifest_path)


def find_package_manifest(start: Path) -> Path:
    """Return the nearest Cargo.toml at or above ``start``."""
    start = start.resolve()
    if start.is_file():
        if start.name == MANIFEST_NAME:
            return start
        start = start.parent
    for directory in (start, *start.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    raise ManifestError(
        "Could not find Cargo.toml in the current directory or any parent.",
        context={"start": str(start)},
    )


def find_workspace_manifest(manifest_path: Path) -> Path:
    """Walk up from a package manifest to the workspace root that claims it."""
    manifest_path = manifest_path.resolve()
    if "workspace" in _load_toml(manifest_path):
        return manifest_path
    package_dir = manifest_path.parent
    for directory in package_dir.parents:
        candidate = directory / MANIFEST_NAME
        if not candidate.is_file():
            continue
        if "workspace" not in _load_toml(candidate):
            continue
        if package_dir in _member_dirs(candidate):
            return candidate
    return manifest_path


def load_metadata(manifest_path: Path) -> ProjectMetadata:
    """Read recipe metadata from a package manifest or a virtual workspace."""
    data = _load_toml(manifest_path)
    package = data.get("package")
    if package is not None:
        if not isinstance(package, dict):
            raise ManifestError("'package' must be a table.", context={"path": str(manifest_path)})
        inherited = data.get("workspace", {}).get("package", {})
        table = {key: _inherit(key, value, inherited) for key, value in package.items()}
        return _metadata_from(table, section="package", path=manifest_path)

    workspace = data.get("workspace")
    if not isinstance(workspace, dict):
        raise ManifestError(
            "Manifest has neither a 'package' nor a 'workspace' table.",
            context={"path": str(manifest_path)},
        )
    metadata = workspace.get("metadata")
    if metadata is None:
        raise MissingMetadataError(
            "Missing 'workspace.metadata' table.",
            hint="Virtual workspaces must declare name and version in [workspace.metadata].",
            context={"path": str(manifest_path)},
        )
    if not isinstance(metadata, dict):
        raise ManifestError(
            "'workspace.metadata' must be a table.",
            context={"path": str(manifest_path)},
        )
    return _metadata_from(metadata, section="workspace.metadata", path=manifest_path)


def workspace_members(manifest_path: Path) -> tuple[str, ...]:
    """Names of every package built from the local tree, sorted."""
    names: set[str] = set()
    package = _load_toml(manifest_path).get("package")
    if isinstance(package, dict) and isinstance(package.get("name"), str):
        names.add(package["name"])
    for member_dir in _member_dirs(manifest_path):
        member_package = _load_toml(member_dir / MANIFEST_NAME).get("package")
        if isinstance(member_package, dict) and isinstance(member_package.get("name"), str):
            names.add(member_package["name"])
    return tuple(sorted(names))


def relative_dir(workspace_root: Path, manifest_path: Path) -> PurePosixPath:
    """Directory of ``manifest_path`` relative to the workspace root."""
    package_dir = manifest_path.resolve().parent
    try:
        rel = package_dir.relative_to(workspace_root.resolve())
    except ValueError as exc:
        raise AmbiguousRepoLocationError(
            "Unable to determine if Cargo.toml is in a sub directory of the workspace.",
            context={"workspace_root": str(workspace_root), "manifest": str(manifest_path)},
        ) from exc
    return PurePosixPath(rel.as_posix())


def _member_dirs(manifest_path: Path) -> set[Path]:
    workspace = _load_toml(manifest_path).get("workspace")
    if not isinstance(workspace, dict):
        return set()
    root = manifest_path.resolve().parent
    excluded = {(root / item).resolve() for item in workspace.get("exclude", [])}
    dirs: set[Path] = set()
    for pattern in workspace.get("members", []):
        if not isinstance(pattern, str):
            raise ManifestError("'workspace.members' entries must be strings.")
        for match in sorted(root.glob(pattern)):
            resolved = match.resolve()
            if resolved in excluded or not (resolved / MANIFEST_NAME).is_file():
                continue
            dirs.add(resolved)
    return dirs


def _inherit(key: str, value: Any, inherited: dict[str, Any]) -> Any:
    if isinstance(value, dict) and value.get("workspace") is True:
        if key not in inherited:
            raise ManifestError(
                f"'package.{key}' is inherited but missing from [workspace.package]."
            )
        return inherited[key]
    return value


def _metadata_from(table: dict[str, Any], *, section: str, path: Path) -> ProjectMetadata:
    def required(field_name: str) -> str:
        if field_name not in table:
            raise MissingMetadataError(
                f"Missing '{field_name}' field in '{section}'.",
                context={"path": str(path)},
            )
        return _as_str(table[field_name], f"{section}.{field_name}")

    def optional(field_name: str) -> str | None:
        if field_name not in table:
            return None
        return _as_str(table[field_name], f"{section}.{field_name}")

    optional_values = {attr: optional(key) for attr, key in METADATA_FIELDS.items()}
    metadata = ProjectMetadata(
        name=required("name"),
        version=required("version"),
        **optional_values,
    )
    logger.debug("loaded metadata for %s %s from %s", metadata.name, metadata.version, path)
    return metadata


def _as_str(value: Any, label: str) -> str:
    if not isinstance(value, str):
        raise ManifestError(f"'{label}' must be a string.")
    return value


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ManifestError("Manifest does not exist.", context={"path": str(path)}) from exc
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(
            "Invalid Cargo.toml TOML.",
            hint=str(exc),
            context={"path": str(path)},
        ) from exc
