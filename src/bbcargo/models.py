"""Core typed dataclasses for the resolved graph, project facts, and recipe output."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from pathlib import Path

import cbor2

AUTOREV = "${AUTOREV}"
CRATES_IO_DOMAIN = "crates.io"
CRATES_IO_INDEX = "https://github.com/rust-lang/crates.io-index"
CRATES_IO_SPARSE_INDEX = "https://index.crates.io/"
FULL_COMMIT_LENGTH = 40


@dataclass(frozen=True, slots=True)
class TagRef:
    name: str


@dataclass(frozen=True, slots=True)
class BranchRef:
    name: str


@dataclass(frozen=True, slots=True)
class RevRef:
    rev: str


@dataclass(frozen=True, slots=True)
class DefaultBranchRef:
    pass


GitReference = TagRef | BranchRef | RevRef | DefaultBranchRef


@dataclass(frozen=True, slots=True)
class RegistryOrigin:
    url: str = CRATES_IO_INDEX

    @property
    def is_crates_io(self) -> bool:
        return self.url.rstrip("/") in {CRATES_IO_INDEX, CRATES_IO_SPARSE_INDEX.rstrip("/")}


@dataclass(frozen=True, slots=True)
class GitOrigin:
    url: str
    reference: GitReference = DefaultBranchRef()
    precise: str | None = None


@dataclass(frozen=True, slots=True)
class PathOrigin:
    path: str | None = None


@dataclass(frozen=True, slots=True)
class RemoteOrigin:
    url: str


Origin = RegistryOrigin | GitOrigin | PathOrigin | RemoteOrigin


@dataclass(frozen=True, slots=True)
class ResolvedDependency:
    name: str
    version: str
    origin: Origin
    checksum: str | None = None


@dataclass(frozen=True, slots=True)
class ProjectMetadata:
    """Project-level fields read from the root manifest.

    Absent optional fields are ``None``; an empty string is a real value.
    """

    name: str
    version: str
    description: str | None = None
    homepage: str | None = None
    repository: str | None = None
    license: str | None = None
    license_file: str | None = None


@dataclass(frozen=True, slots=True)
class RepoFacts:
    uri: str = ""
    head_revision: str = AUTOREV
    is_tagged_checkout: bool = False


@dataclass(frozen=True, slots=True)
class Skip:
    reason: str

    @property
    def locator(self) -> None:
        return None

    @property
    def auxiliary_lines(self) -> tuple[str, ...]:
        return ()


@dataclass(frozen=True, slots=True)
class RegistryDecision:
    locator: str
    checksum_line: str | None = None

    @property
    def auxiliary_lines(self) -> tuple[str, ...]:
        return (self.checksum_line,) if self.checksum_line is not None else ()


@dataclass(frozen=True, slots=True)
class GitDecision:
    locator: str
    rev: str
    pin_lines: tuple[str, ...]

    @property
    def auxiliary_lines(self) -> tuple[str, ...]:
        return self.pin_lines


@dataclass(frozen=True, slots=True)
class OtherDecision:
    locator: str

    @property
    def auxiliary_lines(self) -> tuple[str, ...]:
        return ()


Decision = Skip | RegistryDecision | GitDecision | OtherDecision


@dataclass(frozen=True, slots=True)
class LicenseDescriptor:
    expression: str
    file_refs: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class RecipeDescriptor:
    fetch_locators: tuple[str, ...]
    auxiliary_lines: tuple[str, ...]
    license_expression: str
    license_file_refs: tuple[str, ...]
    version_pin_suffix: str | None = None
    schema_version: int = 1

    def to_json(self, path: str | Path | None = None) -> str:
        encoded = json.dumps(self._payload(), indent=2, sort_keys=True) + "\n"
        if path is not None:
            Path(path).write_text(encoded, encoding="utf-8")
        return encoded

    def to_cbor(self, path: str | Path | None = None) -> bytes:
        encoded = cbor2.dumps(self._payload(), canonical=True)
        if path is not None:
            Path(path).write_bytes(encoded)
        return encoded

    def digest(self) -> str:
        canonical = json.dumps(self._payload(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def _payload(self) -> dict[str, object]:
        return {
            "schema_version": self.schema_version,
            "fetch_locators": list(self.fetch_locators),
            "auxiliary_lines": list(self.auxiliary_lines),
            "license_expression": self.license_expression,
            "license_file_refs": list(self.license_file_refs),
            "version_pin_suffix": self.version_pin_suffix,
        }


__all__ = [
    "AUTOREV",
    "BranchRef",
    "CRATES_IO_DOMAIN",
    "CRATES_IO_INDEX",
    "CRATES_IO_SPARSE_INDEX",
    "Decision",
    "DefaultBranchRef",
    "FULL_COMMIT_LENGTH",
    "GitDecision",
    "GitOrigin",
    "GitReference",
    "LicenseDescriptor",
    "Origin",
    "OtherDecision",
    "PathOrigin",
    "ProjectMetadata",
    "RecipeDescriptor",
    "RegistryDecision",
    "RegistryOrigin",
    "RemoteOrigin",
    "RepoFacts",
    "ResolvedDependency",
    "RevRef",
    "Skip",
    "TagRef",
]
