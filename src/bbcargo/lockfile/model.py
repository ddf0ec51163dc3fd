"""Cargo.lock typed model."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class LockedPackage:
    name: str
    version: str
    source: str | None = None
    checksum: str | None = None


@dataclass(frozen=True, slots=True)
class CargoLock:
    version: int
    packages: tuple[LockedPackage, ...] = field(default_factory=tuple)
