"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    UNRESOLVABLE_PIN = "E_UNRESOLVABLE_PIN"
    MISSING_METADATA = "E_MISSING_METADATA"
    AMBIGUOUS_REPO_LOCATION = "E_AMBIGUOUS_REPO_LOCATION"
    RESOLUTION = "E_RESOLUTION"
    LOCKFILE = "E_LOCKFILE"
    MANIFEST = "E_MANIFEST"
    POLICY = "E_POLICY"
    OUTPUT = "E_OUTPUT"


class BbcargoError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        for key, value in self.context.items():
            if value:
                parts.append(f"  {key}: {value}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class UnresolvablePinError(BbcargoError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.UNRESOLVABLE_PIN, hint=hint, context=context)


class MissingMetadataError(BbcargoError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.MISSING_METADATA, hint=hint, context=context)


class AmbiguousRepoLocationError(BbcargoError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(
            message,
            code=ErrorCode.AMBIGUOUS_REPO_LOCATION,
            hint=hint,
            context=context,
        )


class ResolutionError(BbcargoError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.RESOLUTION, hint=hint, context=context)


class LockfileError(BbcargoError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.LOCKFILE, hint=hint, context=context)


class ManifestError(BbcargoError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.MANIFEST, hint=hint, context=context)


class PolicyError(BbcargoError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.POLICY, hint=hint, context=context)


class OutputError(BbcargoError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.OUTPUT, hint=hint, context=context)


class BbcargoWarning(UserWarning):
    """Base class for non-fatal notices that degrade to a documented default."""


class MissingLicenseWarning(BbcargoWarning):
    """No usable license information; a fallback value was used."""


class MissingMetadataWarning(BbcargoWarning):
    """An optional metadata field is absent; a fallback value was used."""


class MutableRefWarning(BbcargoWarning):
    """A git dependency tracks a moving ref instead of a fixed commit."""


class RepositoryInfoWarning(BbcargoWarning):
    """The project's own git checkout could not be inspected."""


__all__ = [
    "AmbiguousRepoLocationError",
    "BbcargoError",
    "BbcargoWarning",
    "ErrorCode",
    "LockfileError",
    "ManifestError",
    "MissingLicenseWarning",
    "MissingMetadataError",
    "MissingMetadataWarning",
    "MutableRefWarning",
    "OutputError",
    "PolicyError",
    "RepositoryInfoWarning",
    "ResolutionError",
    "UnresolvablePinError",
]
