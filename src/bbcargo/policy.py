"""Synthesis policy configuration and enforcement helpers."""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from typing import Literal

from bbcargo.errors import MutableRefWarning, PolicyError
from bbcargo.fetch.git import GitPrefix

MutableRefPolicy = Literal["warn", "error", "allow"]


@dataclass(frozen=True, slots=True)
class Policy:
    reproducible: bool = False
    legacy_overrides: bool = False
    mutable_ref_policy: MutableRefPolicy = "warn"
    git_prefix: GitPrefix = GitPrefix.GIT


def enforce_mutable_ref_policy(*, policy: Policy, name: str, url: str) -> None:
    """Apply the policy to a git dependency that resolved to ``${AUTOREV}``."""
    mode = policy.mutable_ref_policy
    if mode == "allow":
        return
    if mode == "warn":
        warnings.warn(
            f"Git dependency `{name}` follows the latest upstream commit; "
            "the recipe is not reproducible.",
            MutableRefWarning,
            stacklevel=3,
        )
        return
    if mode == "error":
        raise PolicyError(
            "Moving git refs are not allowed by policy.",
            hint="Pass --reproducible to pin exact commits or relax mutable_ref_policy.",
            context={"operation": "resolve_revision", "package": name, "url": url},
        )
    raise PolicyError(f"Unsupported mutable_ref_policy value: {mode}")
