"""Exact revision pinning for git-backed dependencies."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from bbcargo.errors import UnresolvablePinError
from bbcargo.fetch.git import git_to_yocto_git_url
from bbcargo.models import (
    AUTOREV,
    FULL_COMMIT_LENGTH,
    BranchRef,
    DefaultBranchRef,
    GitOrigin,
    RevRef,
    TagRef,
)
from bbcargo.policy import Policy, enforce_mutable_ref_policy

UrlMapper = Callable[[str, str | None], str]


@dataclass(frozen=True, slots=True)
class GitPin:
    locator: str
    rev: str
    pin_lines: tuple[str, str, str]


def resolve_revision(
    name: str,
    origin: GitOrigin,
    *,
    policy: Policy,
    url_mapper: UrlMapper | None = None,
) -> GitPin:
    """Pick the revision BitBake should fetch and build the pin lines for it.

    In reproducible mode the commit recorded by the resolver always wins. Outside
    it the symbolic reference is used as-is where that is stable enough, and
    ``${AUTOREV}`` where the reference only names "whatever is latest".
    """
    rev = _select_rev(name, origin, reproducible=policy.reproducible)
    if rev == AUTOREV:
        enforce_mutable_ref_policy(policy=policy, name=name, url=origin.url)

    if url_mapper is None:
        locator = git_to_yocto_git_url(origin.url, name, policy.git_prefix)
    else:
        locator = url_mapper(origin.url, name)

    pin_lines = (
        f'SRCREV_FORMAT .= "_{name}"',
        f'SRCREV_{name} = "{rev}"',
        f'EXTRA_OECARGO_PATHS += "${{WORKDIR}}/{name}"',
    )
    return GitPin(locator=locator, rev=rev, pin_lines=pin_lines)


def _select_rev(name: str, origin: GitOrigin, *, reproducible: bool) -> str:
    if reproducible and origin.precise is not None:
        return origin.precise

    reference = origin.reference
    if isinstance(reference, TagRef):
        return reference.name
    if isinstance(reference, RevRef):
        # short hashes are not accepted by the bitbake git fetcher
        if len(reference.rev) == FULL_COMMIT_LENGTH:
            return reference.rev
        if origin.precise is not None:
            return origin.precise
        raise UnresolvablePinError(
            "Cannot pin git dependency to an abbreviated revision.",
            hint=(
                f"Use a full {FULL_COMMIT_LENGTH}-character commit hash in Cargo.toml "
                "or regenerate Cargo.lock so it records the resolved commit."
            ),
            context={"package": name, "url": origin.url, "rev": reference.rev},
        )
    if isinstance(reference, BranchRef):
        if reference.name == "master":
            return AUTOREV
        return reference.name
    if isinstance(reference, DefaultBranchRef):
        return AUTOREV
    raise TypeError(f"Unsupported git reference: {reference!r}")
