"""Per-dependency source classification."""

from __future__ import annotations

from collections.abc import Collection

from bbcargo.models import (
    CRATES_IO_DOMAIN,
    Decision,
    GitDecision,
    GitOrigin,
    OtherDecision,
    PathOrigin,
    RegistryDecision,
    RegistryOrigin,
    RemoteOrigin,
    ResolvedDependency,
    Skip,
)
from bbcargo.policy import Policy
from bbcargo.revision import UrlMapper, resolve_revision


def classify(
    dependency: ResolvedDependency,
    workspace_members: Collection[str],
    *,
    policy: Policy,
    url_mapper: UrlMapper | None = None,
) -> Decision:
    """Decide whether and how a resolved dependency is fetched by the recipe."""
    name = dependency.name
    origin = dependency.origin

    if name in workspace_members:
        return Skip(reason="workspace member")

    if isinstance(origin, RegistryOrigin):
        # the crate fetcher only knows crates.io; other registries are fetched by index url
        if not origin.is_crates_io:
            return OtherDecision(locator=origin.url)
        checksum_line = None
        if dependency.checksum is not None:
            checksum_line = (
                f'SRC_URI[{name}-{dependency.version}.sha256sum] = "{dependency.checksum}"'
            )
        return RegistryDecision(
            locator=f"crate://{CRATES_IO_DOMAIN}/{name}/{dependency.version}",
            checksum_line=checksum_line,
        )

    # path dependencies ship inside the source tree being packaged
    if isinstance(origin, PathOrigin):
        return Skip(reason="local path")

    if isinstance(origin, GitOrigin):
        pin = resolve_revision(name, origin, policy=policy, url_mapper=url_mapper)
        return GitDecision(locator=pin.locator, rev=pin.rev, pin_lines=pin.pin_lines)

    if isinstance(origin, RemoteOrigin):
        return OtherDecision(locator=origin.url)

    raise TypeError(f"Unsupported dependency origin: {origin!r}")
