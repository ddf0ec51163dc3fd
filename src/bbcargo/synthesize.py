"""Recipe descriptor synthesis from a resolved graph and project facts."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from pathlib import Path, PurePosixPath

from bbcargo.accumulate import accumulate
from bbcargo.classify import classify
from bbcargo.license import LicenseFileResolver, build_license_descriptor, select_license
from bbcargo.models import (
    Decision,
    GitDecision,
    ProjectMetadata,
    RecipeDescriptor,
    RepoFacts,
    ResolvedDependency,
    Skip,
)
from bbcargo.observability import StructuredLogger
from bbcargo.policy import Policy
from bbcargo.revision import UrlMapper
from bbcargo.version_pin import compute_version_pin


def synthesize(
    dependencies: Iterable[ResolvedDependency],
    *,
    workspace_members: Collection[str],
    metadata: ProjectMetadata,
    repo: RepoFacts,
    project_root: str | Path,
    rel_dir: str | PurePosixPath = "",
    policy: Policy | None = None,
    license_file_for: LicenseFileResolver | None = None,
    url_mapper: UrlMapper | None = None,
    logger: StructuredLogger | None = None,
) -> RecipeDescriptor:
    """Build the complete, immutable recipe descriptor.

    Any fatal error (an unpinnable git revision, most notably) propagates
    before a descriptor exists, so callers never see partial output.
    """
    policy = policy or Policy()
    members = frozenset(workspace_members)

    decisions: list[Decision] = []
    for dependency in dependencies:
        decision = classify(dependency, members, policy=policy, url_mapper=url_mapper)
        if logger is not None:
            _record(logger, dependency, decision)
        decisions.append(decision)
    fetch_locators, auxiliary_lines = accumulate(decisions)

    license_descriptor = build_license_descriptor(
        select_license(metadata),
        project_root,
        rel_dir,
        file_for=license_file_for,
    )
    version_pin_suffix = compute_version_pin(
        repo.is_tagged_checkout,
        repo.head_revision,
        policy.legacy_overrides,
    )

    return RecipeDescriptor(
        fetch_locators=fetch_locators,
        auxiliary_lines=auxiliary_lines,
        license_expression=license_descriptor.expression,
        license_file_refs=license_descriptor.file_refs,
        version_pin_suffix=version_pin_suffix,
    )


def _record(logger: StructuredLogger, dependency: ResolvedDependency, decision: Decision) -> None:
    if isinstance(decision, Skip):
        message = f"skipped ({decision.reason})"
        level = "debug"
    else:
        message = f"fetch from {decision.locator}"
        level = "info"
    extra: dict[str, str] = {"version": dependency.version, "decision": type(decision).__name__}
    if isinstance(decision, GitDecision):
        extra["rev"] = decision.rev
    logger.log(
        operation="classify",
        package=dependency.name,
        stage="synthesize",
        message=message,
        level=level,
        extra=extra,
    )
