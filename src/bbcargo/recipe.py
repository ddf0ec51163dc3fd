"""End-to-end recipe generation for a Cargo project on disk."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from bbcargo.fetch.git import discover_project_repo
from bbcargo.lockfile import resolve_graph
from bbcargo.manifest import CargoProject
from bbcargo.models import ProjectMetadata, RecipeDescriptor, RepoFacts
from bbcargo.observability import StructuredLogger
from bbcargo.policy import Policy
from bbcargo.render import (
    recipe_context,
    recipe_path,
    render_recipe,
    write_output,
    write_recipe,
)
from bbcargo.synthesize import synthesize

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GenerateResult:
    path: Path
    descriptor: RecipeDescriptor
    metadata: ProjectMetadata
    records: list[dict[str, object]] = field(default_factory=list)


def generate_recipe(
    start: str | Path | None = None,
    *,
    policy: Policy | None = None,
    output_dir: str | Path = ".",
    repo: RepoFacts | None = None,
    descriptor_json: str | Path | None = None,
    descriptor_cbor: str | Path | None = None,
) -> GenerateResult:
    """Read the project, synthesize the descriptor, and write ``<name>_<version>.bb``.

    Everything that can fail fatally happens before the recipe file is opened.
    """
    policy = policy or Policy()
    project = CargoProject.locate(start)
    metadata = project.metadata()
    members = project.members()
    rel_dir = project.rel_dir()
    dependencies = resolve_graph(project.workspace_root)
    logger.info(
        "resolved %d packages for %s %s (%d workspace members)",
        len(dependencies),
        metadata.name,
        metadata.version,
        len(members),
    )

    if repo is None:
        repo = discover_project_repo(project.manifest_path.parent, policy.git_prefix)

    structured = StructuredLogger()
    descriptor = synthesize(
        dependencies,
        workspace_members=members,
        metadata=metadata,
        repo=repo,
        project_root=project.workspace_root,
        rel_dir=rel_dir,
        policy=policy,
        logger=structured,
    )
    text = render_recipe(recipe_context(metadata, descriptor, repo, rel_dir))

    # exports go first so a failed export never leaves a recipe behind
    if descriptor_json is not None:
        write_output(descriptor.to_json(), descriptor_json, label="descriptor JSON")
    if descriptor_cbor is not None:
        write_output(descriptor.to_cbor(), descriptor_cbor, label="descriptor CBOR")
    path = write_recipe(text, recipe_path(metadata, output_dir))
    return GenerateResult(
        path=path,
        descriptor=descriptor,
        metadata=metadata,
        records=list(structured.records),
    )
