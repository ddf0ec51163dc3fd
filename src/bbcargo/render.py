"""BitBake recipe rendering and atomic output."""

from __future__ import annotations

import logging
import os
import tempfile
import textwrap
import warnings
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from bbcargo import __version__
from bbcargo.errors import MissingMetadataError, MissingMetadataWarning, OutputError
from bbcargo.models import ProjectMetadata, RecipeDescriptor, RepoFacts

logger = logging.getLogger(__name__)

RECIPE_TEMPLATE = textwrap.dedent("""\
    # Auto-Generated by bbcargo {tool_version}
    #
    inherit cargo

    # If this is git based prefer versioned ones if they exist
    # DEFAULT_PREFERENCE = "-1"

    # how to get {name} could be as easy as but default to a git checkout:
    # SRC_URI += "crate://crates.io/{name}/{version}"
    SRC_URI += "{project_src_uri}"
    SRCREV = "{project_src_rev}"
    S = "${{WORKDIR}}/git"
    CARGO_SRC_DIR = "{project_rel_dir}"
    {version_pin}

    # please note if you have entries that do not begin with crate://
    # you must change them to how that package can be fetched
    SRC_URI += " \\
    {src_uri}"
    {src_uri_extras}

    # FIXME: update generateme with the real MD5 of the license file
    LIC_FILES_CHKSUM = " \\
    {lic_files}"

    SUMMARY = "{summary}"
    HOMEPAGE = "{homepage}"
    LICENSE = "{license}"

    # includes this file if it exists but does not fail
    # this is useful for anything you may want to override from
    # what bbcargo generates.
    include {name}-${{PV}}.inc
    include {name}.inc
""")


@dataclass(frozen=True, slots=True)
class RecipeContext:
    name: str
    version: str
    summary: str
    homepage: str
    license: str
    lic_files: str
    src_uri: str
    src_uri_extras: str
    project_rel_dir: str
    project_src_uri: str
    project_src_rev: str
    version_pin: str
    tool_version: str = __version__


def recipe_context(
    metadata: ProjectMetadata,
    descriptor: RecipeDescriptor,
    repo: RepoFacts,
    rel_dir: PurePosixPath,
) -> RecipeContext:
    """Collect every template field; raises if no homepage can be derived."""
    return RecipeContext(
        name=metadata.name,
        version=metadata.version,
        summary=_summary(metadata),
        homepage=_homepage(metadata),
        license=descriptor.license_expression,
        lic_files="".join(f"    {ref} \\\n" for ref in descriptor.license_file_refs if ref),
        src_uri="".join(f"    {locator} \\\n" for locator in descriptor.fetch_locators),
        src_uri_extras="\n".join(descriptor.auxiliary_lines),
        project_rel_dir="" if str(rel_dir) == "." else str(rel_dir),
        project_src_uri=repo.uri,
        project_src_rev=repo.head_revision,
        version_pin=descriptor.version_pin_suffix or "",
    )


def render_recipe(context: RecipeContext) -> str:
    return RECIPE_TEMPLATE.format(
        name=context.name,
        version=context.version,
        summary=context.summary,
        homepage=context.homepage,
        license=context.license,
        lic_files=context.lic_files,
        src_uri=context.src_uri,
        src_uri_extras=context.src_uri_extras,
        project_rel_dir=context.project_rel_dir,
        project_src_uri=context.project_src_uri,
        project_src_rev=context.project_src_rev,
        version_pin=context.version_pin,
        tool_version=context.tool_version,
    )


def recipe_path(metadata: ProjectMetadata, output_dir: str | Path = ".") -> Path:
    return Path(output_dir) / f"{metadata.name}_{metadata.version}.bb"


def write_recipe(text: str, path: str | Path) -> Path:
    return write_output(text, path, label="bitbake recipe")


def write_output(data: str | bytes, path: str | Path, *, label: str) -> Path:
    """Write through a temporary file so a failed write leaves nothing behind."""
    target = Path(path)
    payload = data.encode("utf-8") if isinstance(data, str) else data
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(payload)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as exc:
        raise OutputError(
            f"Unable to write {label} file.",
            hint=str(exc),
            context={"path": str(target)},
        ) from exc
    logger.info("wrote %s", target)
    return target


def _summary(metadata: ProjectMetadata) -> str:
    if metadata.description is not None:
        return metadata.description
    warnings.warn(
        "No 'description' field set in Cargo.toml, using 'name' field.",
        MissingMetadataWarning,
        stacklevel=3,
    )
    return metadata.name


def _homepage(metadata: ProjectMetadata) -> str:
    if metadata.homepage is not None:
        return metadata.homepage.strip()
    warnings.warn(
        "No 'homepage' field set in Cargo.toml, trying 'repository' field.",
        MissingMetadataWarning,
        stacklevel=3,
    )
    if metadata.repository is not None:
        return metadata.repository.strip()
    raise MissingMetadataError(
        "No 'repository' field set in Cargo.toml.",
        hint="Set 'homepage' or 'repository' so the recipe has a HOMEPAGE.",
    )
