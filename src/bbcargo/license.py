"""License expression normalization and LIC_FILES_CHKSUM references."""

from __future__ import annotations

import hashlib
import logging
import warnings
from collections.abc import Callable
from pathlib import Path, PurePosixPath

from bbcargo.errors import MissingLicenseWarning
from bbcargo.models import LicenseDescriptor, ProjectMetadata

logger = logging.getLogger(__name__)

CLOSED_LICENSE = "CLOSED"
LICENSE_SEPARATOR = "/"
RECIPE_LICENSE_JOINER = " | "
UNKNOWN_MD5 = "generateme"

GENERIC_LICENSE_NAMES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "LICENCE", "COPYING")
QUALIFIED_LICENSE_PATTERNS = (
    "LICENSE-{id}",
    "LICENSE-{id}.md",
    "LICENSE-{id}.txt",
    "{id}",
    "{id}.md",
    "{id}.txt",
)

LicenseFileResolver = Callable[[Path, PurePosixPath, str, bool], str]


def select_license(metadata: ProjectMetadata) -> str:
    """Return the license expression, falling back to license-file, then CLOSED."""
    if metadata.license is not None:
        return metadata.license
    warnings.warn(
        "No 'license' field set in Cargo.toml, trying 'license-file' field.",
        MissingLicenseWarning,
        stacklevel=2,
    )
    if metadata.license_file is not None:
        return metadata.license_file
    warnings.warn(
        f"No 'license-file' field set in Cargo.toml, assuming {CLOSED_LICENSE} license.",
        MissingLicenseWarning,
        stacklevel=2,
    )
    return CLOSED_LICENSE


def build_license_descriptor(
    expression: str,
    root: str | Path,
    rel_dir: str | PurePosixPath,
    *,
    file_for: LicenseFileResolver | None = None,
) -> LicenseDescriptor:
    """Split ``MIT/Apache-2.0`` style expressions into per-license file refs."""
    resolver = file_for or license_file_ref
    identifiers = expression.split(LICENSE_SEPARATOR)
    single_license = len(identifiers) == 1
    root_path = Path(root)
    rel_path = PurePosixPath(rel_dir)

    file_refs = tuple(
        resolver(root_path, rel_path, identifier.strip(), single_license)
        for identifier in identifiers
    )
    normalized = RECIPE_LICENSE_JOINER.join(identifier.strip() for identifier in identifiers)
    return LicenseDescriptor(expression=normalized, file_refs=file_refs)


def license_file_ref(
    root: Path,
    rel_dir: PurePosixPath,
    identifier: str,
    single_license: bool,
) -> str:
    """Locate the license file for ``identifier`` and return a checksummed reference.

    With a single license the generic ``LICENSE`` style names are searched
    first; with several licenses only names qualified by the identifier can
    tell the files apart. A miss yields an ``md5=generateme`` placeholder the
    user has to fill in.
    """
    if identifier == CLOSED_LICENSE:
        return ""

    candidates = [pattern.format(id=identifier) for pattern in QUALIFIED_LICENSE_PATTERNS]
    if single_license:
        candidates = [*GENERIC_LICENSE_NAMES, *candidates]

    search_dir = root / Path(rel_dir)
    for candidate in candidates:
        path = search_dir / candidate
        if path.is_file():
            digest = hashlib.md5(path.read_bytes()).hexdigest()
            logger.debug("license %s resolved to %s", identifier, path)
            return f"file://{rel_dir / candidate};md5={digest}"

    logger.info("no license file found for %s under %s", identifier, search_dir)
    return f"file://{identifier};md5={UNKNOWN_MD5}"
