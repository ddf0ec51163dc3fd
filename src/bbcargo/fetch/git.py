"""Git URL mapping for BitBake fetchers and project checkout inspection."""

from __future__ import annotations

import logging
import re
import subprocess
import warnings
from enum import StrEnum
from pathlib import Path
from urllib.parse import urlsplit

from bbcargo.errors import RepositoryInfoWarning
from bbcargo.models import RepoFacts

logger = logging.getLogger(__name__)

# git@host:org/repo style remotes, which are not URLs
SCP_STYLE_REMOTE = re.compile(r"\A(?:(?P<user>[^@/]+)@)?(?P<host>[^:/]+):(?P<path>(?!//).+)\Z")


class GitPrefix(StrEnum):
    """BitBake fetcher scheme used for git sources."""

    GIT = "git"
    GITSM = "gitsm"


class GitCommandError(RuntimeError):
    """A git subprocess exited with a non-zero status."""


def git_to_yocto_git_url(
    url: str,
    name: str | None = None,
    prefix: GitPrefix = GitPrefix.GIT,
) -> str:
    """Map a git remote URL onto the BitBake git fetcher syntax.

    ``https://github.com/org/repo?branch=x#abc`` becomes
    ``git://github.com/org/repo;protocol=https``. When ``name`` is given the
    source is named and unpacked into a directory of the same name, which is
    what ``EXTRA_OECARGO_PATHS`` points cargo at.
    """
    match = SCP_STYLE_REMOTE.match(url)
    if match is not None:
        user = match.group("user")
        host = match.group("host")
        path = match.group("path").lstrip("/")
        userinfo = f"{user}@" if user else ""
        url = f"ssh://{userinfo}{host}/{path}"

    parts = urlsplit(url)
    scheme = parts.scheme or "git"
    mapped = f"{prefix.value}://{parts.netloc}{parts.path};protocol={scheme}"
    if name is not None:
        mapped += f";name={name};destsuffix={name}"
    return mapped


def discover_project_repo(path: str | Path, prefix: GitPrefix = GitPrefix.GIT) -> RepoFacts:
    """Collect origin URL, HEAD commit, and tag status for the project checkout.

    Any failure degrades to the default facts with a warning: a recipe for a
    project outside git is still useful, it just tracks ``${AUTOREV}``.
    """
    cwd = Path(path)
    try:
        remote = _run_git(["remote", "get-url", "origin"], cwd=cwd)
        head = _run_git(["rev-parse", "HEAD"], cwd=cwd)
        tags = _run_git(["tag", "--points-at", "HEAD"], cwd=cwd)
        try:
            branch: str | None = _run_git(["symbolic-ref", "--quiet", "--short", "HEAD"], cwd=cwd)
        except GitCommandError:
            branch = None
    except (GitCommandError, OSError) as exc:
        warnings.warn(
            f"Unable to inspect the project git repository: {exc}",
            RepositoryInfoWarning,
            stacklevel=2,
        )
        return RepoFacts()

    uri = git_to_yocto_git_url(remote, None, prefix)
    uri += f";branch={branch}" if branch else ";nobranch=1"
    facts = RepoFacts(uri=uri, head_revision=head, is_tagged_checkout=bool(tags.strip()))
    logger.debug("project repository: %s at %s (tagged=%s)", uri, head, facts.is_tagged_checkout)
    return facts


def _run_git(argv: list[str], cwd: Path | None = None) -> str:
    command = ["git", *argv]
    completed = subprocess.run(
        command,
        cwd=cwd,
        check=False,
        text=True,
        capture_output=True,
    )
    if completed.returncode != 0:
        raise GitCommandError(f"`{' '.join(command)}` failed: {completed.stderr.strip()}")
    return completed.stdout.strip()
