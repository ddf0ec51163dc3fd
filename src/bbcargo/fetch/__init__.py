"""Source locator mapping and checkout inspection."""

from __future__ import annotations

from bbcargo.fetch.git import (
    GitCommandError,
    GitPrefix,
    discover_project_repo,
    git_to_yocto_git_url,
)

__all__ = ["GitCommandError", "GitPrefix", "discover_project_repo", "git_to_yocto_git_url"]
