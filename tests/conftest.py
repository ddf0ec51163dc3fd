"""Shared test fixtures."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from bbcargo.models import RepoFacts

PRECISE = "f1e2d3c4b5a69788796a5b4c3d2e1f0011223344"
HEAD = "a1b2c3d4e5f60000111122223333444455556666"

ROOT_MANIFEST = textwrap.dedent("""\
    [package]
    name = "demo-app"
    version = "0.3.1"
    description = "A demo application"
    homepage = "https://example.invalid/demo"
    license = "MIT/Apache-2.0"

    [workspace]
    members = ["crates/*"]

    [dependencies]
    foo = "1.0"
    bar = { git = "https://github.com/example/bar", branch = "main" }
    demo-core = { path = "crates/demo-core" }
""")

MEMBER_MANIFEST = textwrap.dedent("""\
    [package]
    name = "demo-core"
    version = "0.3.1"

    [dependencies]
    helper = { path = "../../vendor/helper" }
""")

LOCKFILE = textwrap.dedent(f"""\
    version = 3

    [[package]]
    name = "bar"
    version = "0.2.0"
    source = "git+https://github.com/example/bar?branch=main#{PRECISE}"

    [[package]]
    name = "demo-app"
    version = "0.3.1"
    dependencies = ["bar", "demo-core", "foo"]

    [[package]]
    name = "demo-core"
    version = "0.3.1"
    dependencies = ["helper"]

    [[package]]
    name = "foo"
    version = "1.0.0"
    source = "registry+https://github.com/rust-lang/crates.io-index"
    checksum = "deadbeef"

    [[package]]
    name = "helper"
    version = "0.1.0"
""")


@pytest.fixture
def cargo_workspace(tmp_path: Path) -> Path:
    """A workspace with one member, a registry crate, a git crate, and a path crate."""
    root = tmp_path / "workspace"
    member = root / "crates" / "demo-core"
    member.mkdir(parents=True)
    (root / "Cargo.toml").write_text(ROOT_MANIFEST, encoding="utf-8")
    (root / "Cargo.lock").write_text(LOCKFILE, encoding="utf-8")
    (member / "Cargo.toml").write_text(MEMBER_MANIFEST, encoding="utf-8")
    (root / "LICENSE-MIT").write_text("MIT License\n", encoding="utf-8")
    (root / "LICENSE-APACHE").write_text("Apache License 2.0\n", encoding="utf-8")
    return root


@pytest.fixture
def untagged_repo() -> RepoFacts:
    return RepoFacts(
        uri="git://github.com/example/demo-app;protocol=https;branch=main",
        head_revision=HEAD,
        is_tagged_checkout=False,
    )
