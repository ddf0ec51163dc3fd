import textwrap
from pathlib import Path

import pytest

from bbcargo.errors import LockfileError, ResolutionError
from bbcargo.lockfile import parse_lockfile, parse_source_id, read_lockfile, resolve_graph
from bbcargo.models import (
    BranchRef,
    DefaultBranchRef,
    GitOrigin,
    PathOrigin,
    RegistryOrigin,
    RemoteOrigin,
    RevRef,
    TagRef,
)

SHA = "f1e2d3c4b5a69788796a5b4c3d2e1f0011223344"


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        (
            "registry+https://github.com/rust-lang/crates.io-index",
            RegistryOrigin(url="https://github.com/rust-lang/crates.io-index"),
        ),
        ("sparse+https://index.crates.io/", RegistryOrigin(url="https://index.crates.io/")),
        (
            f"git+https://github.com/example/bar?branch=main#{SHA}",
            GitOrigin(url="https://github.com/example/bar", reference=BranchRef("main"), precise=SHA),
        ),
        (
            f"git+https://github.com/example/bar?tag=v1.2.3#{SHA}",
            GitOrigin(url="https://github.com/example/bar", reference=TagRef("v1.2.3"), precise=SHA),
        ),
        (
            f"git+https://github.com/example/bar?rev=abc123#{SHA}",
            GitOrigin(url="https://github.com/example/bar", reference=RevRef("abc123"), precise=SHA),
        ),
        (
            f"git+ssh://git@github.com/example/bar.git#{SHA}",
            GitOrigin(url="ssh://git@github.com/example/bar.git", reference=DefaultBranchRef(), precise=SHA),
        ),
        ("path+file:///src/helper", PathOrigin(path="file:///src/helper")),
        (None, PathOrigin()),
        ("local-registry+file:///vendor", RemoteOrigin(url="file:///vendor")),
    ],
)
def test_source_ids_map_to_typed_origins(source: str | None, expected: object) -> None:
    assert parse_source_id(source) == expected


def test_percent_encoded_branch_names_are_decoded() -> None:
    origin = parse_source_id(f"git+https://github.com/example/bar?branch=feature%2Fpin#{SHA}")

    assert isinstance(origin, GitOrigin)
    assert origin.reference == BranchRef("feature/pin")


def test_v3_lockfile_carries_package_checksums() -> None:
    lock = parse_lockfile(
        textwrap.dedent("""\
            version = 3

            [[package]]
            name = "foo"
            version = "1.0.0"
            source = "registry+https://github.com/rust-lang/crates.io-index"
            checksum = "deadbeef"
        """)
    )

    assert lock.version == 3
    assert lock.packages[0].checksum == "deadbeef"


def test_v1_lockfile_checksums_come_from_metadata_table() -> None:
    lock = parse_lockfile(
        textwrap.dedent("""\
            [root]
            name = "app"
            version = "0.1.0"
            dependencies = ["foo 1.0.0 (registry+https://github.com/rust-lang/crates.io-index)"]

            [[package]]
            name = "foo"
            version = "1.0.0"
            source = "registry+https://github.com/rust-lang/crates.io-index"

            [metadata]
            "checksum foo 1.0.0 (registry+https://github.com/rust-lang/crates.io-index)" = "cafe"
            "checksum bar 0.1.0 (git+https://github.com/example/bar#abc)" = "<none>"
        """)
    )

    assert lock.version == 1
    assert {package.name for package in lock.packages} == {"app", "foo"}
    foo = next(package for package in lock.packages if package.name == "foo")
    assert foo.checksum == "cafe"


def test_invalid_toml_is_a_lockfile_error() -> None:
    with pytest.raises(LockfileError):
        parse_lockfile("[[package]\nname = ")


def test_package_without_version_is_rejected() -> None:
    with pytest.raises(LockfileError):
        parse_lockfile('[[package]]\nname = "foo"\n')


def test_missing_lockfile_is_a_resolution_error(tmp_path: Path) -> None:
    with pytest.raises(ResolutionError) as excinfo:
        read_lockfile(tmp_path / "Cargo.lock")

    assert "generate-lockfile" in str(excinfo.value)


def test_resolve_graph_only_keeps_checksums_for_registry_packages(tmp_path: Path) -> None:
    (tmp_path / "Cargo.lock").write_text(
        textwrap.dedent(f"""\
            version = 3

            [[package]]
            name = "bar"
            version = "0.2.0"
            source = "git+https://github.com/example/bar#{SHA}"
            checksum = "ignored"

            [[package]]
            name = "foo"
            version = "1.0.0"
            source = "registry+https://github.com/rust-lang/crates.io-index"
            checksum = "deadbeef"
        """),
        encoding="utf-8",
    )

    bar, foo = resolve_graph(tmp_path)

    assert bar.checksum is None
    assert isinstance(bar.origin, GitOrigin)
    assert foo.checksum == "deadbeef"
