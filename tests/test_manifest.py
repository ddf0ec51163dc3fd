import textwrap
from pathlib import Path, PurePosixPath

import pytest

from bbcargo.errors import AmbiguousRepoLocationError, ManifestError, MissingMetadataError
from bbcargo.manifest import CargoProject, load_metadata, relative_dir, workspace_members


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_package_metadata_is_loaded(cargo_workspace: Path) -> None:
    metadata = load_metadata(cargo_workspace / "Cargo.toml")

    assert metadata.name == "demo-app"
    assert metadata.version == "0.3.1"
    assert metadata.description == "A demo application"
    assert metadata.homepage == "https://example.invalid/demo"
    assert metadata.license == "MIT/Apache-2.0"
    assert metadata.repository is None
    assert metadata.license_file is None


def test_workspace_members_include_root_and_globbed_members(cargo_workspace: Path) -> None:
    assert workspace_members(cargo_workspace / "Cargo.toml") == ("demo-app", "demo-core")


def test_locate_from_member_directory_finds_workspace_root(cargo_workspace: Path) -> None:
    project = CargoProject.locate(cargo_workspace / "crates" / "demo-core")

    assert project.manifest_path == (cargo_workspace / "crates" / "demo-core" / "Cargo.toml").resolve()
    assert project.workspace_root == cargo_workspace.resolve()
    assert project.rel_dir() == PurePosixPath("crates/demo-core")
    assert project.metadata().name == "demo-app"


def test_locate_at_root_has_empty_relative_dir(cargo_workspace: Path) -> None:
    project = CargoProject.locate(cargo_workspace)

    assert project.rel_dir() == PurePosixPath(".")


def test_virtual_workspace_reads_workspace_metadata(tmp_path: Path) -> None:
    manifest = _write(
        tmp_path / "Cargo.toml",
        """\
        [workspace]
        members = []

        [workspace.metadata]
        name = "bundle"
        version = "2.0.0"
        license-file = "COPYING"
        """,
    )

    metadata = load_metadata(manifest)

    assert metadata.name == "bundle"
    assert metadata.version == "2.0.0"
    assert metadata.license is None
    assert metadata.license_file == "COPYING"


def test_virtual_workspace_without_metadata_table_is_fatal(tmp_path: Path) -> None:
    manifest = _write(tmp_path / "Cargo.toml", "[workspace]\nmembers = []\n")

    with pytest.raises(MissingMetadataError):
        load_metadata(manifest)


def test_missing_version_is_fatal(tmp_path: Path) -> None:
    manifest = _write(
        tmp_path / "Cargo.toml",
        """\
        [workspace]
        [workspace.metadata]
        name = "bundle"
        """,
    )

    with pytest.raises(MissingMetadataError) as excinfo:
        load_metadata(manifest)

    assert "version" in str(excinfo.value)


def test_workspace_inherited_fields_are_resolved(tmp_path: Path) -> None:
    manifest = _write(
        tmp_path / "Cargo.toml",
        """\
        [package]
        name = "app"
        version.workspace = true
        license.workspace = true

        [workspace.package]
        version = "1.4.0"
        license = "MIT"
        """,
    )

    metadata = load_metadata(manifest)

    assert metadata.version == "1.4.0"
    assert metadata.license == "MIT"


def test_non_string_fields_are_rejected(tmp_path: Path) -> None:
    manifest = _write(
        tmp_path / "Cargo.toml",
        """\
        [package]
        name = "app"
        version = "1.0.0"
        description = 42
        """,
    )

    with pytest.raises(ManifestError):
        load_metadata(manifest)


def test_relative_dir_outside_workspace_is_ambiguous(tmp_path: Path) -> None:
    root = tmp_path / "workspace"
    other = _write(tmp_path / "elsewhere" / "Cargo.toml", "[package]\n")
    root.mkdir()

    with pytest.raises(AmbiguousRepoLocationError):
        relative_dir(root, other)


def test_missing_manifest_is_reported(tmp_path: Path) -> None:
    with pytest.raises(ManifestError):
        CargoProject.locate(tmp_path)
