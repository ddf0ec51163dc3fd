"""Command-line entrypoint: ``bbcargo``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from bbcargo.errors import BbcargoError
from bbcargo.fetch.git import GitPrefix
from bbcargo.observability import configure_logging
from bbcargo.policy import Policy
from bbcargo.recipe import generate_recipe


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bbcargo",
        description="Generates a BitBake recipe for a given Cargo project.",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Silence all output.")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Verbose mode (-v, -vv, ...).",
    )
    parser.add_argument(
        "-R",
        "--reproducible",
        action="store_true",
        help="Output exact git references for git dependencies.",
    )
    parser.add_argument(
        "-l",
        "--legacy-overrides",
        action="store_true",
        help="Use the legacy PV_append override syntax.",
    )
    parser.add_argument(
        "--manifest-path",
        default=None,
        help="Path to Cargo.toml or a directory inside the project (defaults to cwd).",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        default=".",
        help="Directory the recipe is written to.",
    )
    parser.add_argument(
        "--mutable-refs",
        choices=("allow", "warn", "error"),
        default="warn",
        help="How to treat git dependencies that follow the latest commit.",
    )
    parser.add_argument(
        "--gitsm",
        action="store_true",
        help="Use the gitsm:// fetcher so git submodules are fetched too.",
    )
    parser.add_argument(
        "--descriptor-json",
        default=None,
        help="Also write the synthesized descriptor as JSON to this path.",
    )
    parser.add_argument(
        "--descriptor-cbor",
        default=None,
        help="Also write the synthesized descriptor as canonical CBOR to this path.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbosity=args.verbose, quiet=args.quiet)

    policy = Policy(
        reproducible=args.reproducible,
        legacy_overrides=args.legacy_overrides,
        mutable_ref_policy=args.mutable_refs,
        git_prefix=GitPrefix.GITSM if args.gitsm else GitPrefix.GIT,
    )

    try:
        result = generate_recipe(
            args.manifest_path,
            policy=policy,
            output_dir=Path(args.output_dir),
            descriptor_json=args.descriptor_json,
            descriptor_cbor=args.descriptor_cbor,
        )
    except BbcargoError as exc:
        print(f"error[{exc.code}]: {exc}", file=sys.stderr)
        return 1

    if not args.quiet:
        # bitbake splits recipe file names on the first underscore
        if "_" in result.metadata.name:
            print("Project name contains an underscore")
        print(f"Wrote: {result.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
