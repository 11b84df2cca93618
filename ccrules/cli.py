# SPDX-License-Identifier: MIT
"""Command-line interface for ccrules.

    ccrules generate [-b build.py] [NAME=value ...]
    ccrules build [targets ...]
    ccrules clean
    ccrules toolchains [NAME=value ...]

Problems the CLI detects itself are raised as CcRulesError and reported
once by main(), which then returns status 1.
"""

from __future__ import annotations

import argparse
import collections
import json
import logging
import os
import re
import shutil
import subprocess
import sys
from pathlib import Path

from ccrules.core.errors import CcRulesError, ConfigureError

logger = logging.getLogger("ccrules")

NINJA_FILE = "build.ninja"
DEFAULT_SCRIPT = "build.py"

# Matches the descriptions rules give their steps, e.g. "CC (toolchain: arm) ..."
_DESCR_RE = re.compile(r"^  descr = (\S+) \(toolchain: ([^)]+)\)")


def setup_logging(args: argparse.Namespace) -> None:
    """Configure logging from the -v/--debug flags."""
    if args.debug:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s: %(name)s: %(message)s"
        )
    else:
        logging.basicConfig(
            level=logging.INFO if args.verbose else logging.WARNING,
            format="%(levelname)s: %(message)s",
        )


def split_variables(extra: list[str]) -> dict[str, str]:
    """Parse NAME=value option assignments.

    Raises:
        ConfigureError: If an argument is not an assignment.
    """
    variables: dict[str, str] = {}
    for arg in extra:
        name, sep, value = arg.partition("=")
        if not sep or not name or name.startswith("-"):
            raise ConfigureError(f"expected NAME=value, got {arg!r}")
        variables[name] = value
    return variables


def build_script_path(build_script: str | None, cwd: Path | None = None) -> Path:
    """Return the build script to run: the one given, or build.py in cwd.

    Raises:
        ConfigureError: If the script does not exist.
    """
    cwd = cwd or Path.cwd()
    script = Path(build_script) if build_script else cwd / DEFAULT_SCRIPT
    if not script.is_file():
        raise ConfigureError(f"build script not found: {script}")
    return script.absolute()


def script_environment(
    script: Path, build_dir: Path, variables: dict[str, str]
) -> dict[str, str]:
    """Environment a build script runs in.

    The script's directory is the source root. Option assignments travel
    as JSON, so the script can check their names against the options it
    declares.
    """
    env = dict(os.environ)
    env["CCRULES_SOURCE_DIR"] = str(script.parent)
    env["CCRULES_BUILD_DIR"] = str(build_dir.absolute())
    env["CCRULES_VARS"] = json.dumps(variables)
    return env


def steps_by_toolchain(ninja_file: Path) -> collections.Counter[str]:
    """Count the build steps of each toolchain in a generated file."""
    counts: collections.Counter[str] = collections.Counter()
    with open(ninja_file) as f:
        for line in f:
            match = _DESCR_RE.match(line)
            if match:
                counts[match.group(2)] += 1
    return counts


def cmd_generate(args: argparse.Namespace) -> int:
    """Run a build script, which writes build.ninja into the build directory."""
    variables = split_variables(args.extra)
    script = build_script_path(args.build_script)
    build_dir = Path(args.build_dir)
    build_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Generating %s from %s", build_dir / NINJA_FILE, script)
    env = script_environment(script, build_dir, variables)
    for key in ("CCRULES_SOURCE_DIR", "CCRULES_BUILD_DIR", "CCRULES_VARS"):
        logger.debug("  %s=%s", key, env[key])

    result = subprocess.run([sys.executable, str(script)], env=env, cwd=script.parent)
    if result.returncode != 0:
        logger.error("%s exited with status %d", script.name, result.returncode)
    return result.returncode


def cmd_build(args: argparse.Namespace) -> int:
    """Build targets using ninja."""
    build_dir = Path(args.build_dir)
    ninja_file = build_dir / NINJA_FILE
    if not ninja_file.is_file():
        raise ConfigureError(f"no {NINJA_FILE} in {build_dir}; run 'ccrules generate' first")
    ninja = shutil.which("ninja")
    if ninja is None:
        raise ConfigureError("ninja not found in PATH")

    cmd = [ninja, "-C", str(build_dir)]
    if args.jobs:
        cmd += ["-j", str(args.jobs)]
    if args.verbose:
        cmd.append("-v")
    cmd += args.targets
    logger.info("Running: %s", " ".join(cmd))

    result = subprocess.run(cmd)
    if result.returncode != 0:
        counts = steps_by_toolchain(ninja_file)
        summary = ", ".join(f"{name}: {n}" for name, n in sorted(counts.items()))
        logger.error(
            "ninja failed with status %d (%d steps by toolchain: %s)",
            result.returncode,
            sum(counts.values()),
            summary or "none",
        )
    return result.returncode


def cmd_clean(args: argparse.Namespace) -> int:
    """Remove the build directory."""
    build_dir = Path(args.build_dir)
    if build_dir.exists():
        logger.info("Removing build directory: %s", build_dir)
        shutil.rmtree(build_dir)
    return 0


def cmd_toolchains(args: argparse.Namespace) -> int:
    """List registered toolchains, marking the default one."""
    from ccrules.core.options import options, set_vars
    from ccrules.toolchains import toolchain_registry

    variables = split_variables(args.extra)
    options.check(variables)
    set_vars(variables)

    default = toolchain_registry.default_name
    for toolchain in toolchain_registry:
        marker = "*" if toolchain.name == default else " "
        print(f"{marker} {toolchain.name} ({toolchain.architecture().value})")

    # Raises UnknownToolchainError listing the registered names
    toolchain_registry.get(default)
    return 0


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--debug", action="store_true", help="Debug output")
    parser.add_argument(
        "-B", "--build-dir", default="build", help="Build directory (default: build)"
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ccrules CLI."""
    from ccrules import __version__

    parser = argparse.ArgumentParser(
        prog="ccrules",
        description="Declarative C/C++ build rules that generate Ninja files.",
        epilog="Run 'ccrules <command> --help' for command-specific help.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    gen_parser = subparsers.add_parser(
        "generate", help="Generate build.ninja by running a build script"
    )
    add_common_args(gen_parser)
    gen_parser.add_argument(
        "-b", "--build-script", help=f"Build script (default: ./{DEFAULT_SCRIPT})"
    )
    gen_parser.add_argument(
        "extra",
        nargs="*",
        help="Option values (NAME=value), e.g. cc-toolchain=native-clang",
    )
    gen_parser.set_defaults(func=cmd_generate)

    build_parser = subparsers.add_parser("build", help="Build targets using ninja")
    add_common_args(build_parser)
    build_parser.add_argument("-j", "--jobs", type=int, help="Number of parallel jobs")
    build_parser.add_argument("targets", nargs="*", help="Targets to build")
    build_parser.set_defaults(func=cmd_build)

    clean_parser = subparsers.add_parser("clean", help="Remove the build directory")
    add_common_args(clean_parser)
    clean_parser.set_defaults(func=cmd_clean)

    tc_parser = subparsers.add_parser(
        "toolchains", help="List registered toolchains (* marks the default)"
    )
    add_common_args(tc_parser)
    tc_parser.add_argument("extra", nargs="*", help="Option values (NAME=value)")
    tc_parser.set_defaults(func=cmd_toolchains)

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    setup_logging(args)
    try:
        result: int = args.func(args)
    except CcRulesError as e:
        logger.error("%s", e)
        return 1
    return result


if __name__ == "__main__":
    sys.exit(main())
