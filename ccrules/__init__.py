# SPDX-License-Identifier: MIT
"""
ccrules: declarative C/C++ build rules that emit build steps.

Build descriptions declare libraries and binaries as plain values.
Building them computes the exact compile, archive and link commands,
which a build engine (Ninja, via the bundled generator) then executes.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Protocol

from ccrules.core.context import BuildContext, BuildStep, Context
from ccrules.core.errors import CcRulesError
from ccrules.core.options import StringOption, cli_vars, options
from ccrules.core.paths import (
    GlobalPath,
    Layout,
    OutPath,
    SourcePath,
    get_layout,
)
from ccrules.generators.ninja import NinjaGenerator
from ccrules.rules import (
    Binary,
    BlobObject,
    Library,
    MultipleToolchainLibrary,
    ObjectFile,
    RawImage,
)
from ccrules.toolchains import (
    GccToolchain,
    LlvmToolchain,
    ToolchainRegistry,
    toolchain_registry,
)

__version__ = "0.1.0"

logger = logging.getLogger(__name__)


class Buildable(Protocol):
    def build(self, ctx: Context) -> None: ...


def generate(
    *units: Buildable,
    build_dir: Path | str | None = None,
    toolchains: ToolchainRegistry | None = None,
) -> BuildContext:
    """Build rule units and write build.ninja for them.

    This is the usual last line of a build script. Command line variables
    that name no declared option, and errors in the rule descriptions, are
    reported and end the process with status 1.

    Args:
        *units: Libraries, binaries and other rules to build.
        build_dir: Where to write build.ninja (default: the layout's
            build directory, set by the ccrules CLI).
        toolchains: Registry to resolve toolchains with.

    Returns:
        The context holding the recorded steps.
    """
    ctx = BuildContext(toolchains)
    try:
        options.check(cli_vars())
        for unit in units:
            unit.build(ctx)
    except CcRulesError as e:
        logger.error("%s", e)
        sys.exit(1)

    output_dir = Path(build_dir) if build_dir is not None else get_layout().build_dir
    NinjaGenerator().generate(ctx, output_dir)
    return ctx


# Public API exports
__all__ = [
    # Version
    "__version__",
    # Entry point for build scripts
    "generate",
    "StringOption",
    "options",
    # Paths
    "GlobalPath",
    "Layout",
    "OutPath",
    "SourcePath",
    # Engine boundary
    "BuildContext",
    "BuildStep",
    "Context",
    "CcRulesError",
    # Rules
    "Binary",
    "BlobObject",
    "Library",
    "MultipleToolchainLibrary",
    "ObjectFile",
    "RawImage",
    # Toolchains
    "GccToolchain",
    "LlvmToolchain",
    "ToolchainRegistry",
    "toolchain_registry",
    # Generators
    "NinjaGenerator",
]
