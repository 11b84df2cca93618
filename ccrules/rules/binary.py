# SPDX-License-Identifier: MIT
"""Executables."""

from __future__ import annotations

import shlex
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ccrules.core.context import BuildStep
from ccrules.core.errors import MissingOutputError
from ccrules.rules.deps import collect_deps
from ccrules.rules.objects import compile_sources

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ccrules.core.context import Context
    from ccrules.core.paths import BasePath, OutPath, SourcePath
    from ccrules.rules.deps import Dep
    from ccrules.toolchains.toolchain import Toolchain


@dataclass
class Binary:
    """Builds and links an executable.

    Attributes:
        out: Executable to produce. Required.
        srcs: Sources compiled into the executable.
        compiler_flags: Flags for compiling the sources.
        linker_flags: Flags for the link step.
        deps: Libraries to link.
        script: Linker script, overriding the toolchain's default.
        toolchain: Toolchain to build with (default if None).
    """

    out: OutPath | None = None
    srcs: list[SourcePath] = field(default_factory=list)
    compiler_flags: list[str] = field(default_factory=list)
    linker_flags: list[str] = field(default_factory=list)
    deps: list[Dep] = field(default_factory=list)
    script: BasePath | None = None
    toolchain: Toolchain | None = None

    def build(self, ctx: Context) -> None:
        if self.out is None:
            raise MissingOutputError("Binary")
        with ctx.trace("bin:" + self.out.relative()):
            self._build(ctx, self.out)

    def _build(self, ctx: Context, out: OutPath) -> None:
        if ctx.built(out.absolute()):
            return

        toolchain = ctx.toolchains.resolve(self.toolchain)

        deps = collect_deps(toolchain, [*self.deps, *toolchain.std_deps()], ctx.toolchains)
        for dep in deps:
            dep.build(ctx)
        objs = compile_sources(ctx, self.srcs, self.compiler_flags, deps, toolchain)

        ins: list[BasePath] = list(objs)
        always_link_libs: list[BasePath] = []
        other_libs: list[BasePath] = []
        for dep in deps:
            ins.append(dep.out)
            if dep.always_link:
                always_link_libs.append(dep.out)
            else:
                other_libs.append(dep.out)

        # The script is an input so that editing it relinks
        if self.script is not None:
            ins.append(self.script)
        elif toolchain.script() is not None:
            ins.append(toolchain.script())

        cmd = toolchain.binary(
            out, objs, always_link_libs, other_libs, self.linker_flags, self.script
        )
        ctx.add_build_step(
            BuildStep(
                out=out,
                ins=ins,
                cmd=cmd,
                descr=f"LD (toolchain: {toolchain.name}) {out.relative()}",
            )
        )

    def run(self, args: Sequence[str] = ()) -> str:
        """Command line running the built executable with `args`."""
        if self.out is None:
            raise MissingOutputError("Binary")
        return " ".join(shlex.quote(str(part)) for part in (self.out, *args))
