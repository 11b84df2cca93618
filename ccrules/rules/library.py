# SPDX-License-Identifier: MIT
"""Static and shared C++ libraries.

A Library is pure data until build() is called. Building it builds its
whole dependency closure first, then compiles its own sources and blobs,
then emits one archive (static) or link (shared) step.

Libraries are built at most once per process: the output path is the
identity, and the engine context remembers which outputs it has seen.

Example:
    util = Library(
        out=OutPath("libutil.a"),
        srcs=[SourcePath("util/util.cc")],
        includes=[SourcePath("util/include")],
    )
    app = Binary(out=OutPath("app"), srcs=[SourcePath("main.cc")], deps=[util])
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ccrules.core.context import BuildStep
from ccrules.core.errors import MissingOutputError, ToolchainMismatchError
from ccrules.rules.deps import collect_deps
from ccrules.rules.objects import BlobObject, compile_sources
from ccrules.toolchains.toolchain import toolchain_accepts

if TYPE_CHECKING:
    from ccrules.core.context import Context
    from ccrules.core.paths import BasePath, OutPath, SourcePath
    from ccrules.rules.deps import Dep
    from ccrules.toolchains.registry import ToolchainRegistry
    from ccrules.toolchains.toolchain import Toolchain

logger = logging.getLogger(__name__)


@dataclass
class Library:
    """Builds and links a C++ library.

    Attributes:
        out: Library file to produce. Required.
        srcs: Sources compiled into the library.
        blobs: Data files wrapped as objects and archived with it.
        objs: Prebuilt objects archived as-is.
        includes: Include directories offered to everything that depends
            on this library (and to the library itself).
        compiler_flags: Flags for compiling this library's sources.
        deps: Libraries this one depends on.
        shared: Link a shared library instead of archiving a static one.
        always_link: Keep every symbol when linked into a binary.
        toolchain: Toolchain the library is pinned to (default if None).
    """

    out: OutPath | None = None
    srcs: list[SourcePath] = field(default_factory=list)
    blobs: list[SourcePath | OutPath] = field(default_factory=list)
    objs: list[BasePath] = field(default_factory=list)
    includes: list[BasePath] = field(default_factory=list)
    compiler_flags: list[str] = field(default_factory=list)
    deps: list[Dep] = field(default_factory=list)
    shared: bool = False
    always_link: bool = False
    toolchain: Toolchain | None = None

    def _require_out(self) -> OutPath:
        if self.out is None:
            raise MissingOutputError("Library")
        return self.out

    def multiple_toolchains(self) -> MultipleToolchainLibrary:
        """Wrap this library so it can be built by several toolchains."""
        return MultipleToolchainLibrary(self._require_out(), self)

    def cc_library(
        self, toolchain: Toolchain, toolchains: ToolchainRegistry
    ) -> Library:
        """Return this library if `toolchain` can link it.

        Raises:
            ToolchainMismatchError: If the library is pinned to a toolchain
                that `toolchain` does not accept.
        """
        out = self._require_out()
        own = toolchains.resolve(self.toolchain)
        if not toolchain_accepts(toolchain, own):
            raise ToolchainMismatchError(out.relative(), toolchain.name)
        return self

    def build(self, ctx: Context) -> None:
        out = self._require_out()
        with ctx.trace("lib:" + out.relative()):
            self._build(ctx, out)

    def _build(self, ctx: Context, out: OutPath) -> None:
        if ctx.built(out.absolute()):
            return

        toolchain = ctx.toolchains.resolve(self.toolchain)

        # The closure includes this library itself, which is already
        # marked built, so its entry below returns immediately.
        deps = collect_deps(toolchain, [*toolchain.std_deps(), self], ctx.toolchains)
        for dep in deps:
            dep.build(ctx)

        objs = compile_sources(ctx, self.srcs, self.compiler_flags, deps, toolchain)
        objs.extend(self.objs)

        for blob in self.blobs:
            blob_object = BlobObject(input=blob, toolchain=toolchain)
            blob_object.build(ctx)
            objs.append(blob_object.out(ctx))

        if self.shared:
            cmd = toolchain.shared_library(out, objs)
            descr = f"LD (toolchain: {toolchain.name}) {out.relative()}"
        else:
            cmd = toolchain.static_library(out, objs)
            descr = f"AR (toolchain: {toolchain.name}) {out.relative()}"

        ctx.add_build_step(BuildStep(out=out, ins=objs, cmd=cmd, descr=descr))


@dataclass(frozen=True)
class MultipleToolchainLibrary:
    """A library that can be built by several toolchains in one build.

    Resolving it under the default toolchain gives back the wrapped
    library unchanged. Any other toolchain gets a copy pinned to that
    toolchain, with its output moved under a directory named after it:

        base "libfoo.a", default toolchain -> libfoo.a
        base "libfoo.a", toolchain "arm"   -> arm/libfoo.a

    Create one with Library.multiple_toolchains().
    """

    base_out: OutPath
    lib: Library

    def cc_library(
        self, toolchain: Toolchain, toolchains: ToolchainRegistry
    ) -> Library:
        if toolchain.name == toolchains.default().name:
            return self.lib
        return dataclasses.replace(
            self.lib,
            out=self.base_out.with_prefix(toolchain.name + "/"),
            toolchain=toolchain,
        )

    def build(self, ctx: Context) -> None:
        """Build the default-toolchain variant.

        Other variants are built by whatever depends on them.
        """
        self.cc_library(ctx.toolchains.default(), ctx.toolchains).build(ctx)
