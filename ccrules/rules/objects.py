# SPDX-License-Identifier: MIT
"""Object-level rules: compiled objects, blob objects and raw images.

Objects live under a directory named after the toolchain that produced
them, so the same source compiled by two toolchains never collides:

    src/main.cc -> <build>/native-gcc/src/main.o
                -> <build>/arm-gcc/src/main.o
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ccrules.core.context import BuildStep
from ccrules.core.errors import MissingOutputError
from ccrules.core.paths import OutPath, SourcePath

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ccrules.core.context import Context
    from ccrules.core.paths import BasePath
    from ccrules.rules.binary import Binary
    from ccrules.rules.library import Library
    from ccrules.toolchains.toolchain import Toolchain


def _namespaced(path: SourcePath | OutPath, toolchain: Toolchain, ext: str) -> OutPath:
    return path.with_prefix(toolchain.name + "/").with_ext(ext)


@dataclass
class ObjectFile:
    """Compiles a single C++ source file.

    Attributes:
        src: Source file.
        includes: Include directories, searched in order.
        flags: Compiler flags added after the toolchain's own.
        toolchain: Toolchain to compile with (default toolchain if None).
    """

    src: SourcePath
    includes: list[BasePath] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)
    toolchain: Toolchain | None = None

    def out(self, ctx: Context) -> OutPath:
        return _namespaced(self.src, ctx.toolchains.resolve(self.toolchain), "o")

    def build(self, ctx: Context) -> None:
        toolchain = ctx.toolchains.resolve(self.toolchain)
        out = self.out(ctx)
        depfile = out.with_ext("d")
        cmd = toolchain.object_file(out, depfile, self.flags, self.includes, self.src)
        with ctx.trace("obj:" + out.relative()):
            ctx.add_build_step(
                BuildStep(
                    out=out,
                    depfile=depfile,
                    ins=[self.src],
                    cmd=cmd,
                    descr=f"CC (toolchain: {toolchain.name}) {out.relative()}",
                )
            )


@dataclass
class BlobObject:
    """Creates a relocatable object file from any blob of data.

    The blob's contents become linkable data, with start and end symbols
    named after the input path by the linker.
    """

    input: SourcePath | OutPath
    toolchain: Toolchain | None = None

    def out(self, ctx: Context) -> OutPath:
        return _namespaced(self.input, ctx.toolchains.resolve(self.toolchain), "blob.o")

    def build(self, ctx: Context) -> None:
        toolchain = ctx.toolchains.resolve(self.toolchain)
        out = self.out(ctx)
        with ctx.trace("blob:" + out.relative()):
            ctx.add_build_step(
                BuildStep(
                    out=out,
                    ins=[self.input],
                    cmd=toolchain.blob_object(out, self.input),
                    descr=f"BLOB (toolchain: {toolchain.name}) {out.relative()}",
                )
            )


@dataclass
class RawImage:
    """Strips a linked binary down to a raw memory image.

    Attributes:
        binary: Binary to strip; it is built first.
        out: Image path (default: the binary's output with a .bin extension).
    """

    binary: Binary
    out: OutPath | None = None

    def output(self) -> OutPath:
        if self.out is not None:
            return self.out
        if self.binary.out is None:
            raise MissingOutputError("Binary")
        return self.binary.out.with_ext("bin")

    def build(self, ctx: Context) -> None:
        out = self.output()
        self.binary.build(ctx)
        if ctx.built(out.absolute()):
            return
        toolchain = ctx.toolchains.resolve(self.binary.toolchain)
        elf = self.binary.out
        with ctx.trace("raw:" + out.relative()):
            ctx.add_build_step(
                BuildStep(
                    out=out,
                    ins=[elf],
                    cmd=toolchain.raw_binary(out, elf),
                    descr=f"OBJCOPY (toolchain: {toolchain.name}) {out.relative()}",
                )
            )


def compile_sources(
    ctx: Context,
    srcs: Sequence[SourcePath],
    flags: Sequence[str],
    deps: Sequence[Library],
    toolchain: Toolchain,
) -> list[BasePath]:
    """Compile sources against a dependency closure.

    The include search list is the source root followed by the include
    directories declared by each library in `deps`, in order.

    Returns:
        The object paths, in source order.
    """
    includes: list[BasePath] = [SourcePath("")]
    for dep in deps:
        includes.extend(dep.includes)

    objs: list[BasePath] = []
    for src in srcs:
        obj = ObjectFile(
            src=src,
            includes=includes,
            flags=list(flags),
            toolchain=toolchain,
        )
        obj.build(ctx)
        objs.append(obj.out(ctx))
    return objs
