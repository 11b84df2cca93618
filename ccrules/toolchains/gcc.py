# SPDX-License-Identifier: MIT
"""GCC toolchain implementation.

Generates commands for the GNU toolchain:
- g++ for compiling and linking (shared libraries and binaries)
- ar for static libraries
- ld for wrapping data blobs as objects
- objcopy for raw binary images

Every path and argument in a generated command is shell-quoted.
"""

from __future__ import annotations

import copy
import platform
import shlex
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from ccrules.core.paths import BasePath, GlobalPath
from ccrules.toolchains.registry import NATIVE_TOOLCHAIN_NAME, toolchain_registry
from ccrules.toolchains.toolchain import Architecture, BaseToolchain

if TYPE_CHECKING:
    from ccrules.core.paths import OutPath
    from ccrules.rules.deps import Dep
    from ccrules.toolchains.toolchain import Toolchain

# Linker flag marking a toolchain as building for a freestanding environment
FREESTANDING_FLAG = "-ffreestanding"


def _tool(value: str | BasePath) -> BasePath:
    if isinstance(value, BasePath):
        return value
    return GlobalPath(value)


def quote_command(tokens: Iterable[object]) -> str:
    """Join tokens into a shell command line, quoting each one."""
    return " ".join(shlex.quote(str(t)) for t in tokens)


class GccToolchain(BaseToolchain):
    """GCC-family toolchain.

    Attributes:
        ar, cxx, objcopy, ld: Tool paths.
        includes: System include directories, passed with -isystem.
        compiler_flags: Flags prepended to every compile command.
        linker_flags: Flags appended to every binary link command.
        arch_name: Target architecture as the compiler spells it.
        compatible_with: Names of toolchains whose libraries this
            toolchain may link. A toolchain is always compatible with
            itself, so its own name need not be listed. For example, a
            testing toolchain may accept low-level libraries built by the
            regular toolchain.
    """

    def __init__(
        self,
        name: str,
        *,
        ar: str | BasePath = "ar",
        cxx: str | BasePath = "g++",
        objcopy: str | BasePath = "objcopy",
        ld: str | BasePath = "ld",
        includes: Sequence[BasePath] = (),
        deps: Sequence[Dep] = (),
        linker_script: BasePath | None = None,
        compiler_flags: Sequence[str] = (),
        linker_flags: Sequence[str] = (),
        arch_name: str = "",
        compatible_with: Sequence[str] = (),
    ) -> None:
        super().__init__(name)
        self.ar = _tool(ar)
        self.cxx = _tool(cxx)
        self.objcopy = _tool(objcopy)
        self.ld = _tool(ld)
        self.includes: tuple[BasePath, ...] = tuple(includes)
        self.deps: tuple[Dep, ...] = tuple(deps)
        self.linker_script = linker_script
        self.compiler_flags: tuple[str, ...] = tuple(compiler_flags)
        self.linker_flags: tuple[str, ...] = tuple(linker_flags)
        self.arch_name = arch_name
        self.compatible_with: tuple[str, ...] = tuple(compatible_with)

    def with_std_lib(
        self,
        includes: Sequence[BasePath],
        deps: Sequence[Dep],
        linker_script: BasePath | None,
        name: str,
    ) -> GccToolchain:
        """Derive a toolchain with its own standard library setup.

        The copy keeps every tool and flag but replaces the system
        include directories, the standard dependencies, the default
        linker script and the name. The original is left untouched.
        """
        derived = copy.copy(self)
        derived._name = name
        derived.includes = tuple(includes)
        derived.deps = tuple(deps)
        derived.linker_script = linker_script
        return derived

    # =========================================================================
    # Capabilities
    # =========================================================================

    def accepts(self, other: Toolchain) -> bool:
        return other.name in self.compatible_with

    def architecture(self) -> Architecture:
        # i386 is what some sysroots report for x86_64 targets
        if self.arch_name in ("i386", "x86_64"):
            return Architecture.X86_64
        if self.arch_name == "aarch64":
            return Architecture.AARCH64
        return Architecture.UNKNOWN

    def freestanding(self) -> bool:
        return FREESTANDING_FLAG in self.linker_flags

    def std_deps(self) -> list[Dep]:
        return list(self.deps)

    def script(self) -> BasePath | None:
        return self.linker_script

    # =========================================================================
    # Commands
    # =========================================================================

    def object_file(
        self,
        out: OutPath,
        depfile: OutPath,
        flags: Sequence[str],
        includes: Sequence[BasePath],
        src: BasePath,
    ) -> str:
        tokens: list[object] = [self.cxx, "-pipe", "-c", "-o", out, "-MD", "-MF", depfile]
        tokens.extend(self.compiler_flags)
        tokens.extend(flags)
        tokens.extend(f"-I{include}" for include in includes)
        for include in self.includes:
            tokens.extend(["-isystem", include])
        tokens.append(src)
        return quote_command(tokens)

    def static_library(self, out: BasePath, objs: Sequence[BasePath]) -> str:
        # ar only ever updates an existing archive, so members of objects
        # that were since removed from the library would linger and could
        # shadow symbols now defined elsewhere. Always start from scratch.
        remove = f"rm -f {shlex.quote(str(out))} 2>/dev/null"
        return f"{remove} ; {quote_command([self.ar, 'rcs', out, *objs])}"

    def shared_library(self, out: BasePath, objs: Sequence[BasePath]) -> str:
        return quote_command([self.cxx, "-pipe", "-shared", "-o", out, *objs])

    def binary(
        self,
        out: BasePath,
        objs: Sequence[BasePath],
        always_link_libs: Sequence[BasePath],
        libs: Sequence[BasePath],
        flags: Sequence[str],
        script: BasePath | None,
    ) -> str:
        tokens: list[object] = [self.cxx, "-pipe", "-o", out, *objs]
        tokens.append("-Wl,-whole-archive")
        tokens.extend(always_link_libs)
        tokens.append("-Wl,-no-whole-archive")
        tokens.extend(libs)
        tokens.extend(self.linker_flags)
        tokens.extend(flags)
        script = script if script is not None else self.linker_script
        if script is not None:
            tokens.extend(["-T", script])
        return quote_command(tokens)

    def blob_object(self, out: OutPath, src: BasePath) -> str:
        return quote_command([self.ld, "-r", "-b", "binary", "-o", out, src])

    def raw_binary(self, out: OutPath, elf_src: BasePath) -> str:
        return quote_command([self.objcopy, "-O", "binary", elf_src, out])


# =============================================================================
# Registration
# =============================================================================

NATIVE_GCC = toolchain_registry.register(
    GccToolchain(
        NATIVE_TOOLCHAIN_NAME,
        compiler_flags=["-std=c++14", "-O3", "-fdiagnostics-color=always"],
        linker_flags=["-fdiagnostics-color=always"],
        arch_name=platform.machine(),
    )
)
