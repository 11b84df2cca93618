# SPDX-License-Identifier: MIT
"""LLVM/Clang toolchain implementation.

Clang and the LLVM binutils accept the same command shapes as their GNU
counterparts, so this toolchain only swaps the tools:
- clang++ for compiling and linking
- llvm-ar for static libraries
- ld.lld for wrapping data blobs as objects
- llvm-objcopy for raw binary images
"""

from __future__ import annotations

import platform
from typing import Any

from ccrules.core.paths import BasePath
from ccrules.toolchains.gcc import GccToolchain
from ccrules.toolchains.registry import toolchain_registry


class LlvmToolchain(GccToolchain):
    """LLVM toolchain for C and C++ development."""

    def __init__(
        self,
        name: str,
        *,
        ar: str | BasePath = "llvm-ar",
        cxx: str | BasePath = "clang++",
        objcopy: str | BasePath = "llvm-objcopy",
        ld: str | BasePath = "ld.lld",
        **kwargs: Any,
    ) -> None:
        super().__init__(
            name, ar=ar, cxx=cxx, objcopy=objcopy, ld=ld, **kwargs
        )


# =============================================================================
# Registration
# =============================================================================

NATIVE_CLANG = toolchain_registry.register(
    LlvmToolchain(
        "native-clang",
        compiler_flags=["-std=c++14", "-O3", "-fcolor-diagnostics"],
        linker_flags=["-fcolor-diagnostics"],
        arch_name=platform.machine(),
    )
)
