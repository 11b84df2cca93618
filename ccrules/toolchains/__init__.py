# SPDX-License-Identifier: MIT
"""Toolchain definitions (GCC, LLVM) and the toolchain registry."""

from ccrules.toolchains.registry import (
    CC_TOOLCHAIN,
    NATIVE_TOOLCHAIN_NAME,
    ToolchainRegistry,
    toolchain_registry,
)
from ccrules.toolchains.toolchain import (
    Architecture,
    BaseToolchain,
    Toolchain,
    toolchain_accepts,
)
from ccrules.toolchains.gcc import NATIVE_GCC, GccToolchain
from ccrules.toolchains.llvm import NATIVE_CLANG, LlvmToolchain

__all__ = [
    # Contract
    "Architecture",
    "BaseToolchain",
    "Toolchain",
    "toolchain_accepts",
    # Registry
    "CC_TOOLCHAIN",
    "NATIVE_TOOLCHAIN_NAME",
    "ToolchainRegistry",
    "toolchain_registry",
    # GCC toolchain
    "GccToolchain",
    "NATIVE_GCC",
    # LLVM toolchain
    "LlvmToolchain",
    "NATIVE_CLANG",
]
