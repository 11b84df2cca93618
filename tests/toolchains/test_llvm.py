# SPDX-License-Identifier: MIT
"""Tests for ccrules.toolchains.llvm."""

from ccrules.core.paths import GlobalPath, OutPath, SourcePath
from ccrules.toolchains import NATIVE_CLANG, toolchain_registry
from ccrules.toolchains.gcc import GccToolchain
from ccrules.toolchains.llvm import LlvmToolchain


class TestLlvmToolchain:
    def test_tools(self):
        tc = LlvmToolchain("clang")
        assert tc.cxx == GlobalPath("clang++")
        assert tc.ar == GlobalPath("llvm-ar")
        assert tc.ld == GlobalPath("ld.lld")
        assert tc.objcopy == GlobalPath("llvm-objcopy")

    def test_is_gcc_family(self):
        assert isinstance(LlvmToolchain("clang"), GccToolchain)

    def test_forwards_options(self):
        tc = LlvmToolchain("clang", arch_name="aarch64", compatible_with=["native-gcc"])
        assert tc.architecture().value == "aarch64"
        assert tc.compatible_with == ("native-gcc",)

    def test_commands_use_llvm_tools(self):
        tc = LlvmToolchain("clang")
        assert " ; llvm-ar rcs " in tc.static_library(OutPath("l.a"), [])
        assert tc.blob_object(OutPath("d.blob.o"), SourcePath("d")).startswith("ld.lld -r")
        assert tc.raw_binary(OutPath("a.bin"), OutPath("a")).startswith("llvm-objcopy -O binary")


class TestNativeClang:
    def test_registered(self):
        assert toolchain_registry.get("native-clang") is NATIVE_CLANG

    def test_flags(self):
        assert "-fcolor-diagnostics" in NATIVE_CLANG.compiler_flags
        assert NATIVE_CLANG.linker_flags == ("-fcolor-diagnostics",)
