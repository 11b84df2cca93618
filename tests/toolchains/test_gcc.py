# SPDX-License-Identifier: MIT
"""Tests for ccrules.toolchains.gcc."""

import shlex

import pytest

from ccrules.core.paths import GlobalPath, OutPath, SourcePath
from ccrules.rules.library import Library
from ccrules.toolchains import NATIVE_GCC, toolchain_registry
from ccrules.toolchains.gcc import GccToolchain, quote_command
from ccrules.toolchains.toolchain import Architecture, Toolchain


def q(path):
    return shlex.quote(path.absolute())


class TestQuoteCommand:
    def test_plain_tokens(self):
        assert quote_command(["g++", "-c", "-o", "a.o"]) == "g++ -c -o a.o"

    def test_quotes_spaces_and_metacharacters(self):
        assert quote_command(["-DNAME=a b", "x;y"]) == "'-DNAME=a b' 'x;y'"

    def test_paths_render_absolute(self):
        assert quote_command([GlobalPath("/usr/bin/ld")]) == "/usr/bin/ld"


class TestGccToolchainCreation:
    def test_defaults(self):
        tc = GccToolchain("gcc")
        assert tc.name == "gcc"
        assert tc.cxx == GlobalPath("g++")
        assert tc.ar == GlobalPath("ar")
        assert tc.ld == GlobalPath("ld")
        assert tc.objcopy == GlobalPath("objcopy")
        assert tc.std_deps() == []
        assert tc.script() is None

    def test_satisfies_protocol(self):
        assert isinstance(GccToolchain("gcc"), Toolchain)

    def test_tool_paths_can_be_paths(self):
        cxx = SourcePath("tools/bin/g++")
        assert GccToolchain("gcc", cxx=cxx).cxx is cxx

    def test_repr(self):
        assert repr(GccToolchain("arm")) == "GccToolchain('arm')"


class TestGccCapabilities:
    def test_architecture(self):
        assert GccToolchain("a", arch_name="x86_64").architecture() == Architecture.X86_64
        assert GccToolchain("a", arch_name="i386").architecture() == Architecture.X86_64
        assert GccToolchain("a", arch_name="aarch64").architecture() == Architecture.AARCH64
        assert GccToolchain("a", arch_name="riscv64").architecture() == Architecture.UNKNOWN
        assert GccToolchain("a").architecture() == Architecture.UNKNOWN

    def test_freestanding(self):
        assert not GccToolchain("a").freestanding()
        assert GccToolchain("a", linker_flags=["-ffreestanding"]).freestanding()
        # Only the linker flags count
        assert not GccToolchain("a", compiler_flags=["-ffreestanding"]).freestanding()

    def test_accepts(self):
        host = GccToolchain("host")
        test = GccToolchain("test", compatible_with=["host"])
        assert test.accepts(host)
        assert not host.accepts(test)

    def test_std_deps_and_script(self):
        lib = Library(out=OutPath("libc.a"))
        script = SourcePath("link.ld")
        tc = GccToolchain("a", deps=[lib], linker_script=script)
        assert tc.std_deps() == [lib]
        assert tc.script() is script


class TestWithStdLib:
    def test_derived_toolchain(self):
        base = GccToolchain(
            "arm", cxx="arm-none-eabi-g++", compiler_flags=["-Os"], compatible_with=["x"]
        )
        libc = Library(out=OutPath("libc.a"))
        script = SourcePath("boards/link.ld")
        inc = SourcePath("libc/include")
        derived = base.with_std_lib([inc], [libc], script, "arm-libc")

        assert derived.name == "arm-libc"
        assert derived.includes == (inc,)
        assert derived.std_deps() == [libc]
        assert derived.script() is script
        assert derived.cxx == GlobalPath("arm-none-eabi-g++")
        assert derived.compiler_flags == ("-Os",)
        assert derived.compatible_with == ("x",)
        assert isinstance(derived, GccToolchain)

    def test_original_untouched(self):
        base = GccToolchain("arm")
        base.with_std_lib([SourcePath("inc")], [], SourcePath("l.ld"), "arm-libc")
        assert base.name == "arm"
        assert base.includes == ()
        assert base.script() is None


class TestGccCommands:
    def test_object_file(self):
        tc = GccToolchain(
            "gcc",
            compiler_flags=["-O2"],
            includes=[GlobalPath("/sysroot/include")],
        )
        out = OutPath("gcc/a.o")
        depfile = OutPath("gcc/a.d")
        src = SourcePath("a.cc")
        root = SourcePath("")
        inc = SourcePath("lib/include")
        cmd = tc.object_file(out, depfile, ["-Wall"], [root, inc], src)
        assert cmd == (
            f"g++ -pipe -c -o {q(out)} -MD -MF {q(depfile)} -O2 -Wall "
            f"{shlex.quote('-I' + root.absolute())} {shlex.quote('-I' + inc.absolute())} "
            f"-isystem /sysroot/include {q(src)}"
        )

    def test_object_file_flag_order(self):
        tc = GccToolchain("gcc", compiler_flags=["-A"])
        cmd = tc.object_file(OutPath("a.o"), OutPath("a.d"), ["-B"], [], SourcePath("a.cc"))
        assert cmd.index("-A") < cmd.index("-B")

    def test_static_library_removes_stale_archive(self):
        tc = GccToolchain("gcc")
        out = OutPath("libfoo.a")
        a, b = OutPath("gcc/a.o"), OutPath("gcc/b.o")
        assert tc.static_library(out, [a, b]) == (
            f"rm -f {q(out)} 2>/dev/null ; ar rcs {q(out)} {q(a)} {q(b)}"
        )

    def test_shared_library(self):
        tc = GccToolchain("gcc")
        out = OutPath("libfoo.so")
        a = OutPath("gcc/a.o")
        assert tc.shared_library(out, [a]) == f"g++ -pipe -shared -o {q(out)} {q(a)}"

    def test_binary(self):
        tc = GccToolchain("gcc", linker_flags=["-static"])
        out = OutPath("app")
        obj = OutPath("gcc/main.o")
        always = OutPath("libinit.a")
        lib = OutPath("libfoo.a")
        cmd = tc.binary(out, [obj], [always], [lib], ["-lm"], None)
        assert cmd == (
            f"g++ -pipe -o {q(out)} {q(obj)} -Wl,-whole-archive {q(always)} "
            f"-Wl,-no-whole-archive {q(lib)} -static -lm"
        )

    def test_binary_without_libraries_keeps_archive_markers(self):
        cmd = GccToolchain("gcc").binary(OutPath("app"), [], [], [], [], None)
        assert cmd.endswith("-Wl,-whole-archive -Wl,-no-whole-archive")

    def test_binary_uses_toolchain_script(self):
        script = SourcePath("link.ld")
        tc = GccToolchain("gcc", linker_script=script)
        cmd = tc.binary(OutPath("app"), [], [], [], [], None)
        assert cmd.endswith(f"-T {q(script)}")

    def test_binary_explicit_script_wins(self):
        explicit = SourcePath("custom.ld")
        tc = GccToolchain("gcc", linker_script=SourcePath("link.ld"))
        cmd = tc.binary(OutPath("app"), [], [], [], [], explicit)
        assert cmd.endswith(f"-T {q(explicit)}")
        assert "link.ld" not in cmd

    def test_blob_object(self):
        out = OutPath("gcc/data.blob.o")
        src = SourcePath("data.bin")
        assert GccToolchain("gcc").blob_object(out, src) == (
            f"ld -r -b binary -o {q(out)} {q(src)}"
        )

    def test_raw_binary(self):
        out = OutPath("app.bin")
        elf = OutPath("app")
        assert GccToolchain("gcc").raw_binary(out, elf) == (
            f"objcopy -O binary {q(elf)} {q(out)}"
        )

    def test_custom_tools(self):
        tc = GccToolchain("arm", ar="arm-none-eabi-ar", cxx="arm-none-eabi-g++")
        assert tc.static_library(OutPath("l.a"), []).split(" ; ")[1].startswith(
            "arm-none-eabi-ar rcs"
        )
        assert tc.shared_library(OutPath("l.so"), []).startswith("arm-none-eabi-g++ ")


class TestNativeGcc:
    def test_registered(self):
        assert toolchain_registry.get("native-gcc") is NATIVE_GCC

    def test_flags(self):
        assert NATIVE_GCC.compiler_flags == ("-std=c++14", "-O3", "-fdiagnostics-color=always")
        assert NATIVE_GCC.linker_flags == ("-fdiagnostics-color=always",)
        assert not NATIVE_GCC.freestanding()


class TestGccToolFields:
    def test_only_used_tools_are_configurable(self):
        with pytest.raises(TypeError):
            GccToolchain("gcc", cc="gcc")  # type: ignore[call-arg]
        with pytest.raises(TypeError):
            GccToolchain("gcc", target_name="x86_64-linux-gnu")  # type: ignore[call-arg]
