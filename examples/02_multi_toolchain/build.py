#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Example: one library built by a host and a cross toolchain.

This example shows:
- Registering a cross toolchain next to the native one
- Sharing a library between toolchains with multiple_toolchains()
- Libraries pinned to a single toolchain
- Linker scripts, data blobs and raw images for firmware

Only build.ninja is generated here; building the firmware needs an
arm-none-eabi cross compiler on PATH.
"""

import ccrules
from ccrules import (
    Binary,
    GccToolchain,
    Library,
    OutPath,
    RawImage,
    SourcePath,
    toolchain_registry,
)

arm = toolchain_registry.register(
    GccToolchain(
        "arm-none-eabi",
        ar="arm-none-eabi-ar",
        cxx="arm-none-eabi-g++",
        objcopy="arm-none-eabi-objcopy",
        ld="arm-none-eabi-ld",
        compiler_flags=["-std=c++14", "-Os", "-fno-exceptions", "-fno-rtti"],
        linker_flags=["-nostdlib", "-ffreestanding"],
    )
)

# Built once per toolchain that links it
util = Library(
    out=OutPath("libutil.a"),
    srcs=[SourcePath("util/crc.cc")],
).multiple_toolchains()

boot = Library(
    out=OutPath("arm-none-eabi/libboot.a"),
    srcs=[SourcePath("boot/start.cc")],
    always_link=True,
    toolchain=arm,
)

crc_tool = Binary(
    out=OutPath("crc"),
    srcs=[SourcePath("tool.cc")],
    deps=[util],
)

firmware = Binary(
    out=OutPath("firmware.elf"),
    srcs=[SourcePath("firmware/main.cc")],
    deps=[
        util,
        boot,
        Library(
            out=OutPath("arm-none-eabi/libbanner.a"),
            blobs=[SourcePath("firmware/banner.txt")],
            toolchain=arm,
        ),
    ],
    script=SourcePath("firmware/link.ld"),
    toolchain=arm,
)

ccrules.generate(crc_tool, RawImage(firmware))
