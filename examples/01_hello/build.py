#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Example: a static library and a binary that links it.

This example shows:
- Declaring a library with public include directories
- Linking it into a binary through deps
- Choosing the toolchain with `ccrules generate cc-toolchain=native-clang`
"""

import ccrules
from ccrules import Binary, Library, OutPath, SourcePath

greet = Library(
    out=OutPath("libgreet.a"),
    srcs=[SourcePath("greet/greet.cc")],
    includes=[SourcePath("greet/include")],
)

hello = Binary(
    out=OutPath("hello"),
    srcs=[SourcePath("main.cc")],
    deps=[greet],
)

ccrules.generate(hello)
