# SPDX-License-Identifier: MIT
"""Build rules for C/C++ objects, libraries and binaries."""

from ccrules.rules.binary import Binary
from ccrules.rules.deps import Dep, collect_deps
from ccrules.rules.library import Library, MultipleToolchainLibrary
from ccrules.rules.objects import BlobObject, ObjectFile, RawImage, compile_sources

__all__ = [
    "Binary",
    "BlobObject",
    "Dep",
    "Library",
    "MultipleToolchainLibrary",
    "ObjectFile",
    "RawImage",
    "collect_deps",
    "compile_sources",
]
