# SPDX-License-Identifier: MIT
"""Path values used by build rules.

Three kinds of paths show up in rule descriptions:

- SourcePath: a file in the source tree, relative to the source root.
- OutPath: a file produced by the build, relative to the build root.
- GlobalPath: a tool or file outside the workspace (e.g. "g++" on PATH).

Paths render absolute when converted with str(), which is what ends up
in generated commands. The roots come from the process Layout.
"""

from __future__ import annotations

import os
import posixpath
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Layout:
    """Source and build roots for the current process.

    Attributes:
        source_dir: Root that SourcePaths are relative to.
        build_dir: Root that OutPaths are relative to.
    """

    source_dir: Path
    build_dir: Path

    @classmethod
    def from_environment(cls) -> Layout:
        """Build a layout from CCRULES_SOURCE_DIR and CCRULES_BUILD_DIR.

        The CLI sets both before running a build script. When a script is
        run directly, the current directory is the source root and
        "build" below it is the build root.
        """
        source_dir = Path(os.environ.get("CCRULES_SOURCE_DIR") or Path.cwd())
        build_dir = Path(os.environ.get("CCRULES_BUILD_DIR") or source_dir / "build")
        return cls(source_dir.absolute(), build_dir.absolute())


_layout: Layout | None = None


def get_layout() -> Layout:
    """Get the process layout, reading the environment on first use."""
    global _layout
    if _layout is None:
        _layout = Layout.from_environment()
    return _layout


def set_layout(layout: Layout | None) -> Layout | None:
    """Replace the process layout.

    Args:
        layout: New layout, or None to re-read the environment lazily.

    Returns:
        The previous layout.
    """
    global _layout
    previous = _layout
    _layout = layout
    return previous


def _with_ext(rel: str, ext: str) -> str:
    stem, _ = posixpath.splitext(rel)
    return f"{stem}.{ext}" if ext else stem


class BasePath(ABC):
    """Common behaviour of all path kinds."""

    @abstractmethod
    def absolute(self) -> str:
        """Absolute rendering, used in commands and as identity."""
        ...

    @abstractmethod
    def relative(self) -> str:
        """Rendering relative to the path's root, used in descriptions."""
        ...

    def __str__(self) -> str:
        return self.absolute()

    def __fspath__(self) -> str:
        return self.absolute()


@dataclass(frozen=True)
class SourcePath(BasePath):
    """A path in the source tree."""

    rel: str

    def absolute(self) -> str:
        root = get_layout().source_dir
        return str(root / self.rel) if self.rel else str(root)

    def relative(self) -> str:
        return self.rel

    def with_prefix(self, prefix: str) -> OutPath:
        """Map this source into the build tree under a prefix."""
        return OutPath(prefix + self.rel)

    def with_ext(self, ext: str) -> SourcePath:
        return SourcePath(_with_ext(self.rel, ext))

    def with_suffix(self, suffix: str) -> SourcePath:
        return SourcePath(self.rel + suffix)

    def join(self, *parts: str) -> SourcePath:
        return SourcePath("/".join(p for p in (self.rel, *parts) if p))


@dataclass(frozen=True)
class OutPath(BasePath):
    """A path in the build tree."""

    rel: str

    def absolute(self) -> str:
        root = get_layout().build_dir
        return str(root / self.rel) if self.rel else str(root)

    def relative(self) -> str:
        return self.rel

    def with_prefix(self, prefix: str) -> OutPath:
        return OutPath(prefix + self.rel)

    def with_ext(self, ext: str) -> OutPath:
        """Replace the last extension of the file name.

        Example:
            OutPath("gcc/src/main.cc").with_ext("o") -> "gcc/src/main.o"
        """
        return OutPath(_with_ext(self.rel, ext))

    def with_suffix(self, suffix: str) -> OutPath:
        return OutPath(self.rel + suffix)

    def join(self, *parts: str) -> OutPath:
        return OutPath("/".join(p for p in (self.rel, *parts) if p))


@dataclass(frozen=True)
class GlobalPath(BasePath):
    """A path outside the workspace, used verbatim."""

    value: str

    def absolute(self) -> str:
        return self.value

    def relative(self) -> str:
        return self.value
