# SPDX-License-Identifier: MIT
"""Toolchain protocol and base implementation.

A Toolchain knows how to spell every command a C/C++ build needs:
compiling, archiving, linking shared libraries and binaries, wrapping
data blobs as objects, and stripping executables to raw images. Rules
ask the toolchain for command strings and never build them themselves.

Besides the commands, a toolchain can describe its target architecture,
whether it builds freestanding code, and which other toolchains' libraries
it is willing to link. BaseToolchain gives each of these a default, so
toolchains only override what they know.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ccrules.core.paths import BasePath, OutPath
    from ccrules.rules.deps import Dep


class Architecture(str, Enum):
    """Target architecture of a toolchain."""

    X86_64 = "x86_64"
    AARCH64 = "aarch64"
    UNKNOWN = "unknown"


@runtime_checkable
class Toolchain(Protocol):
    """Protocol for toolchains.

    Toolchains are identified by name and must not change once they are
    registered.
    """

    @property
    def name(self) -> str:
        """Unique toolchain name (e.g., 'native-gcc')."""
        ...

    def object_file(
        self,
        out: OutPath,
        depfile: OutPath,
        flags: Sequence[str],
        includes: Sequence[BasePath],
        src: BasePath,
    ) -> str:
        """Command compiling one source file to an object."""
        ...

    def static_library(self, out: BasePath, objs: Sequence[BasePath]) -> str:
        """Command archiving objects into a static library."""
        ...

    def shared_library(self, out: BasePath, objs: Sequence[BasePath]) -> str:
        """Command linking objects into a shared library."""
        ...

    def binary(
        self,
        out: BasePath,
        objs: Sequence[BasePath],
        always_link_libs: Sequence[BasePath],
        libs: Sequence[BasePath],
        flags: Sequence[str],
        script: BasePath | None,
    ) -> str:
        """Command linking an executable."""
        ...

    def blob_object(self, out: OutPath, src: BasePath) -> str:
        """Command wrapping an arbitrary file as a relocatable object."""
        ...

    def raw_binary(self, out: OutPath, elf_src: BasePath) -> str:
        """Command stripping an executable down to a raw image."""
        ...

    def std_deps(self) -> list[Dep]:
        """Libraries every unit built with this toolchain depends on."""
        ...

    def script(self) -> BasePath | None:
        """Default linker script, if any."""
        ...

    def architecture(self) -> Architecture:
        ...

    def freestanding(self) -> bool:
        ...

    def accepts(self, other: Toolchain) -> bool:
        """Whether libraries built with `other` may be linked into ours."""
        ...


class BaseToolchain(ABC):
    """Abstract base class for toolchains.

    Subclasses must provide the command generators. Everything else has
    a default: no standard dependencies, no linker script, unknown
    architecture, hosted environment, and no foreign toolchains accepted.
    """

    def __init__(self, name: str) -> None:
        """Initialize a toolchain.

        Args:
            name: Toolchain name.
        """
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @abstractmethod
    def object_file(
        self,
        out: OutPath,
        depfile: OutPath,
        flags: Sequence[str],
        includes: Sequence[BasePath],
        src: BasePath,
    ) -> str: ...

    @abstractmethod
    def static_library(self, out: BasePath, objs: Sequence[BasePath]) -> str: ...

    @abstractmethod
    def shared_library(self, out: BasePath, objs: Sequence[BasePath]) -> str: ...

    @abstractmethod
    def binary(
        self,
        out: BasePath,
        objs: Sequence[BasePath],
        always_link_libs: Sequence[BasePath],
        libs: Sequence[BasePath],
        flags: Sequence[str],
        script: BasePath | None,
    ) -> str: ...

    @abstractmethod
    def blob_object(self, out: OutPath, src: BasePath) -> str: ...

    @abstractmethod
    def raw_binary(self, out: OutPath, elf_src: BasePath) -> str: ...

    def std_deps(self) -> list[Dep]:
        return []

    def script(self) -> BasePath | None:
        return None

    def architecture(self) -> Architecture:
        return Architecture.UNKNOWN

    def freestanding(self) -> bool:
        return False

    def accepts(self, other: Toolchain) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"


def toolchain_accepts(parent: Toolchain, child: Toolchain) -> bool:
    """Report whether `parent` can link libraries built with `child`.

    A toolchain always accepts itself. Otherwise the parent decides;
    acceptance is not symmetric.
    """
    if parent.name == child.name:
        return True
    return parent.accepts(child)
