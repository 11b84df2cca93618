# SPDX-License-Identifier: MIT
"""Generator protocol for build file generation.

Generators take the steps recorded by a BuildContext and produce build
system files for the engine that will execute them.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ccrules.core.context import BuildContext


@runtime_checkable
class Generator(Protocol):
    """Protocol for build file generators."""

    @property
    def name(self) -> str:
        """Generator name (e.g., 'ninja')."""
        ...

    def generate(self, ctx: BuildContext, output_dir: Path) -> Path:
        """Write build files for the recorded steps.

        Args:
            ctx: Context holding the recorded steps.
            output_dir: Directory to write output files to.

        Returns:
            Path of the main file written.
        """
        ...


class BaseGenerator:
    """Base class for generators with common functionality."""

    def __init__(self, name: str) -> None:
        """Initialize a generator.

        Args:
            name: Generator name.
        """
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def generate(self, ctx: BuildContext, output_dir: Path) -> Path:
        """Generate build files. Subclasses must implement."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"
