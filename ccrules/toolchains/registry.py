# SPDX-License-Identifier: MIT
"""Toolchain registry and default toolchain resolution.

Toolchains are registered once, at import or startup, and looked up by
name afterwards. The registry also answers "which toolchain do rules use
when they don't name one", from the cc-toolchain option unless the
registry was created with a fixed default.

Example:
    registry = ToolchainRegistry()
    registry.register(GccToolchain(name="arm-gcc", cxx="arm-none-eabi-g++"))
    registry.get("arm-gcc")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ccrules.core.errors import DuplicateToolchainError, UnknownToolchainError
from ccrules.core.options import StringOption, options

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ccrules.toolchains.toolchain import Toolchain

logger = logging.getLogger(__name__)

NATIVE_TOOLCHAIN_NAME = "native-gcc"

CC_TOOLCHAIN = options.register(
    StringOption(
        "cc-toolchain",
        "Default toolchain to compile generic C/C++ targets",
        lambda: NATIVE_TOOLCHAIN_NAME,
    )
)


class ToolchainRegistry:
    """Name to toolchain table.

    Attributes:
        default_option: Option naming the default toolchain, consulted
            when no fixed default was given.
    """

    def __init__(
        self,
        default: str | None = None,
        *,
        default_option: StringOption = CC_TOOLCHAIN,
    ) -> None:
        """Create an empty registry.

        Args:
            default: Fixed default toolchain name. If None, the default
                is read from `default_option` each time it is needed.
            default_option: Option naming the default toolchain.
        """
        self._toolchains: dict[str, Toolchain] = {}
        self._default = default
        self.default_option = default_option

    def register(self, toolchain: Toolchain) -> Toolchain:
        """Register a toolchain under its name.

        Returns:
            The toolchain, so module-level definitions can register inline.

        Raises:
            DuplicateToolchainError: If the name is already taken.
        """
        if toolchain.name in self._toolchains:
            raise DuplicateToolchainError(toolchain.name)
        self._toolchains[toolchain.name] = toolchain
        logger.debug("registered toolchain %s", toolchain.name)
        return toolchain

    def get(self, name: str) -> Toolchain:
        """Look up a toolchain by name.

        Raises:
            UnknownToolchainError: Lists every registered name, sorted.
        """
        toolchain = self._toolchains.get(name)
        if toolchain is None:
            raise UnknownToolchainError(name, list(self._toolchains))
        return toolchain

    def names(self) -> list[str]:
        return sorted(self._toolchains)

    @property
    def default_name(self) -> str:
        if self._default is not None:
            return self._default
        return self.default_option.value()

    def default(self) -> Toolchain:
        """Return the default toolchain."""
        return self.get(self.default_name)

    def resolve(self, toolchain: Toolchain | None) -> Toolchain:
        """Return `toolchain`, or the default toolchain if it is None."""
        if toolchain is None:
            return self.default()
        return toolchain

    def __contains__(self, name: object) -> bool:
        return name in self._toolchains

    def __iter__(self) -> Iterator[Toolchain]:
        return iter(self._toolchains[name] for name in self.names())

    def __len__(self) -> int:
        return len(self._toolchains)

    def __repr__(self) -> str:
        return f"ToolchainRegistry({', '.join(self.names())})"


# Process-wide registry holding the built-in toolchains
toolchain_registry = ToolchainRegistry()
