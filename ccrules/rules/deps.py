# SPDX-License-Identifier: MIT
"""Dependency references and transitive dependency collection.

Rules list their dependencies as Dep values. A Dep is anything that can
produce a concrete Library for a given toolchain: a Library itself, or a
multi-toolchain library that stamps out one variant per toolchain.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ccrules.rules.library import Library
    from ccrules.toolchains.registry import ToolchainRegistry
    from ccrules.toolchains.toolchain import Toolchain

logger = logging.getLogger(__name__)


@runtime_checkable
class Dep(Protocol):
    """Something that can be linked into a library or binary."""

    def cc_library(
        self, toolchain: Toolchain, toolchains: ToolchainRegistry
    ) -> Library:
        """Resolve to the concrete Library built with `toolchain`.

        Raises:
            ToolchainMismatchError: If the library cannot be used with
                `toolchain`.
        """
        ...


def collect_deps(
    toolchain: Toolchain,
    deps: Iterable[Dep],
    toolchains: ToolchainRegistry,
) -> list[Library]:
    """Return every library reachable from `deps`, each exactly once.

    Libraries are listed depth-first in the order they are first reached,
    each followed by its own dependencies. Every reference is resolved
    under `toolchain`, which is where incompatible libraries are rejected.
    Two references resolving to the same absolute output path are the
    same library; the second one and its dependencies are skipped.

    Nothing is built here.

    Args:
        toolchain: Toolchain the dependencies are needed for.
        deps: Direct dependency references, in order.
        toolchains: Registry used to resolve default toolchains.

    Returns:
        The deduplicated closure, in discovery order.
    """
    result: list[Library] = []
    visited: set[str] = set()

    # Reversed pushes so the stack pops references in declaration order
    stack: list[Dep] = list(deps)[::-1]
    while stack:
        lib = stack.pop().cc_library(toolchain, toolchains)
        key = lib.out.absolute()
        if key in visited:
            continue
        visited.add(key)
        result.append(lib)
        stack.extend(reversed(lib.deps))

    logger.debug(
        "closure under %s: %s",
        toolchain.name,
        ", ".join(lib.out.relative() for lib in result),
    )
    return result
