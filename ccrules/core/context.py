# SPDX-License-Identifier: MIT
"""Build steps and the context rules emit them into.

Rules never run commands. They describe each command as a BuildStep and
hand it to a Context, which belongs to the build engine. The engine
decides when and whether to execute it.

BuildContext is a plain in-process Context that records steps in the
order they are emitted. Generators turn the recording into build files.
It is single-threaded: callers that walk targets concurrently must
serialize calls into it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ccrules.core.errors import CcRulesError, RuleError
from ccrules.core.paths import BasePath, OutPath

if TYPE_CHECKING:
    from ccrules.toolchains.registry import ToolchainRegistry

logger = logging.getLogger(__name__)


@dataclass
class BuildStep:
    """One command producing one output.

    Attributes:
        out: File produced by the step.
        ins: Files the step reads; a change to any re-runs it.
        cmd: Shell command line.
        descr: Short human-readable description shown while building.
        depfile: Compiler-generated dependency file listing headers read.
        script: Shell script text to run instead of cmd.
    """

    out: OutPath
    ins: list[BasePath] = field(default_factory=list)
    cmd: str = ""
    descr: str = ""
    depfile: OutPath | None = None
    script: str | None = None


@runtime_checkable
class Context(Protocol):
    """What rules need from the build engine."""

    @property
    def toolchains(self) -> ToolchainRegistry:
        """Registry used to resolve toolchain names and the default."""
        ...

    def add_build_step(self, step: BuildStep) -> None:
        """Register a step with the engine."""
        ...

    def built(self, path: str) -> bool:
        """Report whether an absolute output path was already built.

        The first query for a path registers it, so it returns False
        exactly once per path.
        """
        ...

    def trace(self, label: str) -> AbstractContextManager[None]:
        """Scope nested work under a label for diagnostics."""
        ...

    def cwd(self) -> OutPath:
        """Build directory of the rule file being evaluated."""
        ...


class BuildContext:
    """Context that records build steps in memory.

    Example:
        ctx = BuildContext()
        app.build(ctx)
        for step in ctx.steps:
            print(step.descr)

    Attributes:
        steps: Recorded steps, in emission order.
    """

    def __init__(
        self,
        toolchains: ToolchainRegistry | None = None,
        *,
        cwd: OutPath | None = None,
    ) -> None:
        """Create a recording context.

        Args:
            toolchains: Registry to resolve toolchains with. Defaults to
                the process registry holding the built-in toolchains.
            cwd: Build directory reported to rules (default: build root).
        """
        if toolchains is None:
            from ccrules.toolchains import toolchain_registry

            toolchains = toolchain_registry
        self._toolchains = toolchains
        self._cwd = cwd or OutPath("")
        self._built: set[str] = set()
        self._outputs: dict[str, BuildStep] = {}
        self._trace: list[str] = []
        self.steps: list[BuildStep] = []

    @property
    def toolchains(self) -> ToolchainRegistry:
        return self._toolchains

    def add_build_step(self, step: BuildStep) -> None:
        key = step.out.absolute()
        if key in self._outputs:
            raise RuleError(
                f"output {step.out.relative()} is produced by more than one step",
                list(self._trace) or None,
            )
        self._outputs[key] = step
        self.steps.append(step)
        logger.debug("step %s: %s", step.out.relative(), step.descr)

    def built(self, path: str) -> bool:
        if path in self._built:
            logger.debug("already built: %s", path)
            return True
        self._built.add(path)
        return False

    @contextmanager
    def trace(self, label: str) -> Iterator[None]:
        self._trace.append(label)
        try:
            yield
        except CcRulesError as e:
            if e.trace is None:
                e.trace = list(self._trace)
            raise
        finally:
            self._trace.pop()

    def cwd(self) -> OutPath:
        return self._cwd

    def step_for(self, out: OutPath) -> BuildStep | None:
        """Return the step producing an output, if any."""
        return self._outputs.get(out.absolute())

    def __repr__(self) -> str:
        return f"BuildContext(steps={len(self.steps)})"
