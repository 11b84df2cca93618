# SPDX-License-Identifier: MIT
"""Ninja build file generator.

Every recorded step becomes one ninja build statement. Commands are
already complete shell command lines, so a handful of generic rules
that run "$cmd" are enough:

    rule cmd         plain command
    rule cmd_dep     command with a gcc-style depfile
    rule script      rendered shell script stored beside build.ninja
    rule script_dep  script with a gcc-style depfile

Multi-line commands are run through the script rules, since ninja
variable values cannot hold newlines.
"""

from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

from ccrules.generators.generator import BaseGenerator

if TYPE_CHECKING:
    from ccrules.core.context import BuildContext, BuildStep

logger = logging.getLogger(__name__)


def escape_path(path: str) -> str:
    """Escape a path for use in a build line."""
    return path.replace("$", "$$").replace(" ", "$ ").replace(":", "$:")


def escape_value(value: str) -> str:
    """Escape a single-line variable value.

    Raises:
        ValueError: If the value spans several lines. Ninja reads "$" at
            the end of a line as a continuation, so newlines cannot be
            escaped.
    """
    if "\n" in value:
        raise ValueError(f"ninja variable values must be single-line: {value!r}")
    return value.replace("$", "$$")


class NinjaGenerator(BaseGenerator):
    """Generator for build.ninja.

    Example:
        ctx = BuildContext()
        app.build(ctx)
        NinjaGenerator().generate(ctx, Path("build"))
        # Creates build/build.ninja
    """

    def __init__(self, *, output_filename: str = "build.ninja") -> None:
        super().__init__("ninja")
        self._output_filename = output_filename

    def generate(self, ctx: BuildContext, output_dir: Path) -> Path:
        """Write build.ninja for every step recorded in `ctx`.

        Args:
            ctx: Context holding the recorded steps.
            output_dir: Directory to write build.ninja to.

        Returns:
            Path to the written file.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        output_file = output_dir / self._output_filename

        with open(output_file, "w") as f:
            self._write_header(f, len(ctx.steps))
            self._write_rules(f)
            for index, step in enumerate(ctx.steps):
                self._write_step(f, step, index, output_dir)

        logger.info("Wrote %s (%d steps)", output_file, len(ctx.steps))
        return output_file

    def _write_header(self, f: TextIO, count: int) -> None:
        f.write("# Generated by ccrules. Do not edit.\n")
        f.write(f"# {count} build steps\n\n")
        f.write("ninja_required_version = 1.3\n\n")

    def _write_rules(self, f: TextIO) -> None:
        f.write("rule cmd\n")
        f.write("  command = $cmd\n")
        f.write("  description = $descr\n\n")
        f.write("rule cmd_dep\n")
        f.write("  command = $cmd\n")
        f.write("  description = $descr\n")
        f.write("  depfile = $depfile\n")
        f.write("  deps = gcc\n\n")
        f.write("rule script\n")
        f.write("  command = /bin/bash $script\n")
        f.write("  description = $descr\n\n")
        f.write("rule script_dep\n")
        f.write("  command = /bin/bash $script\n")
        f.write("  description = $descr\n")
        f.write("  depfile = $depfile\n")
        f.write("  deps = gcc\n\n")

    def _write_step(
        self, f: TextIO, step: BuildStep, index: int, output_dir: Path
    ) -> None:
        out = escape_path(step.out.absolute())
        ins = " ".join(escape_path(p.absolute()) for p in step.ins)

        script = step.script
        if script is None and "\n" in step.cmd:
            # Variable values are single-line, so longer commands run from a file
            script = step.cmd

        rule = "cmd" if script is None else "script"
        if step.depfile is not None:
            rule += "_dep"
        f.write(f"build {out}: {rule} {ins}".rstrip() + "\n")

        if script is not None:
            script_path = self._write_script(script, index, output_dir)
            f.write(f"  script = {escape_value(shlex.quote(str(script_path)))}\n")
        else:
            f.write(f"  cmd = {escape_value(step.cmd)}\n")
        if step.depfile is not None:
            f.write(f"  depfile = {escape_value(step.depfile.absolute())}\n")

        descr = " ".join((step.descr or step.out.relative()).splitlines())
        f.write(f"  descr = {escape_value(descr)}\n\n")

    def _write_script(self, script: str, index: int, output_dir: Path) -> Path:
        scripts_dir = output_dir / "scripts"
        scripts_dir.mkdir(parents=True, exist_ok=True)
        script_path = (scripts_dir / f"step{index}.sh").absolute()
        script_path.write_text(script)
        return script_path
