# SPDX-License-Identifier: MIT
"""Tests for ccrules.core.context."""

import pytest

from ccrules.core.context import BuildContext, BuildStep, Context
from ccrules.core.errors import CcRulesError, RuleError
from ccrules.core.paths import OutPath
from ccrules.toolchains import toolchain_registry


class TestBuildContext:
    def test_satisfies_protocol(self, ctx):
        assert isinstance(ctx, Context)

    def test_default_registry(self):
        assert BuildContext().toolchains is toolchain_registry

    def test_explicit_registry(self, ctx, registry):
        assert ctx.toolchains is registry

    def test_cwd(self):
        assert BuildContext().cwd() == OutPath("")
        assert BuildContext(cwd=OutPath("sub")).cwd() == OutPath("sub")

    def test_records_steps_in_order(self, ctx):
        a = BuildStep(out=OutPath("a"), cmd="touch a")
        b = BuildStep(out=OutPath("b"), cmd="touch b")
        ctx.add_build_step(a)
        ctx.add_build_step(b)
        assert ctx.steps == [a, b]
        assert ctx.step_for(OutPath("b")) is b
        assert ctx.step_for(OutPath("c")) is None
        assert repr(ctx) == "BuildContext(steps=2)"

    def test_duplicate_output(self, ctx):
        ctx.add_build_step(BuildStep(out=OutPath("a")))
        with pytest.raises(RuleError, match="produced by more than one step"):
            ctx.add_build_step(BuildStep(out=OutPath("a")))


class TestBuilt:
    def test_false_exactly_once(self, ctx):
        assert ctx.built("/out/libfoo.a") is False
        assert ctx.built("/out/libfoo.a") is True
        assert ctx.built("/out/libfoo.a") is True

    def test_paths_are_independent(self, ctx):
        assert ctx.built("/out/a") is False
        assert ctx.built("/out/b") is False


class TestTrace:
    def test_attaches_trace_to_errors(self, ctx):
        with pytest.raises(CcRulesError) as exc:
            with ctx.trace("bin:app"):
                with ctx.trace("lib:libfoo.a"):
                    raise RuleError("broken")
        assert exc.value.trace == ["bin:app", "lib:libfoo.a"]
        assert str(exc.value) == "bin:app > lib:libfoo.a: broken"

    def test_keeps_existing_trace(self, ctx):
        with pytest.raises(CcRulesError) as exc:
            with ctx.trace("outer"):
                raise RuleError("broken", ["inner"])
        assert exc.value.trace == ["inner"]

    def test_stack_unwinds(self, ctx):
        with pytest.raises(RuleError):
            with ctx.trace("a"):
                raise RuleError("x")
        with pytest.raises(RuleError) as exc:
            with ctx.trace("b"):
                raise RuleError("y")
        assert exc.value.trace == ["b"]

    def test_other_exceptions_pass_through(self, ctx):
        with pytest.raises(ValueError):
            with ctx.trace("a"):
                raise ValueError("x")

    def test_duplicate_output_carries_trace(self, ctx):
        ctx.add_build_step(BuildStep(out=OutPath("a")))
        with pytest.raises(RuleError) as exc:
            with ctx.trace("lib:a"):
                ctx.add_build_step(BuildStep(out=OutPath("a")))
        assert exc.value.trace == ["lib:a"]
