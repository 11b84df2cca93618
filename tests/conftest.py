# SPDX-License-Identifier: MIT
"""Shared fixtures for ccrules tests."""

from __future__ import annotations

import pytest

from ccrules.core.context import BuildContext
from ccrules.core.options import set_vars
from ccrules.core.paths import Layout, set_layout
from ccrules.toolchains.gcc import GccToolchain
from ccrules.toolchains.registry import ToolchainRegistry


@pytest.fixture(autouse=True)
def layout(tmp_path):
    """Point source and build roots into the test's temporary directory."""
    layout = Layout(source_dir=tmp_path / "src", build_dir=tmp_path / "out")
    previous = set_layout(layout)
    yield layout
    set_layout(previous)


@pytest.fixture(autouse=True)
def isolated_options(monkeypatch):
    """Keep option values from the invoking shell out of tests."""
    monkeypatch.delenv("CCRULES_VARS", raising=False)
    monkeypatch.delenv("CCRULES_CC_TOOLCHAIN", raising=False)
    set_vars({})
    yield
    set_vars(None)


@pytest.fixture
def gcc():
    return GccToolchain("gcc", arch_name="x86_64")


@pytest.fixture
def registry(gcc):
    """A fresh registry whose default toolchain is `gcc`."""
    registry = ToolchainRegistry(default="gcc")
    registry.register(gcc)
    return registry


@pytest.fixture
def ctx(registry):
    return BuildContext(registry)

