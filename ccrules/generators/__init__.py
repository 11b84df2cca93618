# SPDX-License-Identifier: MIT
"""Build file generators for ccrules."""

from ccrules.generators.generator import BaseGenerator, Generator
from ccrules.generators.ninja import NinjaGenerator

__all__ = [
    "BaseGenerator",
    "Generator",
    "NinjaGenerator",
]
