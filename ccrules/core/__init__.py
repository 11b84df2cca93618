# SPDX-License-Identifier: MIT
"""Core types shared by rules, toolchains and generators."""
