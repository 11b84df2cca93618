# SPDX-License-Identifier: MIT
"""String-valued configuration options.

Options are declared once at import time by the modules that need them
and read on demand. A value is looked up in this order:

    1. Command line: ccrules generate NAME=value (passed as CCRULES_VARS)
    2. Environment variable: CCRULES_NAME (upper-cased, '-' -> '_')
    3. The option's default function

Command line variables must name a declared option; build scripts declare
their own with options.register() before calling ccrules.generate().
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass

from ccrules.core.errors import ConfigureError

logger = logging.getLogger(__name__)

# Variables passed on the command line, loaded lazily from CCRULES_VARS
_cli_vars: dict[str, str] | None = None


def env_name(name: str) -> str:
    """Environment variable consulted for an option name."""
    return "CCRULES_" + name.upper().replace("-", "_")


def set_vars(variables: dict[str, str] | None) -> None:
    """Replace the command line variables.

    Args:
        variables: New variables, or None to reload CCRULES_VARS lazily.
    """
    global _cli_vars
    _cli_vars = dict(variables) if variables is not None else None


def cli_vars() -> dict[str, str]:
    """Variables given on the command line, loaded from CCRULES_VARS once."""
    global _cli_vars

    if _cli_vars is None:
        ccrules_vars = os.environ.get("CCRULES_VARS")
        if ccrules_vars:
            try:
                _cli_vars = json.loads(ccrules_vars)
            except json.JSONDecodeError:
                logger.warning("Ignoring malformed CCRULES_VARS: %s", ccrules_vars)
                _cli_vars = {}
        else:
            _cli_vars = {}
    return _cli_vars


def get_var(name: str, default: str | None = None) -> str | None:
    """Get a build variable set on the command line or from environment.

    Args:
        name: Variable name.
        default: Default value if not set.

    Returns:
        The variable value, or default if not set.
    """
    variables = cli_vars()
    if name in variables:
        return variables[name]

    return os.environ.get(env_name(name), default)


@dataclass(frozen=True)
class StringOption:
    """A named string option with a computed default.

    Attributes:
        name: Option name as used on the command line (e.g. "cc-toolchain").
        description: One-line help text.
        default_fn: Called to produce the value when nothing overrides it.
    """

    name: str
    description: str
    default_fn: Callable[[], str]

    def value(self) -> str:
        value = get_var(self.name)
        if value is None:
            return self.default_fn()
        return value


class OptionRegistry:
    """Process-wide table of declared options."""

    def __init__(self) -> None:
        self._options: dict[str, StringOption] = {}

    def register(self, option: StringOption) -> StringOption:
        if option.name in self._options:
            raise ConfigureError(f"option {option.name!r} is already registered")
        self._options[option.name] = option
        return option

    def get(self, name: str) -> StringOption:
        try:
            return self._options[name]
        except KeyError:
            raise ConfigureError(f"unknown option {name!r}") from None

    def names(self) -> list[str]:
        return sorted(self._options)

    def check(self, names: Iterable[str]) -> None:
        """Reject option names that were never declared.

        Raises:
            ConfigureError: Naming the unknown options and listing the
                declared ones.
        """
        unknown = sorted(set(names) - set(self._options))
        if unknown:
            given = ", ".join(f'"{n}"' for n in unknown)
            known = ", ".join(f'"{n}"' for n in self.names())
            raise ConfigureError(f"unknown option {given}. Known options: {known}")

    def __iter__(self) -> Iterator[StringOption]:
        return iter(self._options[name] for name in self.names())

    def __contains__(self, name: object) -> bool:
        return name in self._options


options = OptionRegistry()
