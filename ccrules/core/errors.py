# SPDX-License-Identifier: MIT
"""Custom exceptions for ccrules.

All ccrules exceptions inherit from CcRulesError, which includes an
optional trace of the rules being built when the error occurred.

Every error here is a description-time authoring error. None of them is
recoverable: they propagate to the entry point, which reports them and
exits with a non-zero status.
"""

from __future__ import annotations


class CcRulesError(Exception):
    """Base class for all ccrules exceptions.

    Attributes:
        message: The error message.
        trace: Labels of the nested rules being built, outermost first.
    """

    def __init__(
        self,
        message: str,
        trace: list[str] | None = None,
    ) -> None:
        self.message = message
        self.trace = trace
        super().__init__(message)

    def __str__(self) -> str:
        if self.trace:
            return f"{' > '.join(self.trace)}: {self.message}"
        return self.message


class ConfigureError(CcRulesError):
    """Error in the process-wide configuration.

    Raised for invalid options and toolchain registry problems.
    """


class DuplicateToolchainError(ConfigureError):
    """A toolchain name was registered twice.

    Attributes:
        name: The duplicated toolchain name.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"a toolchain with name {name!r} has already been registered")


class UnknownToolchainError(ConfigureError):
    """No toolchain is registered under the requested name.

    Attributes:
        name: The requested toolchain name.
        registered: All registered names, sorted.
    """

    def __init__(self, name: str, registered: list[str]) -> None:
        self.name = name
        self.registered = sorted(registered)
        names = ", ".join(f'"{n}"' for n in self.registered)
        super().__init__(
            f'no registered toolchain "{name}". Registered toolchains: {names}'
        )


class RuleError(CcRulesError):
    """Error in a build rule definition or invocation."""


class MissingOutputError(RuleError):
    """A build unit was declared without its required output path.

    Attributes:
        kind: The kind of build unit (e.g. "Library").
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"out field is required for {kind}")


class ToolchainMismatchError(RuleError):
    """A library pinned to one toolchain was requested under another.

    Attributes:
        library: Relative output path of the library.
        toolchain: Name of the requesting toolchain.
    """

    def __init__(self, library: str, toolchain: str) -> None:
        self.library = library
        self.toolchain = toolchain
        super().__init__(
            f"library {library} does not support toolchain {toolchain}"
        )
