"""Result type returned by CLI command handlers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one command: whether it succeeded and the text to show."""

    success: bool
    message: str

    @classmethod
    def ok(cls, message: str) -> "CommandResult":
        return cls(success=True, message=message)

    @classmethod
    def error(cls, message: str) -> "CommandResult":
        return cls(success=False, message=f"Error: {message}")
