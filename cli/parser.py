"""Command parser for CLI input."""

import math
import shlex

from cli.constants import SPLIT_FLAGS
from cli.models import (
    CommandRequest,
    InfoCommand,
    MergeCommand,
    ScanCommand,
    SplitCommand,
    VerifyCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object (one of Split/Verify/Merge/Info/Scan)

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    return parse_tokens(tokens)


def parse_tokens(tokens: list[str]) -> CommandRequest:
    """Parse an already tokenized command (REPL line or process arguments)."""
    command_name = tokens[0].lower()

    if command_name == "split":
        return _parse_split(tokens[1:])
    elif command_name == "verify":
        return VerifyCommand(metadata_path=_single_path("verify", tokens[1:]))
    elif command_name == "merge":
        return _parse_merge(tokens[1:])
    elif command_name == "info":
        return InfoCommand(metadata_path=_single_path("info", tokens[1:]))
    elif command_name == "scan":
        return _parse_scan(tokens[1:])
    else:
        raise ParseError(f"Unknown command: {tokens[0]}")


def _parse_split(args: list[str]) -> SplitCommand:
    """Parse 'split <file> [parts] [--size MiB] [--out dir] [--prefix name]' command."""
    positional = []
    options: dict[str, str] = {}

    index = 0
    while index < len(args):
        arg = args[index]
        if arg in SPLIT_FLAGS:
            if index + 1 >= len(args):
                raise ParseError(f"{arg} requires a value")
            if arg in options:
                raise ParseError(f"{arg} given more than once")
            options[arg] = args[index + 1]
            index += 2
            continue
        if arg.startswith("--"):
            raise ParseError(f"Unknown option: {arg}")
        positional.append(arg)
        index += 1

    if not positional:
        raise ParseError("split requires a file")
    if len(positional) > 2:
        raise ParseError("split takes at most 2 positional arguments: <file> [parts]")

    parts = None
    if len(positional) == 2:
        try:
            parts = int(positional[1])
        except ValueError:
            raise ParseError(f"Part count must be an integer, got '{positional[1]}'")

    part_size_mib = None
    if "--size" in options:
        if parts is not None:
            raise ParseError("Give either a part count or --size, not both")
        try:
            part_size_mib = float(options["--size"])
        except ValueError:
            raise ParseError(f"--size must be a number of MiB, got '{options['--size']}'")
        if not math.isfinite(part_size_mib) or part_size_mib <= 0:
            raise ParseError("--size must be a finite number greater than zero")

    return SplitCommand(
        file_path=positional[0],
        parts=parts,
        part_size_mib=part_size_mib,
        output_dir=options.get("--out"),
        prefix=options.get("--prefix"),
    )


def _parse_merge(args: list[str]) -> MergeCommand:
    """Parse 'merge <metadata> [output_path]' command."""
    if not 1 <= len(args) <= 2:
        raise ParseError("merge requires 1 or 2 arguments: <metadata> [output_path]")

    output_path = args[1] if len(args) > 1 else None
    return MergeCommand(metadata_path=args[0], output_path=output_path)


def _parse_scan(args: list[str]) -> ScanCommand:
    """Parse 'scan [dir]' command."""
    if len(args) > 1:
        raise ParseError("scan takes at most 1 argument: [dir]")
    return ScanCommand(directory=args[0]) if args else ScanCommand()


def _single_path(command_name: str, args: list[str]) -> str:
    if len(args) != 1:
        raise ParseError(f"{command_name} requires exactly 1 argument: <metadata>")
    return args[0]
