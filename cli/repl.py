"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    handle_info,
    handle_merge,
    handle_scan,
    handle_split,
    handle_verify,
)
from cli.completer import SplitterCompleter
from cli.constants import (
    HELP_TEXT,
    LOGO,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
from cli.models import (
    InfoCommand,
    MergeCommand,
    ScanCommand,
    SplitCommand,
    VerifyCommand,
)
from cli.parser import ParseError, parse_command
from cli.types import CommandResult


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_logo() -> None:
    """Display FileSplitter logo with ANSI colors."""
    print(LOGO)


def dispatch_command(cmd_obj) -> CommandResult:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, SplitCommand):
        return handle_split(cmd_obj)
    elif isinstance(cmd_obj, VerifyCommand):
        return handle_verify(cmd_obj)
    elif isinstance(cmd_obj, MergeCommand):
        return handle_merge(cmd_obj)
    elif isinstance(cmd_obj, InfoCommand):
        return handle_info(cmd_obj)
    elif isinstance(cmd_obj, ScanCommand):
        return handle_scan(cmd_obj)
    else:
        return CommandResult.error(f"Unknown command type: {type(cmd_obj)}")


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    history = InMemoryHistory()
    session: PromptSession = PromptSession(
        completer=SplitterCompleter(), history=history, style=STYLE
    )

    clear_screen()
    show_logo()
    print(WELCOME_TITLE)
    print(WELCOME_HELP)

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)])

            if not user_input.strip():
                continue

            if user_input.strip() == "exit":
                print("Goodbye!")
                break

            if user_input.strip() == "help":
                print(HELP_TEXT)
                continue

            if user_input.strip() == "clear":
                clear_screen()
                show_logo()
                print(WELCOME_TITLE)
                print(WELCOME_HELP)
                continue

            cmd_obj = parse_command(user_input)
            result = dispatch_command(cmd_obj)
            print(result.message)

        except ParseError as e:
            print(f"Error: {e}")
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break
