"""CLI entry point."""

import os
import sys
from typing import Optional

from common.logging_config import setup_logging
from cli.commands import get_config
from cli.constants import HELP_TEXT
from cli.parser import ParseError, parse_tokens
from cli.repl import dispatch_command, repl_loop


def run_once(args: list[str]) -> int:
    """
    Run a single command given as process arguments.

    Args:
        args: Command name followed by its arguments

    Returns:
        Process exit status (0 on success)
    """
    if args[0] in ("help", "--help", "-h"):
        print(HELP_TEXT)
        return 0
    try:
        cmd_obj = parse_tokens(args)
    except ParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    result = dispatch_command(cmd_obj)
    print(result.message, file=sys.stdout if result.success else sys.stderr)
    return 0 if result.success else 1


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for CLI."""
    args = list(sys.argv[1:] if argv is None else argv)

    debug = '--debug' in args
    if debug:
        args.remove('--debug')
        log_level = 'DEBUG'
    else:
        log_level = os.getenv('LOG_LEVEL') or get_config().get_log_level()

    logger = setup_logging('cli', log_level=log_level)
    setup_logging('engine', log_level=log_level)

    if debug:
        logger.info("Debug logging enabled")

    if args:
        return run_once(args)

    logger.info("CLI starting...")
    try:
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")
    return 0


if __name__ == "__main__":
    sys.exit(main())
