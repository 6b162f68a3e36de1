"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["split", "verify", "merge", "info", "scan", "clear", "exit", "help"]

# Commands whose first argument is a descriptor file
METADATA_COMMANDS = ("verify", "merge", "info")

STYLE = Style.from_dict(
    {
        "prompt": "#2E9BD6 bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;155;214m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
  _____ _ _      ____        _ _ _   _
 |  ___(_) | ___/ ___| _ __ | (_) |_| |_ ___ _ __
 | |_  | | |/ _ \\___ \\| '_ \\| | | __| __/ _ \\ '__|
 |  _| | | |  __/___) | |_) | | | |_| ||  __/ |
 |_|   |_|_|\\___|____/| .__/|_|_|\\__|\\__\\___|_|
                      |_|
{RESET}"""

WELCOME_TITLE = "FileSplitter - split files into verified parts and merge them back"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "splitter> "

HELP_TEXT = """Available commands:
  split <file> [parts] [--size MiB] [--out dir] [--prefix name]
                                      Split a file into parts (default 2 parts)
  verify <metadata>                   Check that every part exists and is intact
  merge <metadata> [output_path]      Verify, then rebuild the original file
  info <metadata>                     Show the contents of a descriptor
  scan [dir]                          List descriptor files in a directory
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Parts are written as <prefix>.part1, <prefix>.part2, ... next to a
<prefix>.split_metadata descriptor. --size picks the part count from a
desired part size; the last part also takes any remainder.
Examples:
  split videos/holiday.mp4 4
  split backup.tar --size 100 --out parts/
  verify parts/backup.tar.split_metadata
  merge parts/backup.tar.split_metadata restored/backup.tar
  scan parts"""

SPLIT_FLAGS = ("--size", "--out", "--prefix")
