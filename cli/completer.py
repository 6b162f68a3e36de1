"""Custom completer for FileSplitter CLI with path autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS, METADATA_COMMANDS, SPLIT_FLAGS
from common.constants import LEGACY_METADATA_SUFFIX, METADATA_SUFFIX


class SplitterCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Path completion for command arguments: descriptor files for
      verify/merge/info, any file for split, directories for scan
    """

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        command = tokens[0].lower()
        current_word = "" if is_typing_new_token else tokens[-1]
        argument_index = len(tokens) - 1 if is_typing_new_token else len(tokens) - 2

        if command in METADATA_COMMANDS and argument_index == 0:
            yield from self._complete_paths(current_word, kind="metadata")
        elif command == "merge" and argument_index == 1:
            yield from self._complete_paths(current_word, kind="any")
        elif command == "split":
            previous = tokens[-1] if is_typing_new_token else (tokens[-2] if len(tokens) > 1 else "")
            if previous == "--out":
                yield from self._complete_paths(current_word, kind="directory")
            elif previous in SPLIT_FLAGS:
                return
            elif current_word.startswith("-"):
                yield from self._complete_flags(current_word)
            elif argument_index == 0:
                yield from self._complete_paths(current_word, kind="any")
        elif command == "scan" and argument_index == 0:
            yield from self._complete_paths(current_word, kind="directory")

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_flags(self, partial: str) -> Iterable[Completion]:
        for flag in SPLIT_FLAGS:
            if flag.startswith(partial):
                yield Completion(flag, start_position=-len(partial))

    def _complete_paths(self, partial: str, kind: str) -> Iterable[Completion]:
        """
        Complete paths relative to the current directory.

        Directories are always offered (with a trailing slash) so the user can
        descend into them; files are filtered by kind.
        """
        if "/" in partial:
            head, _, name_prefix = partial.rpartition("/")
            base_text = f"{head}/"
            base_dir = Path.cwd() / (head or "/")
        else:
            base_text = ""
            name_prefix = partial
            base_dir = Path.cwd()

        if not base_dir.is_dir():
            return

        try:
            entries = sorted(base_dir.iterdir(), key=lambda entry: entry.name)
        except OSError:
            return

        for entry in entries:
            if not entry.name.startswith(name_prefix):
                continue
            if entry.is_dir():
                yield Completion(f"{base_text}{entry.name}/", start_position=-len(partial))
            elif kind == "any" or (kind == "metadata" and self._is_metadata(entry.name)):
                yield Completion(f"{base_text}{entry.name}", start_position=-len(partial))

    @staticmethod
    def _is_metadata(name: str) -> bool:
        return name.endswith(METADATA_SUFFIX) or name.endswith(LEGACY_METADATA_SUFFIX)
