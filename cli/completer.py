"""Custom completer for the dedup store CLI with local file autocompletion."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class StoreCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file path completion for 'upload' arguments
    """

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir

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

        if tokens[0].lower() != "upload":
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        already_typed = set(tokens[1:])
        if not is_typing_new_token:
            already_typed.discard(current_word)

        yield from self._complete_paths(current_word, already_typed)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_paths(self, partial: str, exclude: set) -> Iterable[Completion]:
        """
        Complete files and directories under the directory part of partial.
        Directories are offered with a trailing '/'.
        """
        base = self.base_dir or Path.cwd()
        head, _, prefix = partial.rpartition("/")
        directory = base / head if head else base

        if not directory.is_dir():
            return

        for item in sorted(directory.iterdir(), key=lambda p: p.name):
            if item.name.startswith(".") and not prefix.startswith("."):
                continue
            if not item.name.startswith(prefix):
                continue
            candidate = f"{head}/{item.name}" if head else item.name
            if item.is_dir():
                yield Completion(candidate + "/", start_position=-len(partial))
            elif candidate not in exclude:
                yield Completion(candidate, start_position=-len(partial))
