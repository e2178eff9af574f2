"""Interactive page selection.

The host application supplies a ``PageSelector``; the core never depends on
a particular UI toolkit. ``PromptSelector`` is the terminal version used by
the command-line interface.
"""

from collections.abc import Callable, Sequence
from typing import Protocol


class PageSelector(Protocol):
    def choose_page(self, names: Sequence[str], prompt: str = "Page") -> str | None:
        """Return the chosen name, or None if the user cancelled.

        Implementations may return a name that is not in ``names`` when the
        user typed a new one.
        """
        ...


class PromptSelector:
    """Numbered list on stdout, answer read from stdin.

    The answer can be a list number or a name. Empty input cancels.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: Callable[[str], None] = print,
    ):
        self._input = input_func
        self._output = output

    def choose_page(self, names: Sequence[str], prompt: str = "Page") -> str | None:
        for i, name in enumerate(names, start=1):
            self._output(f"{i:3d}  {name}")
        try:
            answer = self._input(f"{prompt}: ").strip()
        except (EOFError, KeyboardInterrupt):
            return None
        if not answer:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(names):
            return names[int(answer) - 1]
        return answer
