"""
Interactive input for heyi.
Asks the user for values of template variables that were not given with --var.
"""
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ..prompts.variables import Placeholder


class VariablePrompter:
    """
    Asks for placeholder values on the terminal, one question at a time.

    Questions go to stderr so that stdout carries only the model's answer.
    """

    def __init__(self, console: Optional[Console] = None) -> None:
        """
        Initialize the prompter.

        Args:
            console: Optional Rich Console instance
        """
        self._console = console or Console(stderr=True)

    def ask(self, placeholder: Placeholder) -> str:
        """
        Ask for one variable.

        Args:
            placeholder: The variable to ask for

        Returns:
            The entered text (may be empty)
        """
        return Prompt.ask(
            f"[bold cyan]{escape(placeholder.label)}[/bold cyan]",
            console=self._console,
            default="",
            show_default=False,
        )

    __call__ = ask
