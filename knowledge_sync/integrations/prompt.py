"""
Operator input for the confirmation gate.
"""

from typing import Callable


# Takes the prompt text, blocks until one line is read, returns it.
PromptProvider = Callable[[str], str]


def terminal_prompt(prompt: str) -> str:
    """Read one line from stdin. End of input counts as an empty answer."""
    try:
        return input(prompt)
    except EOFError:
        return ""
