from typing import Callable

from .errors import ConfirmationRequiredError

# Asks the user a yes/no question.
Confirm = Callable[[str], bool]


def always_yes(prompt: str) -> bool:
    return True


def require_confirmation(confirm: Confirm, prompt: str) -> None:
    if not confirm(prompt):
        raise ConfirmationRequiredError(prompt)
