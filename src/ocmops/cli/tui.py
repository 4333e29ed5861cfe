"""Interactive prompting for required command values."""

from __future__ import annotations

from ocmops.cli.common.exits import die
from ocmops.cli.common.output import out


def require_value(
    value: str | None,
    *,
    interactive: bool,
    flag: str,
    message: str,
    help_text: str | None = None,
    secret: bool = False,
) -> str:
    """
    Return a required value, prompting for it in interactive mode.

    Without interactive mode a missing value ends the command with a usage
    error naming the flag. In interactive mode the prompt repeats until a
    non-empty answer is given; cancelling the prompt ends the command.

    Args:
        value: Value supplied on the command line, if any.
        interactive: Whether prompting is allowed.
        flag: Flag name used in the error message.
        message: Prompt shown to the user.
        help_text: Extra guidance shown next to the prompt.
        secret: Hide the typed answer.

    Returns:
        The supplied or prompted value, stripped of surrounding whitespace.
    """
    if value and value.strip():
        return value.strip()
    if not interactive:
        die(f"flag '{flag}' is required", code=2)

    while True:
        answer = out.ask_text(message, help_text=help_text, secret=secret)
        if answer:
            return answer
        if not out.confirm("A value is required. Try again?", default=True):
            die(f"flag '{flag}' is required", code=2)
