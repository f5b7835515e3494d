from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .config import get_settings
from .dice import roll_from_text
from .errors import DiceError
from .logging_setup import configure_logging


mcp = FastMCP(get_settings().server_name)


@mcp.tool()
def roll_dice(text: str, show_rolls: bool = True):
    """Roll dice expressions such as '4d6 + 1d4 + 3 - 1d8'.

    Input: text (string). Several rolls can be separated with ';' and each
    one labelled with 'label:', e.g. 'hp: 3d6; arrows in pouch: 4d4 + 6'.
    Output: structured JSON with one result per statement, the individual
    rolls (unless show_rolls is false) and an explanation.

    Raises a hard error (exception) on invalid input.
    """

    try:
        return roll_from_text(text, show_rolls=show_rolls)
    except DiceError as e:
        # Fail-fast: surface stable error codes in the message.
        raise ValueError(str(e)) from None


def run() -> None:
    configure_logging(get_settings().log_level)
    # Default transport is stdio.
    mcp.run()


if __name__ == "__main__":
    run()
