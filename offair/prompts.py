"""Interactive prompting and the shared menu labels."""

from __future__ import annotations

import sys
from typing import Callable, Optional, Sequence, TextIO

from offair.models import Airport

AD_MENU_LABEL = "Aerodrome (AD)"
ALA_MENU_LABEL = "Aircraft Landing Area (ALA)"
SKIP_MENU_LABEL = "Skip"
SELECT_AIRPORT_TYPE_MENU_LABEL = "Select airport type:"
BACK_MENU_LABEL = "Back"
ADD_FBO_MENU_LABEL = "Add FBO"
AIRPORTS_WITH_FBOS_PROMPT = "Airports with FBOs:"
LIST_AIRPORTS_WITH_FBOS_MENU_LABEL = "List Airports with FBOs"
LIST_DISTANCES_BETWEEN_FBOS_MENU_LABEL = "List Distances Between FBOs"
REMOVE_FBO_MENU_LABEL = "Remove FBO"
SYNC_FBOS_MENU_LABEL = "Sync FBOs"
BACK_TO_MAIN_MENU_LABEL = "Back to Main Menu"
EXIT_MESSAGE = "Have fun out there, captain."
CANCEL_MENU_LABEL = "Cancel"
CLEAR_MENU_LABEL = "Clear"
NOT_SET_MENU_LABEL = "Not Set"

AIRPORT_TYPE_CODES = {AD_MENU_LABEL: "AD", ALA_MENU_LABEL: "ALA"}
AIRPORT_TYPE_OPTIONS = (ALA_MENU_LABEL, AD_MENU_LABEL, SKIP_MENU_LABEL)


class Prompter:
    """Line-based terminal prompts.

    Reading past the end of input raises EOFError.
    """

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        output: Optional[TextIO] = None,
    ) -> None:
        self._input = input_func
        self._output = output

    def echo(self, text: str = "") -> None:
        """Write a line of text."""
        print(text, file=self._output if self._output is not None else sys.stdout)

    def ask_text(self, message: str, default: str = "") -> str:
        """Ask for free text; a blank answer yields the default."""
        prompt = f"{message} ({default}) " if default else f"{message} "
        answer = self._input(prompt).strip()
        return answer or default

    def select(self, message: str, options: Sequence[str]) -> str:
        """Ask the user to pick one option, by number or by its text."""
        if not options:
            raise ValueError("select needs at least one option")
        self.echo(message)
        for number, option in enumerate(options, 1):
            self.echo(f"  {number}) {option}")
        while True:
            answer = self._input("> ").strip()
            if answer.isdigit() and 1 <= int(answer) <= len(options):
                return options[int(answer) - 1]
            if answer in options:
                return answer
            self.echo("Please choose one of the listed options.")


def prompt_for_airport_type(prompter: Prompter, airport: Airport) -> bool:
    """Ask for the airport type and set it; False when the user skips."""
    choice = prompter.select(SELECT_AIRPORT_TYPE_MENU_LABEL, AIRPORT_TYPE_OPTIONS)
    code = AIRPORT_TYPE_CODES.get(choice)
    if code is None:
        return False
    airport.airport_type = code
    return True