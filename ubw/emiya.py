"""The incantation that must be recited before a run starts."""

from __future__ import annotations

import sys
from typing import TextIO

_VERSE = """
I am the bone of my sword
Steel is my body and fire is my blood
I have created over a thousand blades
Unknown to death
Nor known to life
Have withstood pain to create many weapons
Yet those hands shall never hold anything
So, as I pray, Unlimited Blade Works
"""

INCANTATION = tuple(_VERSE.strip().splitlines())

_PROMPT = "Please recite the UBW incantation:"
_CONTINUE = "\nContinue..."
_DONE = "Incantation complete. Unlimited Blade Works activated!"


def wait_for_incantation(stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
    """Read lines until every phrase has appeared in order.

    Lines that do not contain the next phrase are ignored. Raises EOFError
    if the input ends first.
    """
    source = sys.stdin if stdin is None else stdin
    sink = sys.stdout if stdout is None else stdout

    def say(message: str) -> None:
        print(message, file=sink, flush=True)

    say(_PROMPT)
    lines = iter(source.readline, "")
    last = len(INCANTATION)
    for count, phrase in enumerate(INCANTATION, start=1):
        if not any(phrase in line for line in lines):
            raise EOFError("input ended before the incantation was complete")
        if count < last:
            say(_CONTINUE)
    say(_DONE)