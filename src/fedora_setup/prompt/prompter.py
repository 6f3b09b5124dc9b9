# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/prompt/prompter.py

from __future__ import annotations

import re
from typing import Callable, Sequence

from fedora_setup.errors import InputValidationError
from fedora_setup.logging.log import LogSink

YES_RETRY_MESSAGE = "Please answer y or n."
CHOICE_RETRY_MESSAGE = "Invalid option. Try again."

_MENU_NUMBER = re.compile(r"[1-9][0-9]*")


def parse_yes_no(raw: str) -> bool:
    """
    Accept the y/n family case-insensitively: anything starting with
    ``y`` is affirmative, anything starting with ``n`` is negative.
    """
    token = raw.strip().lower()
    if token.startswith("y"):
        return True
    if token.startswith("n"):
        return False
    raise InputValidationError(f"not a yes/no answer: {raw!r}")


def parse_choice(raw: str, count: int) -> int:
    """Parse a 1-based menu selection and return the zero-based index."""
    token = raw.strip()
    if not _MENU_NUMBER.fullmatch(token):
        raise InputValidationError(f"not a number: {raw!r}")
    number = int(token)
    if not 1 <= number <= count:
        raise InputValidationError(f"{number} is outside 1-{count}")
    return number - 1


class Prompter:
    """
    Blocking yes/no and numbered-menu prompts.

    Rejected input never leaves this class: it is logged as a single warn
    line and the question is asked again. End of input (EOFError) and
    Ctrl-C propagate to the caller.
    """

    def __init__(self, sink: LogSink, *, read_line: Callable[[], str] = input):
        self.sink = sink
        self.read_line = read_line

    def confirm(self, question: str) -> bool:
        while True:
            self.sink.prompt(f"{question} [y/n]: ")
            try:
                return parse_yes_no(self.read_line())
            except InputValidationError:
                self.sink.warn(YES_RETRY_MESSAGE)

    def choose(self, prompt: str, options: Sequence[str]) -> int:
        if not options:
            raise ValueError("choose() needs at least one option")

        while True:
            self.sink.info(prompt)
            for number, label in enumerate(options, start=1):
                self.sink.info(f"  {number}) {label}")
            self.sink.prompt(f"Enter choice [1-{len(options)}]: ")
            try:
                return parse_choice(self.read_line(), len(options))
            except InputValidationError:
                self.sink.warn(CHOICE_RETRY_MESSAGE)
