# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/engine/steps.py

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Sequence

from fedora_setup.actions.base import Action, ActionResult
from fedora_setup.errors import FatalActionError
from fedora_setup.logging.log import LogSink, Severity
from fedora_setup.observers.dispatcher import EventBus
from fedora_setup.observers.events import ActionFinished, ChoiceSelected, new_ctx
from fedora_setup.prompt.prompter import Prompter

StepBody = Callable[["StepContext"], None]

START = "start"
END = "end"


@dataclass(frozen=True)
class Step:
    """
    A named unit of the provisioning sequence.

    Optional steps (``required=False``) sit behind a confirmation gate
    asking ``question``.
    """

    name: str
    label: str
    body: StepBody
    required: bool = True
    question: Optional[str] = None

    @property
    def gate_question(self) -> str:
        return self.question or f"{self.label}?"

    def run(self, ctx: "StepContext") -> None:
        self.body(ctx)


@dataclass(frozen=True)
class ChoiceOption:
    """
    One entry of a choice loop. An option without a handler terminates
    the loop.
    """

    label: str
    handler: Optional[StepBody] = None
    question: Optional[str] = None      # per-option confirmation before the handler
    notice: Optional[str] = None        # shown after selection, before the question
    skip_message: Optional[str] = None

    @property
    def terminal(self) -> bool:
        return self.handler is None


def choice_loop(
    prompt: str,
    options: Sequence[ChoiceOption],
    *,
    again_question: Optional[str] = None,
    intro: Sequence[str] = (),
) -> StepBody:
    """
    Build a step body that presents ``options`` until a terminal option
    is picked. With ``again_question`` the loop also ends when the user
    declines to go round again.
    """
    opts = tuple(options)
    if not any(o.terminal for o in opts):
        raise ValueError("a choice loop needs at least one terminating option")
    labels = [o.label for o in opts]

    def body(ctx: StepContext) -> None:
        for line in intro:
            ctx.info(line)

        while True:
            option = opts[ctx.choose(prompt, labels)]
            ctx.record_choice(option.label)

            if option.terminal:
                ctx.warn(option.skip_message or f"Skipping {ctx.step.label} as requested.")
                return

            ctx.info(f"You chose {option.label}.")
            if option.notice:
                ctx.info(option.notice)

            if option.question and not ctx.confirm(option.question):
                ctx.warn(option.skip_message or f"Skipped {option.label}.")
            else:
                with ctx.section(option.label):
                    option.handler(ctx)

            if again_question is not None and not ctx.confirm(again_question):
                return

    return body


def loop_step(
    name: str,
    label: str,
    prompt: str,
    options: Sequence[ChoiceOption],
    *,
    again_question: Optional[str] = None,
    intro: Sequence[str] = (),
) -> Step:
    return Step(
        name=name,
        label=label,
        body=choice_loop(prompt, options, again_question=again_question, intro=intro),
    )


@dataclass
class StepContext:
    """
    What a step body sees while it runs: the prompt layer, the log, and
    ``run()`` which applies the session failure policy to each action.
    """

    step: Step
    sink: LogSink
    prompter: Prompter
    bus: EventBus = field(default_factory=EventBus)
    session_id: str = ""
    results: List[ActionResult] = field(default_factory=list)
    choices: List[str] = field(default_factory=list)

    def run(self, action: Action) -> ActionResult:
        result = action.run(self.sink)
        self.results.append(result)
        self.bus.emit(
            ActionFinished(
                step=self.step.name,
                action=result.description,
                outcome=result.outcome.value,
                fallibility=result.fallibility.value,
                error=result.error,
                **new_ctx(self.session_id),
            )
        )
        if result.fatal:
            raise FatalActionError(self.step.label, result)
        return result

    # prompts ----------------------------------------------------------
    def confirm(self, question: str) -> bool:
        return self.prompter.confirm(question)

    def choose(self, prompt: str, options: Sequence[str]) -> int:
        return self.prompter.choose(prompt, options)

    def record_choice(self, option: str) -> None:
        self.choices.append(option)
        self.bus.emit(ChoiceSelected(step=self.step.name, option=option, **new_ctx(self.session_id)))

    # log --------------------------------------------------------------
    def info(self, message: str) -> None:
        self.sink.info(message)

    def warn(self, message: str) -> None:
        self.sink.warn(message)

    @property
    def warnings(self) -> List[ActionResult]:
        return [r for r in self.results if r.failed and not r.fatal]

    @contextmanager
    def section(self, label: str) -> Iterator[None]:
        """
        Bracket a block with start/end entries. The end entry is written
        whatever happens inside the block.
        """
        self.sink.emit(f"==> Starting: {label} ...", marker=START, scope=label)
        status = "aborted"
        failures_before = len(self.warnings)
        try:
            yield
            status = "completed with warnings" if len(self.warnings) > failures_before else "completed"
        finally:
            severity = Severity.ERROR if status == "aborted" else Severity.INFO
            self.sink.emit(f"==> Finished: {label} ({status})", severity, marker=END, scope=label)
