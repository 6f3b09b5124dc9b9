# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/engine/executor.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from fedora_setup.actions.base import ActionResult
from fedora_setup.logging.log import LogSink
from fedora_setup.observers.dispatcher import EventBus
from fedora_setup.observers.events import StepFinished, StepStarted, new_ctx
from fedora_setup.prompt.prompter import Prompter

from .steps import Step, StepContext

log = logging.getLogger("fedora_setup")


@dataclass
class StepResult:
    name: str
    label: str
    status: str                 # "ok" | "warnings" | "aborted"
    results: List[ActionResult] = field(default_factory=list)
    choices: List[str] = field(default_factory=list)

    @property
    def warnings(self) -> List[ActionResult]:
        return [r for r in self.results if r.failed and not r.fatal]


class StepExecutor:
    """
    Run one step inside a start/end log bracket.

    Best-effort failures are already absorbed by the actions; anything that
    escapes the step body (a fatal action, an interrupt, a bug) is re-raised
    after the bracket has been closed.
    """

    def __init__(
        self,
        sink: LogSink,
        prompter: Prompter,
        *,
        bus: Optional[EventBus] = None,
        session_id: str = "",
    ):
        self.sink = sink
        self.prompter = prompter
        self.bus = bus or EventBus()
        self.session_id = session_id
        self.last: Optional[StepResult] = None

    def execute(self, step: Step) -> StepResult:
        ctx = StepContext(
            step=step,
            sink=self.sink,
            prompter=self.prompter,
            bus=self.bus,
            session_id=self.session_id,
        )
        result = StepResult(name=step.name, label=step.label, status="aborted")
        self.last = result
        self.bus.emit(StepStarted(step=step.name, label=step.label, **new_ctx(self.session_id)))
        log.debug("executing step %s", step.name)

        try:
            with ctx.section(step.label):
                step.run(ctx)
            result.status = "warnings" if ctx.warnings else "ok"
        finally:
            result.results = list(ctx.results)
            result.choices = list(ctx.choices)
            self.bus.emit(
                StepFinished(
                    step=step.name,
                    label=step.label,
                    status=result.status,
                    **new_ctx(self.session_id),
                )
            )

        return result
