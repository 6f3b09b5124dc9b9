# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/engine/session.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence

from fedora_setup.errors import FatalActionError, LogSinkError
from fedora_setup.logging.log import LogSink, new_session_id
from fedora_setup.observers.dispatcher import EventBus
from fedora_setup.observers.events import (
    SessionFinished,
    SessionStarted,
    StepDeclined,
    new_ctx,
)
from fedora_setup.prompt.prompter import Prompter

from .executor import StepExecutor, StepResult
from .steps import Step

log = logging.getLogger("fedora_setup")

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_INTERRUPTED = 130


class SessionState(str, Enum):
    INITIALIZING = "initializing"
    CONFIRMING_PREREQUISITES = "confirming-prerequisites"
    EXECUTING = "executing"
    SUMMARIZING = "summarizing"
    TERMINATED = "terminated"


class Termination(str, Enum):
    SUCCESS = "success"
    ABORTED = "aborted"


@dataclass
class SessionReport:
    session_id: str
    profile: str
    log_path: Optional[str] = None
    state: SessionState = SessionState.INITIALIZING
    termination: Optional[Termination] = None
    exit_code: int = EXIT_OK
    completed: List[str] = field(default_factory=list)
    accepted: List[str] = field(default_factory=list)
    declined: List[str] = field(default_factory=list)
    choices: Dict[str, List[str]] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)
    failed_step: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.termination is Termination.SUCCESS

    def summary(self) -> str:
        return (
            f"completed={len(self.completed)} accepted={len(self.accepted)} "
            f"declined={len(self.declined)} warnings={len(self.warnings)}"
        )

    def lines(self) -> List[str]:
        out = [f"Summary: {self.summary()}"]
        out.append("Accepted optional steps: " + (", ".join(self.accepted) or "none"))
        out.append("Declined optional steps: " + (", ".join(self.declined) or "none"))
        for label, picked in self.choices.items():
            out.append(f"{label}: {', '.join(picked)}")
        for w in self.warnings:
            out.append(f"Warning: {w}")
        if self.failed_step:
            out.append(f"Stopped at: {self.failed_step}")
        return out


class ProvisioningSession:
    """
    Top-level run: owns the session id and the log sink lifetime, and
    drives the state machine

        Initializing -> ConfirmingPrerequisites -> Executing
            -> Summarizing -> Terminated(success | aborted)

    ``preflight`` steps run while initializing (connectivity),
    ``prerequisites`` while confirming prerequisites; both are required
    steps whose actions are normally fatal.
    """

    def __init__(
        self,
        steps: Sequence[Step],
        *,
        sink: LogSink,
        profile: str = "custom",
        preflight: Sequence[Step] = (),
        prerequisites: Sequence[Step] = (),
        read_line: Callable[[], str] = input,
        bus: Optional[EventBus] = None,
        session_id: Optional[str] = None,
        banner: Sequence[str] = (),
        farewell: Sequence[str] = (),
    ):
        self.steps = tuple(steps)
        self.preflight = tuple(preflight)
        self.prerequisites = tuple(prerequisites)
        self.sink = sink
        self.profile = profile
        self.bus = bus or EventBus()
        self.session_id = session_id or new_session_id(datetime.now())
        self.banner = tuple(banner)
        self.farewell = tuple(farewell)
        self.prompter = Prompter(sink, read_line=read_line)
        self.executor = StepExecutor(sink, self.prompter, bus=self.bus, session_id=self.session_id)
        self.report = SessionReport(session_id=self.session_id, profile=profile)

    @property
    def state(self) -> SessionState:
        return self.report.state

    def _enter(self, state: SessionState) -> None:
        log.debug("session %s: %s -> %s", self.session_id, self.report.state.value, state.value)
        self.report.state = state

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def run(self) -> SessionReport:
        report = self.report
        self._enter(SessionState.INITIALIZING)

        try:
            self.sink.open(self.session_id)
        except LogSinkError as e:
            report.error = str(e)
            report.termination = Termination.ABORTED
            report.exit_code = EXIT_ABORTED
            self._enter(SessionState.TERMINATED)
            return report

        report.log_path = str(self.sink.path)
        try:
            self.bus.emit(SessionStarted(profile=self.profile, log_path=report.log_path, **new_ctx(self.session_id)))
            for line in self.banner:
                self.sink.info(line)
            self.sink.info(f"Log file: {self.sink.path}")

            self._run_phase(self.preflight)

            self._enter(SessionState.CONFIRMING_PREREQUISITES)
            self._run_phase(self.prerequisites)

            self._enter(SessionState.EXECUTING)
            for step in self.steps:
                if not step.required and not self._gate(step):
                    continue
                self._execute(step)

            report.termination = Termination.SUCCESS
            report.exit_code = EXIT_OK

        except FatalActionError as e:
            self._abort(e.step, f"Setup aborted: step '{e.step}' failed: {e.result.error}", EXIT_ABORTED)
        except (KeyboardInterrupt, EOFError):
            self._abort(self._current_label(), "Interrupted by user", EXIT_INTERRUPTED)
        except Exception as e:
            label = self._current_label()
            log.debug("unexpected failure in %s", label, exc_info=True)
            self._abort(label, f"Setup aborted: step '{label}' failed: {e}", EXIT_ABORTED)
        finally:
            try:
                self._summarize()
            finally:
                self._enter(SessionState.TERMINATED)
                self.bus.emit(
                    SessionFinished(
                        status=(report.termination or Termination.ABORTED).value,
                        exit_code=report.exit_code,
                        failed_step=report.failed_step,
                        **new_ctx(self.session_id),
                    )
                )
                self.sink.close()

        return report

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    def _run_phase(self, steps: Sequence[Step]) -> None:
        for step in steps:
            self._execute(step)

    def _gate(self, step: Step) -> bool:
        if self.prompter.confirm(step.gate_question):
            self.report.accepted.append(step.label)
            return True
        self.report.declined.append(step.label)
        self.sink.warn(f"Skipped: {step.label}")
        self.bus.emit(StepDeclined(step=step.name, label=step.label, **new_ctx(self.session_id)))
        return False

    def _execute(self, step: Step) -> StepResult:
        try:
            result = self.executor.execute(step)
        finally:
            self._collect(self.executor.last)
        self.report.completed.append(step.label)
        return result

    def _collect(self, result: Optional[StepResult]) -> None:
        if result is None:
            return
        if result.choices:
            self.report.choices.setdefault(result.label, []).extend(result.choices)
        self.report.warnings.extend(f"{result.label}: {w.description} ({w.error})" for w in result.warnings)

    def _current_label(self) -> Optional[str]:
        last = self.executor.last
        if last is not None and last.status == "aborted":
            return last.label
        return None

    def _abort(self, label: Optional[str], message: str, exit_code: int) -> None:
        self.report.failed_step = label
        self.report.error = message
        self.report.termination = Termination.ABORTED
        self.report.exit_code = exit_code
        if self.sink.is_open:
            self.sink.error(message)

    def _summarize(self) -> None:
        self._enter(SessionState.SUMMARIZING)
        if not self.sink.is_open:
            return
        for line in self.report.lines():
            self.sink.info(line)
        if self.report.ok:
            for line in self.farewell:
                self.sink.info(line)
