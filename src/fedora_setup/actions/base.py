# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/actions/base.py

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence

from fedora_setup.execution.runner import CommandRunner
from fedora_setup.guard.guard import IdempotencyCheck, IdempotencyGuard
from fedora_setup.logging.log import LogSink


class Fallibility(str, Enum):
    FATAL = "fatal"
    BEST_EFFORT = "best-effort"


class Outcome(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class ActionResult:
    description: str
    outcome: Outcome
    fallibility: Fallibility
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.outcome is Outcome.FAILED

    @property
    def fatal(self) -> bool:
        return self.failed and self.fallibility is Fallibility.FATAL


class Action(ABC):
    """
    One system mutation.

    The fallibility class is declared by whoever builds the action; it is
    never inferred from the exception the mutation raises. When a ``check``
    is given it is consulted right before the mutation, and a satisfied
    check skips the mutation entirely.
    """

    def __init__(
        self,
        description: str,
        *,
        fallibility: Fallibility = Fallibility.BEST_EFFORT,
        check: Optional[IdempotencyCheck] = None,
    ) -> None:
        self.description = description
        self.fallibility = fallibility
        self.check = check

    @abstractmethod
    def perform(self) -> None: ...

    def run(self, sink: LogSink) -> ActionResult:
        if self.check is not None and IdempotencyGuard(sink).check(self.check):
            return ActionResult(self.description, Outcome.SKIPPED, self.fallibility)

        try:
            self.perform()
        except Exception as exc:
            msg = f"{self.description} failed: {exc}"
            if self.fallibility is Fallibility.FATAL:
                sink.error(msg)
            else:
                sink.warn(msg)
            return ActionResult(self.description, Outcome.FAILED, self.fallibility, error=str(exc))

        return ActionResult(self.description, Outcome.SUCCEEDED, self.fallibility)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.description!r}, {self.fallibility.value})"


class CallableAction(Action):
    """Wrap a zero-argument callable as an action."""

    def __init__(self, description: str, fn: Callable[[], None], **kw) -> None:
        super().__init__(description, **kw)
        self.fn = fn

    def perform(self) -> None:
        self.fn()


class CommandAction(Action):
    def __init__(
        self,
        description: str,
        runner: CommandRunner,
        argv: Sequence[str],
        *,
        sudo: bool = False,
        error: Optional[type[Exception]] = None,
        **kw,
    ) -> None:
        super().__init__(description, **kw)
        self.runner = runner
        self.argv = list(argv)
        self.sudo = sudo
        self.error = error

    def perform(self) -> None:
        try:
            self.runner.run(self.argv, sudo=self.sudo)
        except Exception as exc:
            if self.error is None or isinstance(exc, self.error):
                raise
            raise self.error(str(exc)) from exc
