# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/guard/guard.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from fedora_setup.logging.log import LogSink

log = logging.getLogger("fedora_setup")


@dataclass(frozen=True)
class IdempotencyCheck:
    """
    A pure predicate over current system state.

    ``description`` reads as the satisfied fact, e.g.
    "hostname already set to 'fedora'".
    """

    description: str
    predicate: Callable[[], bool]

    def satisfied(self) -> bool:
        try:
            return bool(self.predicate())
        except Exception:
            log.debug("idempotency check %r raised; treating as unsatisfied", self.description, exc_info=True)
            return False


class IdempotencyGuard:
    def __init__(self, sink: LogSink):
        self.sink = sink

    def check(self, check: IdempotencyCheck) -> bool:
        """Return True (and log why) when the mutation can be skipped."""
        if not check.satisfied():
            return False
        self.sink.info(f"{check.description}, skipping")
        return True
