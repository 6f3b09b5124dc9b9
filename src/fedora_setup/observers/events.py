# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/observers/events.py

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional
from datetime import datetime


# ---------------------------------------------------------------------
# Base context and helper
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class BaseEvent:
    ts: str           # ISO timestamp
    session_id: str   # correlates all events of one provisioning session

    def dict(self) -> Dict[str, Any]:
        return asdict(self)


def new_ctx(session_id: str) -> Dict[str, Any]:
    return {
        "ts": datetime.now().isoformat(timespec="seconds"),
        "session_id": session_id,
    }


# ---------------------------------------------------------------------
# Session lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class SessionStarted(BaseEvent):
    profile: str
    log_path: str

@dataclass(frozen=True)
class SessionFinished(BaseEvent):
    status: str               # "success" | "aborted"
    exit_code: int
    failed_step: Optional[str] = None


# ---------------------------------------------------------------------
# Step lifecycle
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class StepStarted(BaseEvent):
    step: str
    label: str

@dataclass(frozen=True)
class StepFinished(BaseEvent):
    step: str
    label: str
    status: str               # "ok" | "warnings" | "aborted"

@dataclass(frozen=True)
class StepDeclined(BaseEvent):
    step: str
    label: str

@dataclass(frozen=True)
class ChoiceSelected(BaseEvent):
    step: str
    option: str


# ---------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class ActionFinished(BaseEvent):
    step: str
    action: str
    outcome: str              # "succeeded" | "skipped" | "failed"
    fallibility: str          # "fatal" | "best-effort"
    error: Optional[str] = None
