# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/observers/jsonfile.py
from __future__ import annotations

import json
from pathlib import Path

from .events import BaseEvent


class JsonFileObserver:
    """Append every session event as one JSON line."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    @classmethod
    def for_session(cls, base_dir: Path, prefix: str, session_id: str) -> "JsonFileObserver":
        return cls(base_dir / f"{prefix}-{session_id}.events.jsonl")

    def notify(self, event: BaseEvent) -> None:
        record = {"type": event.__class__.__name__, **event.dict()}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(record, default=str) + "\n")
