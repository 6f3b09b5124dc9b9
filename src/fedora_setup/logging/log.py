# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/logging/log.py

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import typer

from fedora_setup.errors import LogSinkError

PROMPT = 25
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
SESSION_ID_FORMAT = "%Y%m%d_%H%M%S"

DEFAULT_LOG_DIR = Path.home() / "fedora42-setup-logs"
DEFAULT_LOG_PREFIX = "fedora42-setup"


class Severity(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    PROMPT = "prompt"

    @property
    def tag(self) -> str:
        return self.value.upper()

    @property
    def level(self) -> int:
        return _LEVELS[self]


_LEVELS = {
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.PROMPT: PROMPT,
}

_STYLES = {
    Severity.INFO: ("[INFO]", typer.colors.GREEN),
    Severity.WARN: ("[WARN]", typer.colors.YELLOW),
    Severity.ERROR: ("[ERROR]", typer.colors.RED),
    Severity.PROMPT: ("[INPUT]", typer.colors.BLUE),
}


@dataclass(frozen=True)
class LogEntry:
    ts: datetime
    message: str
    severity: Severity = Severity.INFO
    marker: Optional[str] = None  # "start" | "end" for step brackets
    scope: Optional[str] = None   # step or section label the marker belongs to

    def render(self) -> str:
        return f"[{self.ts.strftime(TIMESTAMP_FORMAT)}] [{self.severity.tag}] {self.message}"


def new_session_id(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime(SESSION_ID_FORMAT)


class DurableFileHandler(logging.FileHandler):
    """
    Append-only file handler that forces every record to disk before
    returning, so nothing written is lost if the process dies afterwards.
    """

    def __init__(self, filename: str | Path, encoding: str = "utf-8"):
        super().__init__(filename, mode="a", encoding=encoding)

    def flush(self) -> None:
        super().flush()
        if self.stream is not None and not self.stream.closed:
            os.fsync(self.stream.fileno())


class TerminalHandler(logging.Handler):
    """Mirror session entries to the terminal with a coloured severity tag."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            severity = getattr(record, "severity", Severity.INFO)
            tag, colour = _STYLES[severity]
            label = typer.style(tag, fg=colour, bold=True)
            text = f"{label} {record.getMessage()}"
            if severity is Severity.PROMPT:
                typer.echo(text, nl=False)
            else:
                typer.echo(text, err=severity is Severity.ERROR)
        except Exception:
            self.handleError(record)


class LogSink:
    """
    Durable, timestamped, append-only record of a provisioning session,
    mirrored to the terminal.

    The file lives at ``<base_dir>/<prefix>-<session_id>.log``. Two sessions
    started in the same second share a file (last writer wins).
    """

    def __init__(
        self,
        base_dir: Path | str | None = None,
        *,
        prefix: str = DEFAULT_LOG_PREFIX,
        console: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.base_dir = Path(base_dir).expanduser() if base_dir else DEFAULT_LOG_DIR
        self.prefix = prefix
        self.console = console
        self.clock = clock
        self.session_id: Optional[str] = None
        self.path: Optional[Path] = None
        self._logger: Optional[logging.Logger] = None
        self._entries: List[LogEntry] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self, session_id: str) -> "LogSink":
        if self._logger is not None:
            raise LogSinkError(f"log sink already open for session {self.session_id}")

        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            path = self.base_dir / f"{self.prefix}-{session_id}.log"
            fh = DurableFileHandler(path)
        except OSError as exc:
            raise LogSinkError(f"cannot create session log in {self.base_dir}: {exc}") from exc

        fh.setFormatter(logging.Formatter("%(line)s"))

        logger = logging.getLogger(f"fedora_setup.session.{session_id}")
        logger.setLevel(logging.DEBUG)
        logger.handlers.clear()
        logger.propagate = False
        logger.addHandler(fh)

        if self.console:
            logger.addHandler(TerminalHandler())

        self.session_id = session_id
        self.path = path
        self._logger = logger
        return self

    def close(self) -> None:
        if self._logger is None:
            return
        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()
        self._logger = None

    @property
    def is_open(self) -> bool:
        return self._logger is not None

    def __enter__(self) -> "LogSink":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------
    def append(self, entry: LogEntry) -> None:
        if self._logger is None:
            raise LogSinkError("log sink is not open")
        self._entries.append(entry)
        self._logger.log(
            entry.severity.level,
            entry.message,
            extra={"line": entry.render(), "severity": entry.severity},
        )

    def emit(
        self,
        message: str,
        severity: Severity = Severity.INFO,
        *,
        marker: Optional[str] = None,
        scope: Optional[str] = None,
    ) -> None:
        lines = message.splitlines() or [""]
        for line in lines:
            self.append(
                LogEntry(
                    ts=self.clock(),
                    message=line,
                    severity=severity,
                    marker=marker,
                    scope=scope,
                )
            )

    def info(self, message: str) -> None:
        self.emit(message, Severity.INFO)

    def warn(self, message: str) -> None:
        self.emit(message, Severity.WARN)

    def error(self, message: str) -> None:
        self.emit(message, Severity.ERROR)

    def prompt(self, message: str) -> None:
        self.append(LogEntry(ts=self.clock(), message=message, severity=Severity.PROMPT))

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    @property
    def entries(self) -> Tuple[LogEntry, ...]:
        return tuple(self._entries)
