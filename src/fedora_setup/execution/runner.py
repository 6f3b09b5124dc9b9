# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/execution/runner.py

from __future__ import annotations

import os
import shlex
import subprocess
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from fedora_setup.errors import CommandError
from fedora_setup.logging.log import LogSink

Cmd = Sequence[Union[str, "os.PathLike[str]"]]


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass
class CommandRunner:
    sink: Optional[LogSink] = None
    dry_run: bool = False
    timeout: Optional[float] = 3600

    def log(self, msg: str) -> None:
        if self.sink is not None and self.sink.is_open:
            self.sink.info(msg)

    def warn(self, msg: str) -> None:
        if self.sink is not None and self.sink.is_open:
            self.sink.warn(msg)

    def run(
        self,
        cmd: Cmd,
        *,
        sudo: bool = False,
        check: bool = True,
        input_text: Optional[str] = None,
        timeout: Optional[float] = None,
        cwd: Optional[str] = None,
        env: Optional[dict[str, str]] = None,
        quiet: bool = False,
        probe: bool = False,
    ) -> CommandResult:
        """
        Run a command, log it and its captured output to the session log.

        ``probe`` marks read-only queries (``rpm -q``, ``systemctl
        is-enabled``): they run even in dry-run mode and are not logged.
        ``quiet`` logs the command line but not its output.
        """
        argv = [str(c) for c in cmd]
        if sudo:
            argv = ["sudo", *argv]
        cmd_str = shlex.join(argv)

        if not probe:
            self.log(f"$ {cmd_str}")

        if self.dry_run and not probe:
            self.log("dry-run: skipped execution")
            return CommandResult(argv=argv, returncode=0)

        start = time.time()
        try:
            proc = subprocess.run(
                argv,
                input=input_text,
                capture_output=True,
                text=True,
                cwd=cwd,
                env=dict(os.environ, **env) if env else None,
                timeout=timeout if timeout is not None else self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandError(argv, None, timed_out=True) from e
        except FileNotFoundError as e:
            raise CommandError(argv, 127, str(e)) from e

        result = CommandResult(
            argv=argv,
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
            duration=time.time() - start,
        )

        if not probe and not quiet:
            if result.stdout.strip():
                self.log(result.stdout.rstrip())
            if result.stderr.strip():
                self.log(result.stderr.rstrip())

        if check and result.returncode != 0:
            raise CommandError(argv, result.returncode, result.stderr)

        return result
