# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/system/systemd.py

from __future__ import annotations

from dataclasses import dataclass

from fedora_setup.errors import CommandError, PackageActionError
from fedora_setup.execution.runner import CommandRunner


@dataclass
class Systemd:
    runner: CommandRunner

    def _systemctl(self, *args: str) -> None:
        try:
            self.runner.run(["systemctl", *args], sudo=True)
        except CommandError as e:
            raise PackageActionError(str(e)) from e

    def is_enabled(self, unit: str) -> str:
        """Return the ``systemctl is-enabled`` state, or "unknown"."""
        r = self.runner.run(["systemctl", "is-enabled", unit], check=False, probe=True)
        return r.stdout.strip() or "unknown"

    def enable(self, unit: str, now: bool = True) -> None:
        if now:
            self._systemctl("enable", "--now", unit)
        else:
            self._systemctl("enable", unit)

    def disable(self, unit: str) -> None:
        self._systemctl("disable", unit)

    def mask(self, *units: str) -> None:
        self._systemctl("mask", *units)
