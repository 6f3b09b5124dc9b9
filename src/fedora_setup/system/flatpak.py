# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/system/flatpak.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from fedora_setup.errors import CommandError, PackageActionError
from fedora_setup.execution.runner import CommandRunner

FLATHUB_URL = "https://flathub.org/repo/flathub.flatpakrepo"


@dataclass
class Flatpak:
    runner: CommandRunner
    system: bool = True  # system-wide installs go through sudo

    def _flatpak(self, *args: str) -> None:
        try:
            self.runner.run(["flatpak", *args], sudo=self.system)
        except CommandError as e:
            raise PackageActionError(str(e)) from e

    def has_remote(self, name: str) -> bool:
        r = self.runner.run(["flatpak", "remotes", "--columns=name"], check=False, probe=True)
        return r.returncode == 0 and name in r.stdout.split()

    def add_remote(self, name: str = "flathub", url: str = FLATHUB_URL) -> None:
        self._flatpak("remote-add", "--if-not-exists", name, url)

    def install(self, apps: Sequence[str], remote: str = "flathub") -> None:
        if not apps:
            return
        self._flatpak("install", "-y", "--or-update", remote, *apps)

    def uninstall_unused(self) -> None:
        self._flatpak("uninstall", "--unused", "-y")
