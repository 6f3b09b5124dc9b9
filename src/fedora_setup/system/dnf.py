# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/system/dnf.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from fedora_setup.errors import CommandError, PackageActionError
from fedora_setup.execution.runner import CommandRunner


@dataclass
class Dnf:
    """Thin dnf/rpm client. Every mutation runs through sudo with ``-y``."""

    runner: CommandRunner

    def _dnf(self, *args: str) -> None:
        try:
            self.runner.run(["dnf", *args], sudo=True)
        except CommandError as e:
            raise PackageActionError(str(e)) from e

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def is_installed(self, package: str) -> bool:
        r = self.runner.run(["rpm", "-q", package], check=False, probe=True)
        return r.returncode == 0

    def fedora_release(self) -> str:
        r = self.runner.run(["rpm", "-E", "%fedora"], probe=True)
        return r.stdout.strip()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def install(self, packages: Sequence[str], *extra: str) -> None:
        if not packages:
            return
        self._dnf("install", "-y", *packages, *extra)

    def install_urls(self, urls: Sequence[str]) -> None:
        """Install release packages straight from their URLs."""
        self._dnf("install", "-y", *urls)

    def remove(self, packages: Sequence[str]) -> None:
        self._dnf("remove", "-y", *packages)

    def swap(self, old: str, new: str, *extra: str) -> None:
        self._dnf("swap", "-y", old, new, *extra)

    def upgrade(self, refresh: bool = True) -> None:
        args = ["upgrade", "-y"]
        if refresh:
            args.insert(1, "--refresh")
        self._dnf(*args)

    def group_install(self, groups: Sequence[str]) -> None:
        self._dnf("group", "install", "-y", *groups)

    def update_group(self, group: str, *extra: str) -> None:
        self._dnf("update", "-y", f"@{group}", *extra)

    def copr_enable(self, repo: str) -> None:
        self._dnf("copr", "enable", "-y", repo)

    def check_update(self) -> None:
        # exit code 100 means "updates available", not an error
        r = self.runner.run(["dnf", "check-update"], sudo=True, check=False, quiet=True)
        if r.returncode not in (0, 100):
            raise PackageActionError(f"dnf check-update failed (rc={r.returncode})")

    def import_key(self, url: str) -> None:
        try:
            self.runner.run(["rpm", "--import", url], sudo=True)
        except CommandError as e:
            raise PackageActionError(str(e)) from e

    def clean(self) -> None:
        self._dnf("clean", "all")

    def autoremove(self) -> None:
        self._dnf("autoremove", "-y")
