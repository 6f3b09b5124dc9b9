# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/system/host.py

from __future__ import annotations

import os
import pwd
import re
import shutil
import socket
import zipfile
from datetime import datetime
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fedora_setup.errors import CommandError, PackageActionError
from fedora_setup.execution.runner import CommandRunner

# RTX 4000/5000 series need the open kernel module build of akmod-nvidia
_NVIDIA_OPEN_KMOD = re.compile(r"RTX 40|RTX 50|4090|5080|5090")


@dataclass
class Host:
    """
    Host-level state: hostname, login shell, clock, and plain files.

    File helpers honour the runner's dry-run flag so a dry run never
    touches the disk.
    """

    runner: CommandRunner
    user: str

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    def _run(self, argv: list[str], **kw) -> None:
        try:
            self.runner.run(argv, **kw)
        except CommandError as e:
            raise PackageActionError(str(e)) from e

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------
    def hostname(self) -> str:
        return socket.gethostname()

    def set_hostname(self, name: str) -> None:
        self._run(["hostnamectl", "set-hostname", name], sudo=True)

    def default_shell(self) -> str:
        return pwd.getpwnam(self.user).pw_shell

    def set_default_shell(self, shell: str) -> None:
        self._run(["chsh", "-s", shell, self.user], sudo=True)

    def set_local_rtc(self, enabled: bool = False) -> None:
        self._run(
            ["timedatectl", "set-local-rtc", "1" if enabled else "0", "--adjust-system-clock"],
            sudo=True,
        )

    @staticmethod
    def which(cmd: str) -> Optional[str]:
        return shutil.which(cmd)

    @staticmethod
    def is_root() -> bool:
        return os.geteuid() == 0

    def detect_nvidia_open_kmod(self) -> bool:
        r = self.runner.run(["lspci", "-nnk"], check=False, probe=True)
        return any(
            "nvidia" in line.lower() and _NVIDIA_OPEN_KMOD.search(line)
            for line in r.stdout.splitlines()
        )

    # ------------------------------------------------------------------
    # Root-owned files
    # ------------------------------------------------------------------
    def write_root_file(self, path: str | Path, content: str) -> None:
        self._run(["tee", str(path)], sudo=True, input_text=content, quiet=True)

    def remove_root_file(self, path: str | Path) -> None:
        self._run(["rm", "-f", str(path)], sudo=True)

    # ------------------------------------------------------------------
    # User files
    # ------------------------------------------------------------------
    def write_file(self, path: Path, content: str, *, backup: bool = False) -> None:
        self.runner.log(f"write {path}")
        if self.dry_run:
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        if backup and path.exists():
            shutil.copy2(path, path.with_name(f"{path.name}.backup-{datetime.now():%Y%m%d_%H%M%S}"))
        path.write_text(content, encoding="utf-8")

    def append_line(self, path: Path, line: str) -> None:
        self.runner.log(f"append to {path}: {line}")
        if self.dry_run:
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(line.rstrip("\n") + "\n")

    def extract_zip(self, archive: Path, dest: Path) -> None:
        self.runner.log(f"extract {archive} -> {dest}")
        if self.dry_run:
            return
        dest.mkdir(parents=True, exist_ok=True)
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(dest)
        except (OSError, zipfile.BadZipFile) as e:
            raise PackageActionError(f"cannot extract {archive}: {e}") from e

    def make_executable(self, path: Path) -> None:
        if self.dry_run:
            return
        path.chmod(path.stat().st_mode | 0o111)

    def remove_tree(self, path: Path) -> None:
        self.runner.log(f"remove {path}")
        if self.dry_run:
            return
        shutil.rmtree(path, ignore_errors=True)
