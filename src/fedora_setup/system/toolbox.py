# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/system/toolbox.py

from __future__ import annotations

import getpass
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fedora_setup.config.models import SetupConfig
from fedora_setup.execution.runner import CommandRunner
from fedora_setup.logging.log import LogSink

from .dnf import Dnf
from .download import Downloader
from .flatpak import Flatpak
from .host import Host
from .systemd import Systemd


@dataclass
class Toolbox:
    """The external collaborators the step catalogs act through."""

    runner: CommandRunner
    dnf: Dnf
    flatpak: Flatpak
    systemd: Systemd
    host: Host
    downloader: Downloader
    home: Path
    user: str


def build_toolbox(
    config: SetupConfig,
    sink: LogSink,
    *,
    home: Optional[Path] = None,
    user: Optional[str] = None,
) -> Toolbox:
    runner = CommandRunner(
        sink=sink,
        dry_run=config.dry_run,
        timeout=config.command_timeout_seconds,
    )
    user = user or getpass.getuser()
    return Toolbox(
        runner=runner,
        dnf=Dnf(runner),
        flatpak=Flatpak(runner),
        systemd=Systemd(runner),
        host=Host(runner, user=user),
        downloader=Downloader(
            runner,
            timeout=config.downloads.timeout_seconds,
            retries=config.downloads.retries,
            retry_delay=config.downloads.retry_delay_seconds,
        ),
        home=home or Path.home(),
        user=user,
    )
