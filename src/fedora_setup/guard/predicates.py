# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/guard/predicates.py
"""
Ready-made idempotency checks over the collaborators in ``fedora_setup.system``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence, TYPE_CHECKING

from .guard import IdempotencyCheck

if TYPE_CHECKING:
    from fedora_setup.system.dnf import Dnf
    from fedora_setup.system.flatpak import Flatpak
    from fedora_setup.system.host import Host
    from fedora_setup.system.systemd import Systemd


def hostname_is(host: "Host", name: str) -> IdempotencyCheck:
    return IdempotencyCheck(
        f"Hostname already set to '{name}'",
        lambda: host.hostname() == name,
    )


def default_shell_is(host: "Host", shell: str) -> IdempotencyCheck:
    return IdempotencyCheck(
        f"Default shell already {shell}",
        lambda: host.default_shell() == shell,
    )


def packages_installed(dnf: "Dnf", packages: Sequence[str]) -> IdempotencyCheck:
    names = list(packages)
    return IdempotencyCheck(
        f"Already installed: {' '.join(names)}",
        lambda: all(dnf.is_installed(p) for p in names),
    )


def flatpak_remote_present(flatpak: "Flatpak", remote: str) -> IdempotencyCheck:
    return IdempotencyCheck(
        f"Flatpak remote '{remote}' already configured",
        lambda: flatpak.has_remote(remote),
    )


def service_enabled(systemd: "Systemd", unit: str) -> IdempotencyCheck:
    return IdempotencyCheck(
        f"{unit} already enabled",
        lambda: systemd.is_enabled(unit) == "enabled",
    )


def service_disabled(systemd: "Systemd", unit: str) -> IdempotencyCheck:
    return IdempotencyCheck(
        f"{unit} already disabled",
        lambda: systemd.is_enabled(unit) in ("disabled", "masked"),
    )


def path_exists(path: Path, what: str | None = None) -> IdempotencyCheck:
    return IdempotencyCheck(
        f"{what or path} already present",
        lambda: Path(path).exists(),
    )


def file_content_is(path: Path, content: str) -> IdempotencyCheck:
    def _same() -> bool:
        p = Path(path)
        return p.is_file() and p.read_text(encoding="utf-8") == content

    return IdempotencyCheck(f"{path} already up to date", _same)


def file_has_line(path: Path, needle: str) -> IdempotencyCheck:
    def _has() -> bool:
        p = Path(path)
        return p.is_file() and any(needle in line for line in p.read_text(encoding="utf-8").splitlines())

    return IdempotencyCheck(f"{path} already contains '{needle}'", _has)


def command_available(host: "Host", command: str) -> IdempotencyCheck:
    return IdempotencyCheck(
        f"{command} already installed",
        lambda: host.which(command) is not None,
    )
