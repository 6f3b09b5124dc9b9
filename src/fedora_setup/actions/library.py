# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/actions/library.py
"""
Concrete actions over the system collaborators.

Every factory declares the fallibility of what it builds. Repository
bootstrap, the connectivity probe, the prerequisite check and the full
system upgrade are fatal; everything else defaults to best-effort.
Nothing here touches the system until the action runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional, Sequence, Type

from fedora_setup.errors import (
    CommandError,
    ConnectivityError,
    PackageActionError,
    PrerequisiteError,
    RepositorySetupError,
)
from fedora_setup.guard import predicates
from fedora_setup.guard.guard import IdempotencyCheck
from fedora_setup.system.flatpak import FLATHUB_URL
from fedora_setup.system.toolbox import Toolbox

from .base import Action, CallableAction, CommandAction, Fallibility

FATAL = Fallibility.FATAL
BEST_EFFORT = Fallibility.BEST_EFFORT

REQUIRED_TOOLS = ("sudo", "dnf", "rpm", "flatpak")

RPMFUSION_URL = (
    "https://download1.rpmfusion.org/{kind}/fedora/"
    "rpmfusion-{kind}-release-{release}.noarch.rpm"
)
RPMFUSION_PACKAGES = ("rpmfusion-free-release", "rpmfusion-nonfree-release")

_GLOB_CHARS = set("*?[")


def _reraise_as(error: Type[Exception], fn: Callable[[], None]) -> Callable[[], None]:
    def wrapped() -> None:
        try:
            fn()
        except error:
            raise
        except Exception as exc:
            raise error(str(exc)) from exc

    return wrapped


def _plain_names(packages: Sequence[str]) -> bool:
    return all(not (_GLOB_CHARS & set(p)) and not p.startswith("@") for p in packages)


# ----------------------------------------------------------------------
# Session foundations (fatal)
# ----------------------------------------------------------------------
def connectivity_check(tb: Toolbox, host: str = "8.8.8.8", timeout: int = 2) -> Action:
    def _ping() -> None:
        try:
            r = tb.runner.run(["ping", "-c1", f"-W{timeout}", host], check=False, probe=True)
        except CommandError as e:
            raise ConnectivityError(f"cannot probe network: {e}") from e
        if not r.ok:
            raise ConnectivityError(f"no internet detected (ping {host}); connect and re-run")
        tb.runner.log("Internet OK.")

    return CallableAction("Checking internet connectivity", _ping, fallibility=FATAL)


def prerequisites_check(tb: Toolbox, tools: Sequence[str] = REQUIRED_TOOLS) -> Action:
    def _check() -> None:
        if tb.host.is_root():
            raise PrerequisiteError("run as your regular user; sudo is used where needed")
        missing = [t for t in tools if tb.host.which(t) is None]
        if missing:
            msg = f"required tools not found on PATH: {', '.join(missing)}"
            if not tb.runner.dry_run:
                raise PrerequisiteError(msg)
            tb.runner.warn(msg)
            return
        tb.runner.log(f"Found {', '.join(tools)}.")

    return CallableAction("Checking prerequisites", _check, fallibility=FATAL)


def enable_rpmfusion(tb: Toolbox) -> Action:
    def _install() -> None:
        release = tb.dnf.fedora_release()
        if not release.isdigit():
            raise RepositorySetupError(f"cannot determine Fedora release (got {release!r})")
        tb.dnf.install_urls(
            [RPMFUSION_URL.format(kind=kind, release=release) for kind in ("free", "nonfree")]
        )

    return CallableAction(
        "Enable RPM Fusion repositories",
        _reraise_as(RepositorySetupError, _install),
        fallibility=FATAL,
        check=predicates.packages_installed(tb.dnf, RPMFUSION_PACKAGES),
    )


def enable_flathub(tb: Toolbox) -> Action:
    return CallableAction(
        "Enable Flathub remote",
        _reraise_as(RepositorySetupError, lambda: tb.flatpak.add_remote("flathub", FLATHUB_URL)),
        fallibility=FATAL,
        check=predicates.flatpak_remote_present(tb.flatpak, "flathub"),
    )


def system_upgrade(tb: Toolbox) -> Action:
    return CallableAction(
        "System upgrade",
        lambda: tb.dnf.upgrade(refresh=True),
        fallibility=FATAL,
    )


# ----------------------------------------------------------------------
# Packages
# ----------------------------------------------------------------------
def install_packages(
    tb: Toolbox,
    packages: Sequence[str],
    *extra: str,
    description: Optional[str] = None,
    fallibility: Fallibility = BEST_EFFORT,
) -> Action:
    """
    ``dnf install``. Plain package names are guarded by ``rpm -q``; globs
    and groups always go to dnf, which is itself idempotent.
    """
    names = list(packages)
    check = predicates.packages_installed(tb.dnf, names) if _plain_names(names) else None
    return CallableAction(
        description or f"Install {' '.join(names)}",
        lambda: tb.dnf.install(names, *extra),
        fallibility=fallibility,
        check=check,
    )


def install_package_urls(tb: Toolbox, description: str, urls: Callable[[], Sequence[str]], *, provides: Sequence[str] = ()) -> Action:
    """Install release RPMs whose URLs are only known at run time."""
    return CallableAction(
        description,
        lambda: tb.dnf.install_urls(list(urls())),
        check=predicates.packages_installed(tb.dnf, provides) if provides else None,
    )


def remove_packages(tb: Toolbox, packages: Sequence[str]) -> Action:
    names = list(packages)
    return CallableAction(
        f"Remove {' '.join(names)}",
        lambda: tb.dnf.remove(names),
        check=IdempotencyCheck(
            f"Not installed: {' '.join(names)}",
            lambda: not any(tb.dnf.is_installed(p) for p in names),
        ),
    )


def swap_packages(tb: Toolbox, old: str, new: str, *extra: str) -> Action:
    return CallableAction(
        f"Swap {old} for {new}",
        lambda: tb.dnf.swap(old, new, *extra),
        check=predicates.packages_installed(tb.dnf, [new]),
    )


def group_install(tb: Toolbox, groups: Sequence[str]) -> Action:
    names = list(groups)
    return CallableAction(f"Install group {', '.join(names)}", lambda: tb.dnf.group_install(names))


def update_group(tb: Toolbox, group: str, *extra: str) -> Action:
    return CallableAction(f"Update @{group}", lambda: tb.dnf.update_group(group, *extra))


def enable_copr(tb: Toolbox, repo: str) -> Action:
    owner, name = repo.split("/", 1)
    repo_file = Path(f"/etc/yum.repos.d/_copr:copr.fedorainfracloud.org:{owner}:{name}.repo")
    return CallableAction(
        f"Enable COPR {repo}",
        lambda: tb.dnf.copr_enable(repo),
        check=predicates.path_exists(repo_file, f"COPR repo {repo}"),
    )


def add_repo_file(tb: Toolbox, description: str, path: Path, content: str, *, key_url: Optional[str] = None) -> Action:
    def _add() -> None:
        if key_url:
            tb.dnf.import_key(key_url)
        tb.host.write_root_file(path, content)

    return CallableAction(description, _add, check=predicates.file_content_is(path, content))


def refresh_metadata(tb: Toolbox) -> Action:
    return CallableAction("Refresh package metadata", tb.dnf.check_update)


def install_flatpaks(tb: Toolbox, apps: Sequence[str], *, description: Optional[str] = None) -> Action:
    names = list(apps)
    return CallableAction(description or f"Install {' '.join(names)} (Flatpak)", lambda: tb.flatpak.install(names))


# ----------------------------------------------------------------------
# Host state
# ----------------------------------------------------------------------
def set_hostname(tb: Toolbox, name: str) -> Action:
    return CallableAction(
        f"Set hostname to '{name}'",
        lambda: tb.host.set_hostname(name),
        check=predicates.hostname_is(tb.host, name),
    )


def set_default_shell(tb: Toolbox, shell: str) -> Action:
    return CallableAction(
        f"Set default shell to {shell}",
        lambda: tb.host.set_default_shell(shell),
        check=predicates.default_shell_is(tb.host, shell),
    )


def enable_service(tb: Toolbox, unit: str, *, now: bool = True) -> Action:
    return CallableAction(
        f"Enable {unit}",
        lambda: tb.systemd.enable(unit, now=now),
        check=predicates.service_enabled(tb.systemd, unit),
    )


def disable_service(tb: Toolbox, unit: str) -> Action:
    return CallableAction(
        f"Disable {unit}",
        lambda: tb.systemd.disable(unit),
        check=predicates.service_disabled(tb.systemd, unit),
    )


def mask_units(tb: Toolbox, *units: str) -> Action:
    return CallableAction(
        f"Mask {' '.join(units)}",
        lambda: tb.systemd.mask(*units),
        check=IdempotencyCheck(
            f"Already masked: {' '.join(units)}",
            lambda: all(tb.systemd.is_enabled(u) == "masked" for u in units),
        ),
    )


def set_rtc_utc(tb: Toolbox) -> Action:
    return CallableAction("Keep the hardware clock in UTC", lambda: tb.host.set_local_rtc(False))


# ----------------------------------------------------------------------
# Files and downloads
# ----------------------------------------------------------------------
def download_file(tb: Toolbox, url: str, dest: Path, *, description: Optional[str] = None) -> Action:
    return CallableAction(
        description or f"Download {dest.name}",
        lambda: tb.downloader.fetch(url, dest),
        check=predicates.path_exists(dest),
    )


def write_file(tb: Toolbox, path: Path, content: str, *, backup: bool = False, description: Optional[str] = None) -> Action:
    return CallableAction(
        description or f"Write {path}",
        lambda: tb.host.write_file(path, content, backup=backup),
        check=predicates.file_content_is(path, content),
    )


def append_line(tb: Toolbox, path: Path, line: str, *, needle: Optional[str] = None) -> Action:
    return CallableAction(
        f"Add '{line}' to {path.name}",
        lambda: tb.host.append_line(path, line),
        check=predicates.file_has_line(path, needle or line),
    )


def run_command(
    tb: Toolbox,
    description: str,
    argv: Sequence[str],
    *,
    sudo: bool = False,
    check: Optional[IdempotencyCheck] = None,
    fallibility: Fallibility = BEST_EFFORT,
) -> Action:
    return CommandAction(
        description,
        tb.runner,
        argv,
        sudo=sudo,
        error=PackageActionError,
        fallibility=fallibility,
        check=check,
    )


def action(description: str, fn: Callable[[], None], *, check: Optional[IdempotencyCheck] = None) -> Action:
    """Best-effort action around an arbitrary callable."""
    return CallableAction(description, _reraise_as(PackageActionError, fn), check=check)


# ----------------------------------------------------------------------
# Cleanup
# ----------------------------------------------------------------------
def clean_caches(tb: Toolbox) -> Action:
    return CallableAction("Clean package caches", tb.dnf.clean)


def autoremove(tb: Toolbox) -> Action:
    return CallableAction("Remove orphaned packages", tb.dnf.autoremove)


def remove_unused_flatpaks(tb: Toolbox) -> Action:
    return CallableAction("Remove unused Flatpak runtimes", tb.flatpak.uninstall_unused)
