# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/cli/app.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

from fedora_setup.config.loader import ConfigError, load_config
from fedora_setup.config.models import SetupConfig
from fedora_setup.engine.session import ProvisioningSession
from fedora_setup.logging.log import LogSink, new_session_id
from fedora_setup.observers.dispatcher import EventBus, Observer
from fedora_setup.observers.jsonfile import JsonFileObserver
from fedora_setup.profiles.registry import PROFILES, Profile, build_profile
from fedora_setup.system.toolbox import build_toolbox

# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

app = typer.Typer(help="Interactive Fedora post-install setup", add_completion=False)

EXIT_CONFIG = 2


def _enable_debug() -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
    logger = logging.getLogger("fedora_setup")
    logger.setLevel(logging.DEBUG)
    logger.addHandler(handler)


def _print_steps(profile: Profile) -> None:
    typer.secho(profile.title, bold=True)
    for i, step in enumerate(profile.all_steps(), start=1):
        kind = "required" if step.required else "optional"
        typer.echo(f"  {i:2d}. {step.label} [{kind}]")


def _observers(cfg: SetupConfig, session_id: str) -> List[Observer]:
    observers: List[Observer] = []
    if cfg.logging.events_file:
        observers.append(
            JsonFileObserver.for_session(cfg.logging.base_dir, cfg.logging.prefix, session_id)
        )
    return observers


@app.command()
def main(
    config: Optional[Path] = typer.Option(None, "--config", help="Path to a YAML config file"),
    profile: Optional[str] = typer.Option(
        None,
        "--profile",
        help=f"Step catalog to run ({', '.join(PROFILES)})",
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log commands instead of running them"),
    debug: bool = typer.Option(False, "--debug", help="Diagnostic output on stderr"),
    list_steps: bool = typer.Option(False, "--list-steps", help="Print the steps and exit"),
) -> None:
    """
    Run the post-install setup interactively.
    """
    if debug:
        _enable_debug()

    try:
        cfg = load_config(config, profile=profile, dry_run=dry_run or None)
    except ConfigError as e:
        typer.secho(f"error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_CONFIG)

    session_id = new_session_id()
    sink = LogSink(cfg.logging.base_dir, prefix=cfg.logging.prefix)
    toolbox = build_toolbox(cfg, sink)
    selected = build_profile(cfg.profile, toolbox, cfg)

    if list_steps:
        _print_steps(selected)
        raise typer.Exit(code=0)

    banner = [selected.title]
    if cfg.dry_run:
        banner.append("Dry run: commands are logged, not executed.")

    session = ProvisioningSession(
        selected.steps,
        sink=sink,
        profile=selected.name,
        preflight=selected.preflight,
        prerequisites=selected.prerequisites,
        bus=EventBus(_observers(cfg, session_id)),
        session_id=session_id,
        banner=banner,
        farewell=selected.farewell,
    )
    report = session.run()

    if report.log_path is None and report.error:
        typer.secho(f"error: {report.error}", fg=typer.colors.RED, err=True)

    raise typer.Exit(code=report.exit_code)


if __name__ == "__main__":
    app()
