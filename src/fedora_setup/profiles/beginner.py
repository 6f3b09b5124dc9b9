# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/profiles/beginner.py

from __future__ import annotations

from typing import List

from fedora_setup.config.models import SetupConfig
from fedora_setup.engine.steps import Step
from fedora_setup.system.toolbox import Toolbox

from . import recipes

TITLE = "Fedora 42 Universal Post-Install (Beginner Edition)"

FAREWELL = (
    "All done! Please reboot your computer to finalize driver and system setup. Enjoy Fedora!",
    "For more software, use 'dnf' or 'flatpak', or explore the Fedora Software app.",
)


def build_steps(tb: Toolbox, config: SetupConfig) -> List[Step]:
    return [
        recipes.repositories_step(tb),
        recipes.upgrade_step(tb),
        recipes.gpu_step(tb),
        recipes.codecs_step(tb),
        recipes.hostname_step(tb, config.hostname),
        recipes.firacode_step(tb, question="Install FiraCode Nerd Font (easy-reading programming font)?"),
        recipes.zsh_starship_step(tb, question="Make the terminal beginner-friendly with Zsh + Starship?"),
        recipes.dev_tools_step(tb, full=False),
        recipes.faster_boot_step(tb),
        recipes.firewall_step(tb),
        recipes.utilities_step(tb),
        recipes.vscode_step(tb),
        recipes.rtc_step(tb),
        recipes.cleanup_step(tb),
    ]
