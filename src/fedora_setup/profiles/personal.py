# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/profiles/personal.py

from __future__ import annotations

from typing import List

from fedora_setup.config.models import SetupConfig
from fedora_setup.engine.steps import Step
from fedora_setup.system.toolbox import Toolbox

from . import recipes

TITLE = "Fedora 42 Post-Install Setup (with beginner-friendly GPU install)"

FAREWELL = (
    "All done! Please restart your computer to finalize the setup. Enjoy Fedora!",
)


def build_steps(tb: Toolbox, config: SetupConfig) -> List[Step]:
    return [
        recipes.repositories_step(tb),
        recipes.upgrade_step(tb),
        recipes.gpu_step(tb),
        recipes.codecs_step(tb),
        recipes.hostname_step(tb, config.hostname),
        recipes.essential_apps_step(
            tb,
            remove_firefox=True,
            required=False,
            question="Install essential applications (Zen Browser, Telegram, Discord, Kate, VLC, Ghostty)?",
        ),
        recipes.firacode_step(tb),
        recipes.zsh_oh_my_posh_step(tb),
        recipes.ghostty_config_step(tb),
        recipes.dev_tools_step(tb, full=True),
        recipes.desktop_step(tb),
        recipes.faster_boot_step(tb, question="Disable NetworkManager-wait-online.service for faster boot?"),
        recipes.firewall_step(tb),
        recipes.utilities_step(tb),
        recipes.vscode_step(tb, required=True),
        recipes.netbeans_step(tb),
        recipes.intellij_flatpak_step(tb),
        recipes.rtc_step(tb, required=False, question="Do you dual boot with Windows?"),
        recipes.cleanup_step(tb, flatpaks=True),
    ]
