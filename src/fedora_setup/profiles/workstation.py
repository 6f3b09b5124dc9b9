# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/profiles/workstation.py

from __future__ import annotations

from typing import List

from fedora_setup.config.models import SetupConfig
from fedora_setup.engine.steps import Step
from fedora_setup.system.toolbox import Toolbox

from . import recipes

TITLE = "Fedora 42 Workstation & KDE Post-Install Setup"

FAREWELL = (
    "Fedora 42 Workstation & KDE Post-Install Setup Complete!",
    "Please reboot your system to apply all changes.",
    "For advanced TLP configuration, use your separate TLP setup.",
)


def build_steps(tb: Toolbox, config: SetupConfig) -> List[Step]:
    return [
        recipes.repositories_step(tb),
        recipes.upgrade_step(tb),
        recipes.workstation_gpu_step(tb),
        recipes.hostname_step(tb, config.hostname),
        recipes.tlp_step(tb),
        recipes.essential_apps_step(tb),
        recipes.firacode_step(tb, required=True),
        recipes.zsh_starship_step(tb, required=True),
        recipes.dev_tools_step(tb, full=True, required=True),
        recipes.kde_workspaces_step(tb),
        recipes.desktop_step(tb, themes=True),
        recipes.faster_boot_step(tb, required=True),
        recipes.firewall_step(tb),
        recipes.utilities_step(tb),
        recipes.vscode_step(tb, required=True),
        recipes.intellij_tarball_step(tb),
        recipes.rtc_step(tb),
        recipes.cleanup_step(tb, flatpaks=False, orphans=True),
    ]
