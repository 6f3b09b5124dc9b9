# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/profiles/registry.py

from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Dict, List, Tuple

from fedora_setup.config.models import SetupConfig
from fedora_setup.engine.steps import Step
from fedora_setup.system.toolbox import Toolbox

from . import beginner, personal, recipes, workstation

PROFILES: Dict[str, ModuleType] = {
    "beginner": beginner,
    "personal": personal,
    "workstation": workstation,
}


@dataclass(frozen=True)
class Profile:
    name: str
    title: str
    preflight: Tuple[Step, ...]
    prerequisites: Tuple[Step, ...]
    steps: Tuple[Step, ...]
    farewell: Tuple[str, ...]

    def all_steps(self) -> List[Step]:
        return [*self.preflight, *self.prerequisites, *self.steps]


def build_profile(name: str, tb: Toolbox, config: SetupConfig) -> Profile:
    """
    Assemble a profile: connectivity and prerequisite checks first, then the
    profile's own step catalog.
    """
    try:
        module = PROFILES[name]
    except KeyError:
        raise ValueError(f"unknown profile '{name}' (choose from {', '.join(PROFILES)})") from None

    return Profile(
        name=name,
        title=module.TITLE,
        preflight=(recipes.connectivity_step(tb, config),),
        prerequisites=(recipes.prerequisites_step(tb),),
        steps=tuple(module.build_steps(tb, config)),
        farewell=tuple(module.FAREWELL),
    )
