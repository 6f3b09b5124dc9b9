# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/config/models.py

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ProfileName = Literal["beginner", "personal", "workstation"]


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")


class LoggingSettings(_Strict):
    base_dir: Path = Field(default=Path("~/fedora42-setup-logs"), validate_default=True)
    prefix: str = "fedora42-setup"
    events_file: bool = True               # write <prefix>-<session>.events.jsonl

    @field_validator("base_dir")
    @classmethod
    def _expand(cls, v: Path) -> Path:
        return v.expanduser()


class ConnectivitySettings(_Strict):
    host: str = "8.8.8.8"
    timeout_seconds: int = Field(default=2, ge=1)


class DownloadSettings(_Strict):
    timeout_seconds: int = Field(default=60, ge=1)
    retries: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=2, ge=0)


class SetupConfig(_Strict):
    profile: ProfileName = "personal"
    hostname: str = "fedora"
    dry_run: bool = False
    command_timeout_seconds: int = Field(default=3600, ge=1)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    connectivity: ConnectivitySettings = Field(default_factory=ConnectivitySettings)
    downloads: DownloadSettings = Field(default_factory=DownloadSettings)
