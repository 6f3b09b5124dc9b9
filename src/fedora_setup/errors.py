# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/errors.py
from __future__ import annotations

from typing import Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from fedora_setup.actions.base import ActionResult


class SetupError(Exception):
    """Base class for every failure raised by fedora-setup."""


class LogSinkError(SetupError):
    """Raised when the session log cannot be created or is used while closed."""


class CommandError(SetupError):
    """Raised when an external command exits non-zero or times out."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: Optional[int],
        stderr: str = "",
        *,
        timed_out: bool = False,
    ):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out
        cmd = " ".join(self.argv)
        if timed_out:
            msg = f"command timed out: {cmd}"
        else:
            msg = f"command failed (rc={returncode}): {cmd}"
        last = stderr.strip().splitlines()[-1:] if stderr else []
        if last:
            msg = f"{msg}: {last[0]}"
        super().__init__(msg)


class ConnectivityError(SetupError):
    """No network reachability; checked once when the session starts."""


class RepositorySetupError(SetupError):
    """A package repository could not be registered."""


class PackageActionError(SetupError):
    """A package, service or file collaborator failed."""


class DownloadError(PackageActionError):
    """An HTTP download failed after all retries."""


class PrerequisiteError(SetupError):
    """A required tool is missing or the session runs with the wrong privileges."""


class InputValidationError(SetupError, ValueError):
    """
    Rejected interactive input. Only raised and handled inside the prompt
    layer; callers never see it.
    """


class FatalActionError(SetupError):
    """An action declared fatal failed; the session must stop."""

    def __init__(self, step: str, result: "ActionResult"):
        self.step = step
        self.result = result
        super().__init__(f"step '{step}' failed: {result.description}: {result.error}")
