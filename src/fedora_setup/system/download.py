# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/system/download.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import requests

from fedora_setup.errors import DownloadError
from fedora_setup.execution.runner import CommandRunner
from fedora_setup.utils.retry import retry

log = logging.getLogger("fedora_setup")

GITHUB_API = "https://api.github.com"
CHUNK_SIZE = 1 << 16


def _on_retry(attempt: int, exc: Exception) -> None:
    log.debug("download attempt %d failed: %s", attempt, exc)


@dataclass
class Downloader:
    """
    HTTP fetches with a bounded timeout and a small retry budget.

    Every request carries ``timeout``; the session itself has none.
    """

    runner: CommandRunner
    timeout: float = 60
    retries: int = 3
    retry_delay: float = 2

    @property
    def dry_run(self) -> bool:
        return self.runner.dry_run

    def fetch(self, url: str, dest: Path) -> Path:
        self.runner.log(f"download {url} -> {dest}")
        if self.dry_run:
            return dest
        try:
            self._fetch(url, dest)
        except requests.RequestException as e:
            raise DownloadError(f"download of {url} failed: {e}") from e
        return dest

    def latest_release_asset(self, repo: str, needle: str) -> str:
        """Return the download URL of the newest release asset whose name contains ``needle``."""
        url = f"{GITHUB_API}/repos/{repo}/releases/latest"
        if self.dry_run:
            return f"https://github.com/{repo}/releases/latest/download/{needle}"
        try:
            data = self._get(url).json()
        except (requests.RequestException, ValueError) as e:
            raise DownloadError(f"cannot query {url}: {e}") from e
        for asset in data.get("assets", []):
            if needle in asset.get("name", ""):
                return asset["browser_download_url"]
        raise DownloadError(f"no release asset matching '{needle}' in {repo}")

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------
    @retry(
        attempts=lambda self: self.retries,
        delay=lambda self: self.retry_delay,
        retry_on=(requests.RequestException,),
        on_retry=_on_retry,
    )
    def _get(self, url: str) -> requests.Response:
        resp = requests.get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp

    @retry(
        attempts=lambda self: self.retries,
        delay=lambda self: self.retry_delay,
        retry_on=(requests.RequestException,),
        on_retry=_on_retry,
    )
    def _fetch(self, url: str, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        tmp = dest.with_name(dest.name + ".part")
        try:
            with requests.get(url, stream=True, timeout=self.timeout) as resp:
                resp.raise_for_status()
                with tmp.open("wb") as f:
                    for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
        tmp.replace(dest)
