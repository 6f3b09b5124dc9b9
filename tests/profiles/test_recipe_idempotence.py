import subprocess
import zipfile
from pathlib import Path

import pytest

from conftest import ScriptedInput
from fedora_setup.actions.base import Outcome
from fedora_setup.config.models import SetupConfig
from fedora_setup.engine.executor import StepExecutor
from fedora_setup.profiles import recipes
from fedora_setup.prompt.prompter import Prompter
from fedora_setup.system.download import Downloader
from fedora_setup.system.host import Host
from fedora_setup.system.toolbox import build_toolbox


class DummyCP:
    def __init__(self, rc=0, out="", err=""):
        self.returncode = rc
        self.stdout = out
        self.stderr = err


class FakeFedora:
    """Just enough of a Fedora box for the guarded recipe steps to converge on."""

    def __init__(self, home: Path):
        self.home = home
        self.hostname = "localhost-live"
        self.shell = "/bin/bash"
        self.packages = set()
        self.commands = set()
        self.mutations = []

    def run(self, argv, input=None, **kw):
        if argv[:2] == ["rpm", "-q"]:
            return DummyCP(0 if argv[2] in self.packages else 1)
        self.mutations.append(list(argv))
        cmd = argv[1:] if argv[0] == "sudo" else argv

        if cmd[:3] == ["dnf", "install", "-y"]:
            self.packages.update(p for p in cmd[3:] if not p.startswith("-"))
        elif cmd[:2] == ["hostnamectl", "set-hostname"]:
            self.hostname = cmd[2]
        elif cmd[:2] == ["chsh", "-s"]:
            self.shell = cmd[2]
        elif cmd[0] == "tee":
            path = Path(cmd[1])
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(input, encoding="utf-8")
        elif cmd[0] == "sh" and cmd[1].endswith("starship-install.sh"):
            self.commands.add("starship")
        elif cmd[0] == "sh" and cmd[1].endswith("ohmyzsh-install.sh"):
            (self.home / ".oh-my-zsh").mkdir(parents=True)
        elif cmd[:2] == ["starship", "preset"]:
            out = Path(cmd[-1])
            out.parent.mkdir(parents=True, exist_ok=True)
            out.write_text("# preset\n")
        return DummyCP(0)

    def fetch(self, url, dest):
        dest.parent.mkdir(parents=True, exist_ok=True)
        if dest.suffix == ".zip":
            with zipfile.ZipFile(dest, "w") as zf:
                zf.writestr("FiraCodeNerdFont-Regular.ttf", b"font")
        else:
            dest.write_text("#!/bin/sh\n")
        return dest


@pytest.fixture
def fedora(monkeypatch, tmp_path):
    box = FakeFedora(tmp_path / "home")
    box.home.mkdir()
    monkeypatch.setattr(subprocess, "run", box.run)
    monkeypatch.setattr(Host, "hostname", lambda self: box.hostname)
    monkeypatch.setattr(Host, "default_shell", lambda self: box.shell)
    monkeypatch.setattr(Host, "which", staticmethod(lambda cmd: f"/usr/bin/{cmd}" if cmd in box.commands else None))
    monkeypatch.setattr(Downloader, "fetch", box.fetch)
    monkeypatch.setattr(
        Downloader, "latest_release_asset", lambda self, repo, needle: f"https://example.test/{needle}"
    )
    monkeypatch.setattr(recipes, "VSCODE_REPO_PATH", tmp_path / "etc" / "vscode.repo")
    return box


@pytest.fixture
def executor(sink):
    return StepExecutor(sink, Prompter(sink, read_line=ScriptedInput([])))


def _toolbox(sink, box):
    return build_toolbox(SetupConfig(), sink, home=box.home, user="me")


STEPS = {
    "hostname": lambda tb: recipes.hostname_step(tb, "fedora"),
    "firacode": recipes.firacode_step,
    "zsh-starship": recipes.zsh_starship_step,
    "zsh-oh-my-posh": recipes.zsh_oh_my_posh_step,
    "vscode": recipes.vscode_step,
}

# actions that have no guard and are safe to repeat
UNGUARDED = {"Rebuild font cache", "Refresh package metadata"}
UNGUARDED_COMMANDS = {("fc-cache", "-f"), ("sudo", "dnf", "check-update")}


@pytest.mark.parametrize("name", sorted(STEPS))
def test_second_pass_of_a_recipe_step_mutates_nothing(fedora, sink, executor, name):
    tb = _toolbox(sink, fedora)

    first = executor.execute(STEPS[name](tb))
    assert first.status == "ok", [r.error for r in first.warnings]
    assert fedora.mutations

    fedora.mutations.clear()
    second = executor.execute(STEPS[name](tb))

    assert second.status == "ok"
    for r in second.results:
        if r.description not in UNGUARDED:
            assert r.outcome is Outcome.SKIPPED, r.description
    assert {tuple(m) for m in fedora.mutations} <= UNGUARDED_COMMANDS
    assert not list(fedora.home.glob(".*.backup-*"))


def test_oh_my_posh_zshrc_is_written_once_with_path_export(fedora, sink, executor):
    tb = _toolbox(sink, fedora)
    zshrc = fedora.home / ".zshrc"
    zshrc.write_text("# distro default\n")

    executor.execute(recipes.zsh_oh_my_posh_step(tb))
    executor.execute(recipes.zsh_oh_my_posh_step(tb))

    assert zshrc.read_text() == recipes.OH_MY_ZSHRC
    assert "export PATH=$HOME/.local/bin:$PATH" in zshrc.read_text().splitlines()
    backups = list(fedora.home.glob(".zshrc.backup-*"))
    assert len(backups) == 1
    assert backups[0].read_text() == "# distro default\n"
