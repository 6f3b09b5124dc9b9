from pathlib import Path
from typing import List

import pytest
import requests

from fedora_setup.errors import CommandError, DownloadError, PackageActionError
from fedora_setup.execution.runner import CommandResult
from fedora_setup.system.dnf import Dnf
from fedora_setup.system.download import Downloader
from fedora_setup.system.flatpak import FLATHUB_URL, Flatpak
from fedora_setup.system.host import Host
from fedora_setup.system.systemd import Systemd


class RecordingRunner:
    """Records argv lists and answers with canned results keyed by argv[0:2]."""

    def __init__(self, replies=None, fail_on=None, dry_run=False):
        self.calls: List[tuple] = []
        self.replies = replies or {}
        self.fail_on = fail_on
        self.dry_run = dry_run
        self.logged: List[str] = []

    def run(self, argv, *, sudo=False, check=True, **kw):
        full = (["sudo"] if sudo else []) + list(argv)
        self.calls.append((full, kw))
        if self.fail_on and self.fail_on in argv:
            raise CommandError(full, 1, "failed")
        rc, out = self.replies.get(tuple(argv[:2]), (0, ""))
        return CommandResult(argv=full, returncode=rc, stdout=out)

    def log(self, msg):
        self.logged.append(msg)

    def warn(self, msg):
        self.logged.append(msg)

    @property
    def argvs(self):
        return [c[0] for c in self.calls]


# ---------------------------------------------------------------- dnf
def test_dnf_install_and_swap_argv():
    r = RecordingRunner()
    dnf = Dnf(r)
    dnf.install(["vlc", "kate"])
    dnf.swap("ffmpeg-free", "ffmpeg", "--allowerasing")
    dnf.upgrade()
    dnf.update_group("multimedia", "--setopt=install_weak_deps=False")
    assert r.argvs == [
        ["sudo", "dnf", "install", "-y", "vlc", "kate"],
        ["sudo", "dnf", "swap", "-y", "ffmpeg-free", "ffmpeg", "--allowerasing"],
        ["sudo", "dnf", "upgrade", "--refresh", "-y"],
        ["sudo", "dnf", "update", "-y", "@multimedia", "--setopt=install_weak_deps=False"],
    ]


def test_dnf_install_nothing_is_a_no_op():
    r = RecordingRunner()
    Dnf(r).install([])
    assert r.calls == []


def test_dnf_is_installed_is_a_probe():
    r = RecordingRunner(replies={("rpm", "-q"): (1, "package zsh is not installed")})
    assert Dnf(r).is_installed("zsh") is False
    assert r.calls[0][1]["probe"] is True


def test_dnf_failure_becomes_package_action_error():
    with pytest.raises(PackageActionError):
        Dnf(RecordingRunner(fail_on="install")).install(["nope"])


def test_dnf_check_update_accepts_100():
    Dnf(RecordingRunner(replies={("dnf", "check-update"): (100, "")})).check_update()
    with pytest.raises(PackageActionError):
        Dnf(RecordingRunner(replies={("dnf", "check-update"): (1, "")})).check_update()


def test_fedora_release():
    assert Dnf(RecordingRunner(replies={("rpm", "-E"): (0, "42\n")})).fedora_release() == "42"


# ---------------------------------------------------------------- flatpak / systemd
def test_flatpak_remote_and_install():
    r = RecordingRunner(replies={("flatpak", "remotes"): (0, "fedora\nflathub\n")})
    fp = Flatpak(r)
    assert fp.has_remote("flathub")
    fp.add_remote()
    fp.install(["org.telegram.desktop"])
    assert r.argvs[1] == ["sudo", "flatpak", "remote-add", "--if-not-exists", "flathub", FLATHUB_URL]
    assert r.argvs[2] == ["sudo", "flatpak", "install", "-y", "--or-update", "flathub", "org.telegram.desktop"]


def test_systemd_calls():
    r = RecordingRunner(replies={("systemctl", "is-enabled"): (1, "disabled\n")})
    sd = Systemd(r)
    assert sd.is_enabled("firewalld") == "disabled"
    sd.enable("firewalld")
    sd.mask("systemd-rfkill.service", "systemd-rfkill.socket")
    assert r.argvs[1:] == [
        ["sudo", "systemctl", "enable", "--now", "firewalld"],
        ["sudo", "systemctl", "mask", "systemd-rfkill.service", "systemd-rfkill.socket"],
    ]


def test_systemd_unknown_state():
    assert Systemd(RecordingRunner()).is_enabled("ghost") == "unknown"


# ---------------------------------------------------------------- host
def test_host_shell_and_hostname_argv():
    r = RecordingRunner()
    host = Host(r, user="me")
    host.set_default_shell("/usr/bin/zsh")
    host.set_hostname("fedora")
    host.set_local_rtc(False)
    assert r.argvs == [
        ["sudo", "chsh", "-s", "/usr/bin/zsh", "me"],
        ["sudo", "hostnamectl", "set-hostname", "fedora"],
        ["sudo", "timedatectl", "set-local-rtc", "0", "--adjust-system-clock"],
    ]


@pytest.mark.parametrize(
    "lspci, expected",
    [
        ("01:00.0 VGA compatible controller: NVIDIA Corporation AD102 [GeForce RTX 4090]", True),
        ("01:00.0 VGA compatible controller: NVIDIA Corporation TU106 [GeForce RTX 2070]", False),
        ("00:02.0 VGA compatible controller: Intel Corporation Device", False),
    ],
)
def test_detect_nvidia_open_kmod(lspci, expected):
    r = RecordingRunner(replies={("lspci", "-nnk"): (0, lspci)})
    assert Host(r, user="me").detect_nvidia_open_kmod() is expected


def test_root_file_goes_through_sudo_tee():
    r = RecordingRunner()
    Host(r, user="me").write_root_file("/etc/yum.repos.d/x.repo", "[x]\n")
    argv, kw = r.calls[0]
    assert argv == ["sudo", "tee", "/etc/yum.repos.d/x.repo"]
    assert kw["input_text"] == "[x]\n"


def test_write_file_with_backup(tmp_path: Path):
    rc = tmp_path / ".zshrc"
    rc.write_text("old\n")
    Host(RecordingRunner(), user="me").write_file(rc, "new\n", backup=True)
    assert rc.read_text() == "new\n"
    backups = list(tmp_path.glob(".zshrc.backup-*"))
    assert len(backups) == 1 and backups[0].read_text() == "old\n"


def test_user_files_untouched_in_dry_run(tmp_path: Path):
    host = Host(RecordingRunner(dry_run=True), user="me")
    host.write_file(tmp_path / "a", "x")
    host.append_line(tmp_path / "b", "y")
    assert list(tmp_path.iterdir()) == []


def test_append_line(tmp_path: Path):
    host = Host(RecordingRunner(), user="me")
    f = tmp_path / "rc"
    host.append_line(f, "one")
    host.append_line(f, "two\n")
    assert f.read_text() == "one\ntwo\n"


# ---------------------------------------------------------------- downloads
class FakeResponse:
    def __init__(self, chunks=(b"abc",), status=200, payload=None):
        self.chunks = chunks
        self.status = status
        self.payload = payload
        self.text = b"".join(chunks).decode()

    def raise_for_status(self):
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status}")

    def iter_content(self, chunk_size=1):
        return iter(self.chunks)

    def json(self):
        return self.payload

    def __enter__(self):
        return self

    def __exit__(self, *a):
        return False


def test_fetch_streams_to_destination_with_timeout(monkeypatch, tmp_path: Path):
    seen = []

    def fake_get(url, **kw):
        seen.append(kw)
        return FakeResponse((b"PK", b"\x03\x04"))

    monkeypatch.setattr(requests, "get", fake_get)
    dest = tmp_path / "fonts" / "FiraCode.zip"
    Downloader(RecordingRunner(), timeout=7).fetch("https://example.test/f.zip", dest)

    assert dest.read_bytes() == b"PK\x03\x04"
    assert not dest.with_name("FiraCode.zip.part").exists()
    assert seen[0]["timeout"] == 7


def test_fetch_retries_then_raises_download_error(monkeypatch, tmp_path: Path):
    attempts = []

    def fake_get(url, **kw):
        attempts.append(url)
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(requests, "get", fake_get)
    with pytest.raises(DownloadError):
        Downloader(RecordingRunner(), retries=3, retry_delay=0).fetch("https://x.test/a", tmp_path / "a")
    assert len(attempts) == 3


def test_fetch_leaves_no_partial_file_when_retries_run_out(monkeypatch, tmp_path: Path):
    def broken_stream(chunk_size=1):
        yield b"half"
        raise requests.ConnectionError("reset")

    def fake_get(url, **kw):
        r = FakeResponse()
        r.iter_content = broken_stream
        return r

    monkeypatch.setattr(requests, "get", fake_get)
    dest = tmp_path / "fonts" / "FiraCode.zip"
    with pytest.raises(DownloadError):
        Downloader(RecordingRunner(), retries=2, retry_delay=0).fetch("https://x.test/f.zip", dest)
    assert not dest.exists()
    assert list(dest.parent.iterdir()) == []


def test_fetch_recovers_after_transient_error(monkeypatch, tmp_path: Path):
    replies = [requests.ConnectionError("blip"), FakeResponse((b"ok",))]

    def fake_get(url, **kw):
        r = replies.pop(0)
        if isinstance(r, Exception):
            raise r
        return r

    monkeypatch.setattr(requests, "get", fake_get)
    Downloader(RecordingRunner(), retries=2, retry_delay=0).fetch("https://x.test/a", tmp_path / "a")
    assert (tmp_path / "a").read_bytes() == b"ok"


def test_latest_release_asset(monkeypatch):
    payload = {
        "assets": [
            {"name": "posh-darwin-arm64", "browser_download_url": "https://dl/darwin"},
            {"name": "posh-linux-amd64", "browser_download_url": "https://dl/linux"},
        ]
    }
    monkeypatch.setattr(requests, "get", lambda url, **kw: FakeResponse(payload=payload))
    d = Downloader(RecordingRunner(), retry_delay=0)
    assert d.latest_release_asset("JanDeDobbeleer/oh-my-posh", "posh-linux-amd64") == "https://dl/linux"
    with pytest.raises(DownloadError):
        d.latest_release_asset("JanDeDobbeleer/oh-my-posh", "windows")


def test_dry_run_download_does_not_touch_network(monkeypatch, tmp_path: Path):
    def boom(*a, **kw):
        raise AssertionError("network used in dry run")

    monkeypatch.setattr(requests, "get", boom)
    runner = RecordingRunner(dry_run=True)
    Downloader(runner).fetch("https://x.test/a", tmp_path / "a")
    assert not (tmp_path / "a").exists()
    assert runner.logged == [f"download https://x.test/a -> {tmp_path / 'a'}"]
