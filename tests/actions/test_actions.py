from types import SimpleNamespace

import pytest

from conftest import messages
from fedora_setup.actions import library as lib
from fedora_setup.actions.base import (
    CallableAction,
    CommandAction,
    Fallibility,
    Outcome,
)
from fedora_setup.errors import (
    PackageActionError,
    RepositorySetupError,
)
from fedora_setup.execution.runner import CommandResult
from fedora_setup.guard.guard import IdempotencyCheck
from fedora_setup.logging.log import Severity


def _fail(exc):
    def fn():
        raise exc
    return fn


class FakeRunner:
    def __init__(self, rc=0, stdout="", dry_run=False):
        self.rc = rc
        self.stdout = stdout
        self.dry_run = dry_run
        self.calls = []
        self.logged = []
        self.warned = []

    def run(self, argv, **kw):
        self.calls.append((list(argv), kw))
        return CommandResult(argv=list(argv), returncode=self.rc, stdout=self.stdout)

    def log(self, msg):
        self.logged.append(msg)

    def warn(self, msg):
        self.warned.append(msg)


def test_best_effort_failure_is_one_warn(sink):
    result = CallableAction("Install vlc", _fail(PackageActionError("boom"))).run(sink)
    assert result.outcome is Outcome.FAILED
    assert not result.fatal
    assert messages(sink, Severity.WARN) == ["Install vlc failed: boom"]
    assert messages(sink, Severity.ERROR) == []


def test_fatal_failure_is_an_error_entry(sink):
    action = CallableAction("Upgrade", _fail(PackageActionError("dnf")), fallibility=Fallibility.FATAL)
    result = action.run(sink)
    assert result.fatal
    assert messages(sink, Severity.ERROR) == ["Upgrade failed: dnf"]


def test_fallibility_is_declared_not_inferred(sink):
    # a "fatal-sounding" error on a best-effort action stays best-effort
    result = CallableAction("x", _fail(RepositorySetupError("r"))).run(sink)
    assert result.failed and not result.fatal


def test_satisfied_check_skips_the_mutation(sink):
    called = []
    action = CallableAction(
        "Set thing", lambda: called.append(1), check=IdempotencyCheck("Thing already set", lambda: True)
    )
    assert action.run(sink).outcome is Outcome.SKIPPED
    assert called == []


def test_command_action_rewraps_errors(sink):
    class Boom:
        dry_run = False

        def run(self, argv, **kw):
            raise OSError("exec failed")

    result = CommandAction("Run", Boom(), ["true"], error=PackageActionError).run(sink)
    assert result.failed
    assert "exec failed" in result.error


def test_connectivity_check_is_fatal(sink):
    tb = SimpleNamespace(runner=FakeRunner(rc=1))
    action = lib.connectivity_check(tb, "192.0.2.1", 2)
    assert action.fallibility is Fallibility.FATAL
    result = action.run(sink)
    assert result.fatal
    assert tb.runner.calls[0][0] == ["ping", "-c1", "-W2", "192.0.2.1"]
    assert tb.runner.calls[0][1]["probe"] is True


def test_connectivity_check_succeeds(sink):
    tb = SimpleNamespace(runner=FakeRunner(rc=0))
    assert lib.connectivity_check(tb).run(sink).outcome is Outcome.SUCCEEDED
    assert tb.runner.logged == ["Internet OK."]


def _prereq_tb(root=False, missing=(), dry_run=False):
    host = SimpleNamespace(
        is_root=lambda: root,
        which=lambda t: None if t in missing else f"/usr/bin/{t}",
    )
    return SimpleNamespace(host=host, runner=FakeRunner(dry_run=dry_run))


def test_prerequisites_reject_root(sink):
    result = lib.prerequisites_check(_prereq_tb(root=True)).run(sink)
    assert result.fatal
    assert "regular user" in result.error


def test_prerequisites_missing_tool(sink):
    result = lib.prerequisites_check(_prereq_tb(missing=("flatpak",))).run(sink)
    assert result.fatal
    assert "flatpak" in result.error


def test_prerequisites_missing_tool_only_warns_in_dry_run(sink):
    tb = _prereq_tb(missing=("flatpak",), dry_run=True)
    result = lib.prerequisites_check(tb).run(sink)
    assert result.outcome is Outcome.SUCCEEDED
    assert tb.runner.warned and "flatpak" in tb.runner.warned[0]


class FakeDnf:
    def __init__(self, installed=(), release="42", fail=None):
        self.installed = set(installed)
        self.release = release
        self.fail = fail
        self.calls = []

    def is_installed(self, p):
        return p in self.installed

    def fedora_release(self):
        return self.release

    def install_urls(self, urls):
        self.calls.append(("install_urls", list(urls)))
        if self.fail:
            raise self.fail

    def install(self, packages, *extra):
        self.calls.append(("install", list(packages), extra))
        if self.fail:
            raise self.fail


def test_rpmfusion_urls_use_the_running_release(sink):
    dnf = FakeDnf(release="42")
    result = lib.enable_rpmfusion(SimpleNamespace(dnf=dnf)).run(sink)
    assert result.outcome is Outcome.SUCCEEDED
    (_, urls), = dnf.calls
    assert urls == [
        "https://download1.rpmfusion.org/free/fedora/rpmfusion-free-release-42.noarch.rpm",
        "https://download1.rpmfusion.org/nonfree/fedora/rpmfusion-nonfree-release-42.noarch.rpm",
    ]


def test_rpmfusion_is_guarded(sink):
    dnf = FakeDnf(installed=lib.RPMFUSION_PACKAGES)
    assert lib.enable_rpmfusion(SimpleNamespace(dnf=dnf)).run(sink).outcome is Outcome.SKIPPED
    assert dnf.calls == []


def test_rpmfusion_failure_is_fatal(sink):
    dnf = FakeDnf(fail=PackageActionError("404"))
    result = lib.enable_rpmfusion(SimpleNamespace(dnf=dnf)).run(sink)
    assert result.fatal
    assert result.fallibility is Fallibility.FATAL


def test_install_packages_guards_plain_names_only(sink):
    dnf = FakeDnf(installed={"zsh"})
    tb = SimpleNamespace(dnf=dnf)
    assert lib.install_packages(tb, ["zsh"]).run(sink).outcome is Outcome.SKIPPED
    assert lib.install_packages(tb, ["lame*"]).run(sink).outcome is Outcome.SUCCEEDED
    assert dnf.calls == [("install", ["lame*"], ())]


@pytest.mark.parametrize(
    "factory",
    [lib.connectivity_check, lib.prerequisites_check, lib.enable_rpmfusion, lib.enable_flathub, lib.system_upgrade],
)
def test_foundational_actions_are_fatal(factory):
    tb = SimpleNamespace(runner=FakeRunner(), dnf=FakeDnf(), flatpak=None, host=None)
    assert factory(tb).fallibility is Fallibility.FATAL


def test_ordinary_actions_are_best_effort():
    tb = SimpleNamespace(dnf=FakeDnf(), host=None, systemd=None)
    assert lib.install_packages(tb, ["vlc"]).fallibility is Fallibility.BEST_EFFORT
    assert lib.set_hostname(tb, "fedora").fallibility is Fallibility.BEST_EFFORT
    assert lib.enable_service(tb, "firewalld").fallibility is Fallibility.BEST_EFFORT

