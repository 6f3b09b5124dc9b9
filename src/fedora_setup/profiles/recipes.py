# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/fedora_setup/profiles/recipes.py
"""
Step builders shared by the profiles.

Each builder returns a ``Step`` whose body runs actions from
``fedora_setup.actions.library`` through the step context. Builders only
close over the toolbox; nothing is probed or changed until the step runs.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from fedora_setup.actions import library as lib
from fedora_setup.config.models import SetupConfig
from fedora_setup.engine.steps import ChoiceOption, Step, StepContext, loop_step
from fedora_setup.guard import predicates
from fedora_setup.system.toolbox import Toolbox

ZSH = "/usr/bin/zsh"

FIRACODE_URL = "https://github.com/ryanoasis/nerd-fonts/releases/latest/download/FiraCode.zip"
STARSHIP_INSTALLER = "https://starship.rs/install.sh"
OH_MY_ZSH_INSTALLER = "https://raw.githubusercontent.com/ohmyzsh/ohmyzsh/master/tools/install.sh"
OH_MY_POSH_REPO = "JanDeDobbeleer/oh-my-posh"
OH_MY_POSH_THEME_URL = "https://raw.githubusercontent.com/JanDeDobbeleer/oh-my-posh/main/themes/atomic.omp.json"
MICROSOFT_KEY = "https://packages.microsoft.com/keys/microsoft.asc"
VSCODE_REPO_PATH = Path("/etc/yum.repos.d/vscode.repo")
TLP_RELEASE_URL = "https://repo.linrunner.de/fedora/tlp/repos/releases/tlp-release.fc{release}.noarch.rpm"
INTELLIJ_URL = "https://download.jetbrains.com/idea/ideaIC.tar.gz"
INTELLIJ_DIR = Path("/opt/intellij-idea-community")
ORCHIS_REPO = "https://github.com/vinceliuice/Orchis-kde.git"
TELA_REPO = "https://github.com/vinceliuice/Tela-icon-theme.git"

VSCODE_REPO = """\
[code]
name=Visual Studio Code
baseurl=https://packages.microsoft.com/yumrepos/vscode
enabled=1
autorefresh=1
type=rpm-md
gpgcheck=1
gpgkey=https://packages.microsoft.com/keys/microsoft.asc
"""

GHOSTTY_CONFIG = """\
font-family = FiraCode Nerd Font
font-size = 14
background-opacity = 0.9
theme = Everforest Dark - Hard
"""

OH_MY_ZSHRC = """\
export PATH=$HOME/.local/bin:$PATH

# Path to Oh My Zsh installation
export ZSH="$HOME/.oh-my-zsh"

# Theme disabled, Oh My Posh draws the prompt
ZSH_THEME=""

plugins=(
    git
    zsh-autosuggestions
    zsh-syntax-highlighting
    fast-syntax-highlighting
    zsh-autocomplete
)

source $ZSH/oh-my-zsh.sh

eval "$(oh-my-posh init zsh --config ~/.poshthemes/atomic.omp.json)"
"""

INTELLIJ_DESKTOP_ENTRY = f"""\
[Desktop Entry]
Version=1.0
Type=Application
Name=IntelliJ IDEA Community Edition
Icon={INTELLIJ_DIR}/bin/idea.png
Exec={INTELLIJ_DIR}/bin/idea.sh %f
Comment=Integrated Development Environment
Categories=Development;IDE;
Terminal=false
StartupWMClass=jetbrains-idea
"""

MESA_PACKAGES = ("mesa-dri-drivers", "mesa-vulkan-drivers", "vulkan-loader", "mesa-libGLU")
NVIDIA_PACKAGES = ("akmod-nvidia", "xorg-x11-drv-nvidia-cuda", "nvidia-vaapi-driver")
FREEWORLD_PACKAGES = ("mesa-va-drivers-freeworld", "mesa-vdpau-drivers-freeworld")
NVIDIA_KMOD_MACROS = Path("/etc/rpm/macros.nvidia-kmod")
UTILITY_PACKAGES = (
    "curl", "cabextract", "xorg-x11-font-utils", "fontconfig", "p7zip", "p7zip-plugins", "unrar",
)
BASIC_DEV_PACKAGES = ("gcc", "clang", "cmake", "git-all", "python3-pip")
FULL_DEV_PACKAGES = BASIC_DEV_PACKAGES + ("java-21-openjdk-devel", "nodejs", "podman", "docker")
DEV_GROUPS = ("development-tools", "c-development")


# ----------------------------------------------------------------------
# Foundations
# ----------------------------------------------------------------------
def connectivity_step(tb: Toolbox, config: SetupConfig) -> Step:
    conn = config.connectivity
    return Step(
        name="connectivity",
        label="Checking internet connectivity",
        body=lambda ctx: ctx.run(lib.connectivity_check(tb, conn.host, conn.timeout_seconds)),
    )


def prerequisites_step(tb: Toolbox) -> Step:
    return Step(
        name="prerequisites",
        label="Checking prerequisites",
        body=lambda ctx: ctx.run(lib.prerequisites_check(tb)),
    )


def repositories_step(tb: Toolbox) -> Step:
    def body(ctx: StepContext) -> None:
        ctx.run(lib.enable_rpmfusion(tb))
        ctx.run(lib.enable_flathub(tb))

    return Step(name="repositories", label="Enabling RPM Fusion & Flathub repositories", body=body)


def upgrade_step(tb: Toolbox) -> Step:
    return Step(
        name="upgrade",
        label="System upgrade",
        body=lambda ctx: ctx.run(lib.system_upgrade(tb)),
    )


# ----------------------------------------------------------------------
# Graphics
# ----------------------------------------------------------------------
def _nvidia_kmod_flavour(tb: Toolbox):
    def configure() -> None:
        if tb.host.detect_nvidia_open_kmod():
            tb.host.write_root_file(NVIDIA_KMOD_MACROS, "%_with_kmod_nvidia_open 1\n")
            tb.runner.warn("RTX 4000/5000 series detected, enabling the open kernel module.")
        else:
            tb.host.remove_root_file(NVIDIA_KMOD_MACROS)

    return lib.action("Select NVIDIA kernel module flavour", configure)


def install_nvidia(tb: Toolbox, ctx: StepContext) -> None:
    ctx.run(_nvidia_kmod_flavour(tb))
    ctx.run(lib.install_packages(tb, NVIDIA_PACKAGES))
    ctx.run(lib.run_command(tb, "Build NVIDIA kernel modules", ["akmods", "--force"], sudo=True))
    ctx.run(lib.run_command(tb, "Regenerate initramfs", ["dracut", "--force"], sudo=True))
    ctx.run(lib.enable_service(tb, "nvidia-persistenced.service"))
    ctx.run(lib.install_packages(tb, ["libva-nvidia-driver"]))
    ctx.info("NVIDIA drivers installed. Please reboot for changes.")


def install_amd(tb: Toolbox, ctx: StepContext) -> None:
    ctx.run(lib.install_packages(tb, MESA_PACKAGES))
    ctx.run(lib.swap_packages(tb, "mesa-va-drivers", "mesa-va-drivers-freeworld"))
    ctx.run(lib.swap_packages(tb, "mesa-vdpau-drivers", "mesa-vdpau-drivers-freeworld"))
    ctx.info("AMD GPU drivers installed.")


def install_intel(tb: Toolbox, ctx: StepContext) -> None:
    ctx.run(lib.install_packages(tb, MESA_PACKAGES))
    ctx.run(lib.install_packages(tb, ["intel-media-driver"]))
    ctx.run(lib.install_packages(tb, ["intel-vaapi-driver"]))
    ctx.info("Intel GPU drivers installed.")


def gpu_step(tb: Toolbox) -> Step:
    """Vendor loop: one driver set per pick until Skip or no more GPUs."""
    return loop_step(
        "gpu",
        "GPU drivers installation",
        "Select your GPU brand:",
        [
            ChoiceOption(
                "NVIDIA",
                lambda ctx: install_nvidia(tb, ctx),
                question="Proceed with NVIDIA driver installation?",
                notice="NVIDIA driver installation may take time while kernel modules build.",
                skip_message="Skipped NVIDIA driver installation.",
            ),
            ChoiceOption(
                "AMD",
                lambda ctx: install_amd(tb, ctx),
                question="Proceed with AMD driver installation?",
                notice="AMD drivers include Mesa and multimedia acceleration.",
                skip_message="Skipped AMD driver installation.",
            ),
            ChoiceOption(
                "Intel",
                lambda ctx: install_intel(tb, ctx),
                question="Proceed with Intel driver installation?",
                notice="Installs Intel drivers for both new and old generations.",
                skip_message="Skipped Intel driver installation.",
            ),
            ChoiceOption("None / Skip", skip_message="Skipping GPU driver installation as requested."),
        ],
        again_question="Would you like to install drivers for another GPU (useful for hybrid setups)?",
        intro=(
            "Select your GPU brand to install the best drivers.",
            "You may pick more than one if you have multiple GPUs (e.g. Intel + NVIDIA).",
        ),
    )


def _install_mesa_stack(tb: Toolbox, ctx: StepContext) -> None:
    ctx.run(lib.install_packages(tb, MESA_PACKAGES))
    ctx.run(lib.install_packages(tb, FREEWORLD_PACKAGES))
    ctx.run(lib.install_packages(tb, ["intel-media-driver"]))


def _install_nvidia_stack(tb: Toolbox, ctx: StepContext) -> None:
    ctx.run(lib.install_packages(tb, NVIDIA_PACKAGES[:2]))
    ctx.run(lib.install_packages(tb, NVIDIA_PACKAGES[2:]))


def _install_hybrid(tb: Toolbox, ctx: StepContext) -> None:
    _install_mesa_stack(tb, ctx)
    _install_nvidia_stack(tb, ctx)
    ctx.info("For hybrid GPU switching, consider prime-select or a GNOME extension.")


def workstation_gpu_step(tb: Toolbox) -> Step:
    return loop_step(
        "gpu",
        "GPU drivers installation",
        "Select your GPU setup:",
        [
            ChoiceOption("Intel/AMD only", lambda ctx: _install_mesa_stack(tb, ctx)),
            ChoiceOption("NVIDIA only", lambda ctx: _install_nvidia_stack(tb, ctx)),
            ChoiceOption("Hybrid Intel/AMD + NVIDIA (Optimus)", lambda ctx: _install_hybrid(tb, ctx)),
            ChoiceOption("Skip", skip_message="Skipping GPU driver installation as requested."),
        ],
        again_question="Install drivers for another GPU setup?",
    )


# ----------------------------------------------------------------------
# Multimedia & apps
# ----------------------------------------------------------------------
def codecs_step(tb: Toolbox) -> Step:
    def body(ctx: StepContext) -> None:
        ctx.run(lib.swap_packages(tb, "ffmpeg-free", "ffmpeg", "--allowerasing"))
        ctx.run(
            lib.install_packages(
                tb,
                [
                    "gstreamer1-plugins-bad-*",
                    "gstreamer1-plugins-good-*",
                    "gstreamer1-plugins-base",
                    "gstreamer1-plugin-openh264",
                    "gstreamer1-libav",
                    "lame*",
                ],
                "--exclude=gstreamer1-plugins-bad-free-devel",
                description="Install GStreamer plugins",
            )
        )
        ctx.run(lib.group_install(tb, ["sound-and-video"]))
        ctx.run(
            lib.update_group(
                tb, "multimedia", "--setopt=install_weak_deps=False", "--exclude=PackageKit-gstreamer-plugin"
            )
        )
        ctx.info("Multimedia codecs installed.")

    return Step(name="codecs", label="Installing multimedia codecs", body=body)


def hostname_step(tb: Toolbox, name: str) -> Step:
    return Step(
        name="hostname",
        label=f"Setting hostname to '{name}'",
        body=lambda ctx: ctx.run(lib.set_hostname(tb, name)),
    )


def essential_apps_step(
    tb: Toolbox,
    *,
    remove_firefox: bool = False,
    required: bool = True,
    question: Optional[str] = None,
) -> Step:
    def body(ctx: StepContext) -> None:
        ctx.run(lib.install_flatpaks(tb, ["app.zen_browser.zen", "org.telegram.desktop"]))
        if remove_firefox:
            ctx.run(lib.remove_packages(tb, ["firefox"]))
        ctx.run(lib.install_packages(tb, ["discord", "kate", "vlc"]))
        ctx.run(lib.enable_copr(tb, "scottames/ghostty"))
        ctx.run(lib.install_packages(tb, ["ghostty"]))

    return Step(
        name="essential-apps",
        label="Installing essential applications",
        body=body,
        required=required,
        question=question,
    )


def firacode_step(tb: Toolbox, *, required: bool = False, question: Optional[str] = None) -> Step:
    fonts = tb.home / ".local/share/fonts"
    archive = fonts / "FiraCode.zip"
    target = fonts / "FiraCode"

    def body(ctx: StepContext) -> None:
        ctx.run(lib.install_packages(tb, ["unzip"]))
        ctx.run(lib.download_file(tb, FIRACODE_URL, archive))
        ctx.run(
            lib.action(
                "Extract FiraCode Nerd Font",
                lambda: tb.host.extract_zip(archive, target),
                check=predicates.path_exists(target, "FiraCode Nerd Font"),
            )
        )
        ctx.run(lib.run_command(tb, "Rebuild font cache", ["fc-cache", "-f"]))

    return Step(
        name="firacode",
        label="Installing FiraCode Nerd Font",
        body=body,
        required=required,
        question=question or "Install FiraCode Nerd Font (programming-friendly font)?",
    )


# ----------------------------------------------------------------------
# Shell & terminal
# ----------------------------------------------------------------------
def _run_installer(tb: Toolbox, url: str, name: str, *args: str) -> None:
    script = tb.home / ".cache/fedora-setup" / name
    tb.downloader.fetch(url, script)
    tb.runner.run(["sh", str(script), *args])


def zsh_starship_step(tb: Toolbox, *, required: bool = False, question: Optional[str] = None) -> Step:
    zshrc = tb.home / ".zshrc"
    starship_toml = tb.home / ".config/starship.toml"

    def body(ctx: StepContext) -> None:
        ctx.run(lib.install_packages(tb, ["zsh"]))
        ctx.run(lib.set_default_shell(tb, ZSH))
        ctx.run(
            lib.action(
                "Install Starship prompt",
                lambda: _run_installer(tb, STARSHIP_INSTALLER, "starship-install.sh", "-y"),
                check=predicates.command_available(tb.host, "starship"),
            )
        )
        ctx.run(
            lib.run_command(
                tb,
                "Apply Gruvbox Rainbow preset",
                ["starship", "preset", "gruvbox-rainbow", "-o", str(starship_toml)],
                check=predicates.path_exists(starship_toml),
            )
        )
        ctx.run(lib.append_line(tb, zshrc, 'eval "$(starship init zsh)"', needle="starship init zsh"))
        ctx.info("Next time you open a terminal, you'll see a colorful prompt!")

    return Step(
        name="zsh-starship",
        label="Installing Zsh & Starship",
        body=body,
        required=required,
        question=question or "Make the terminal friendlier with Zsh + Starship?",
    )


def zsh_oh_my_posh_step(tb: Toolbox) -> Step:
    zshrc = tb.home / ".zshrc"
    omz_dir = tb.home / ".oh-my-zsh"
    posh_bin = tb.home / ".local/bin/oh-my-posh"
    theme = tb.home / ".poshthemes/atomic.omp.json"

    def install_posh() -> None:
        url = tb.downloader.latest_release_asset(OH_MY_POSH_REPO, "posh-linux-amd64")
        tb.downloader.fetch(url, posh_bin)
        tb.host.make_executable(posh_bin)

    def body(ctx: StepContext) -> None:
        ctx.run(lib.install_packages(tb, ["zsh", "curl", "unzip", "wget"]))
        ctx.run(
            lib.action(
                "Install Oh My Zsh",
                lambda: _run_installer(tb, OH_MY_ZSH_INSTALLER, "ohmyzsh-install.sh", "--unattended"),
                check=predicates.path_exists(omz_dir, "Oh My Zsh"),
            )
        )
        ctx.run(lib.set_default_shell(tb, ZSH))
        ctx.run(lib.write_file(tb, zshrc, OH_MY_ZSHRC, backup=True, description="Write .zshrc"))
        ctx.run(
            lib.action(
                "Install Oh My Posh",
                install_posh,
                check=predicates.path_exists(posh_bin, "Oh My Posh"),
            )
        )
        ctx.run(lib.download_file(tb, OH_MY_POSH_THEME_URL, theme, description="Download 'atomic' theme"))

    return Step(
        name="zsh-oh-my-posh",
        label="Installing Zsh, Oh My Zsh and Oh My Posh",
        body=body,
        required=False,
        question="Install and configure Zsh with Oh My Zsh and Oh My Posh?",
    )


def ghostty_config_step(tb: Toolbox) -> Step:
    config = tb.home / ".config/ghostty/config"
    return Step(
        name="ghostty-config",
        label="Configuring Ghostty terminal",
        body=lambda ctx: ctx.run(lib.write_file(tb, config, GHOSTTY_CONFIG)),
    )


# ----------------------------------------------------------------------
# Development
# ----------------------------------------------------------------------
def dev_tools_step(
    tb: Toolbox,
    *,
    full: bool = True,
    required: bool = False,
    question: Optional[str] = None,
) -> Step:
    def body(ctx: StepContext) -> None:
        ctx.run(lib.group_install(tb, DEV_GROUPS))
        ctx.run(lib.install_packages(tb, FULL_DEV_PACKAGES if full else BASIC_DEV_PACKAGES))
        if full:
            ctx.run(lib.enable_service(tb, "docker"))

    default_q = (
        "Install development tools and languages (gcc, clang, Java, git, python, node, podman, docker)?"
        if full
        else "Install basic developer tools (gcc, clang, git, python, cmake)?"
    )
    return Step(
        name="dev-tools",
        label="Installing development tools",
        body=body,
        required=required,
        question=question or default_q,
    )


def vscode_step(tb: Toolbox, *, required: bool = False) -> Step:
    def body(ctx: StepContext) -> None:
        ctx.run(
            lib.add_repo_file(
                tb, "Add Visual Studio Code repository", VSCODE_REPO_PATH, VSCODE_REPO, key_url=MICROSOFT_KEY
            )
        )
        ctx.run(lib.refresh_metadata(tb))
        ctx.run(lib.install_packages(tb, ["code"]))

    return Step(
        name="vscode",
        label="Installing Visual Studio Code",
        body=body,
        required=required,
        question="Install Visual Studio Code?",
    )


def netbeans_step(tb: Toolbox) -> Step:
    return Step(
        name="netbeans",
        label="Installing Apache NetBeans IDE",
        body=lambda ctx: ctx.run(lib.install_flatpaks(tb, ["org.apache.netbeans"])),
    )


def intellij_flatpak_step(tb: Toolbox) -> Step:
    return Step(
        name="intellij",
        label="Installing IntelliJ IDEA Community Edition",
        body=lambda ctx: ctx.run(lib.install_flatpaks(tb, ["com.jetbrains.IntelliJ-IDEA-Community"])),
    )


def intellij_tarball_step(tb: Toolbox) -> Step:
    tarball = Path("/tmp/ideaIC-latest.tar.gz")
    desktop = tb.home / ".local/share/applications/jetbrains-idea.desktop"

    def install() -> None:
        tb.downloader.fetch(INTELLIJ_URL, tarball)
        tb.runner.run(["mkdir", "-p", str(INTELLIJ_DIR)], sudo=True)
        tb.runner.run(
            ["tar", "-xzf", str(tarball), "-C", str(INTELLIJ_DIR), "--strip-components=1"],
            sudo=True,
        )
        if not tb.host.dry_run:
            tarball.unlink(missing_ok=True)

    def body(ctx: StepContext) -> None:
        ctx.run(
            lib.action(
                "Install IntelliJ IDEA tarball",
                install,
                check=predicates.path_exists(INTELLIJ_DIR, f"IntelliJ IDEA at {INTELLIJ_DIR}"),
            )
        )
        ctx.run(
            lib.write_file(tb, desktop, INTELLIJ_DESKTOP_ENTRY, description="Create IntelliJ IDEA desktop entry")
        )

    return Step(name="intellij", label="Installing IntelliJ IDEA Community Edition", body=body)


# ----------------------------------------------------------------------
# Desktop
# ----------------------------------------------------------------------
def _gnome_tools(tb: Toolbox, ctx: StepContext) -> None:
    ctx.run(lib.install_packages(tb, ["gnome-tweaks"]))
    ctx.run(lib.install_flatpaks(tb, ["com.mattjakeman.ExtensionManager"]))


def _kde_tools(tb: Toolbox, ctx: StepContext) -> None:
    ctx.run(lib.install_packages(tb, ["kvantum"]))
    if tb.host.which("kbuildsycoca5"):
        ctx.run(lib.run_command(tb, "Rebuild KDE appearance cache", ["kbuildsycoca5"]))


def _theme_from_git(tb: Toolbox, name: str, repo: str, *install_args: str, sudo: bool = False):
    checkout = tb.home / name

    def install() -> None:
        if not checkout.exists():
            tb.runner.run(["git", "clone", repo, str(checkout)])
        tb.runner.run(["./install.sh", *install_args], sudo=sudo, cwd=str(checkout))
        tb.host.remove_tree(checkout)

    return lib.action(f"Install {name}", install)


def _orchis_tela(tb: Toolbox, ctx: StepContext) -> None:
    ctx.run(_theme_from_git(tb, "Orchis-kde", ORCHIS_REPO))
    ctx.run(_theme_from_git(tb, "Tela-icon-theme", TELA_REPO, "-d", "/usr/share/icons", sudo=True))


def desktop_step(tb: Toolbox, *, themes: bool = False) -> Step:
    """Desktop customization loop; ``themes`` adds Orchis and Tela first."""

    def gnome(ctx: StepContext) -> None:
        if themes:
            _orchis_tela(tb, ctx)
        _gnome_tools(tb, ctx)
        if themes:
            ctx.info("Apply Orchis GTK and Tela icons from GNOME Tweaks > Appearance.")

    def kde(ctx: StepContext) -> None:
        if themes:
            _orchis_tela(tb, ctx)
        _kde_tools(tb, ctx)
        if themes:
            ctx.info("Apply Orchis KDE and Tela icons from System Settings > Appearance.")

    return loop_step(
        "desktop",
        "Customize Fedora",
        "Select your Desktop Environment:",
        [
            ChoiceOption("GNOME", gnome),
            ChoiceOption("KDE Plasma", kde),
            ChoiceOption("Skip customize", skip_message="Skipping Fedora customization as requested."),
        ],
        intro=("Pick the desktop environment you're running on.",),
    )


def kde_workspaces_step(tb: Toolbox) -> Step:
    return Step(
        name="kde-workspaces",
        label="Installing KDE Plasma Workspaces",
        body=lambda ctx: ctx.run(lib.group_install(tb, ["KDE Plasma Workspaces"])),
        required=False,
        question="Install the KDE Plasma desktop environment?",
    )


# ----------------------------------------------------------------------
# System tuning
# ----------------------------------------------------------------------
def tlp_step(tb: Toolbox) -> Step:
    def urls() -> Sequence[str]:
        return [TLP_RELEASE_URL.format(release=tb.dnf.fedora_release())]

    def body(ctx: StepContext) -> None:
        ctx.run(lib.install_package_urls(tb, "Add TLP repository", urls, provides=["tlp-release"]))
        ctx.run(lib.install_packages(tb, ["tlp", "tlp-rdw"]))
        ctx.run(lib.remove_packages(tb, ["tuned", "tuned-ppd"]))
        ctx.run(lib.mask_units(tb, "systemd-rfkill.service", "systemd-rfkill.socket"))
        ctx.run(lib.enable_service(tb, "tlp"))

    return Step(name="tlp", label="Installing TLP power management", body=body)


def faster_boot_step(tb: Toolbox, *, required: bool = False, question: Optional[str] = None) -> Step:
    return Step(
        name="faster-boot",
        label="Disabling NetworkManager-wait-online.service",
        body=lambda ctx: ctx.run(lib.disable_service(tb, "NetworkManager-wait-online.service")),
        required=required,
        question=question or "Make Fedora boot faster (skip network wait)?",
    )


def firewall_step(tb: Toolbox) -> Step:
    return Step(
        name="firewall",
        label="Enabling FirewallD",
        body=lambda ctx: ctx.run(lib.enable_service(tb, "firewalld")),
    )


def utilities_step(tb: Toolbox) -> Step:
    return Step(
        name="utilities",
        label="Installing fonts & archive utilities",
        body=lambda ctx: ctx.run(lib.install_packages(tb, UTILITY_PACKAGES)),
    )


def rtc_step(tb: Toolbox, *, required: bool = True, question: Optional[str] = None) -> Step:
    return Step(
        name="rtc",
        label="Setting Windows RTC compatibility",
        body=lambda ctx: ctx.run(lib.set_rtc_utc(tb)),
        required=required,
        question=question,
    )


def cleanup_step(tb: Toolbox, *, flatpaks: bool = True, orphans: bool = False) -> Step:
    def body(ctx: StepContext) -> None:
        ctx.run(lib.clean_caches(tb))
        if orphans:
            ctx.run(lib.autoremove(tb))
        if flatpaks:
            ctx.run(lib.remove_unused_flatpaks(tb))

    return Step(name="cleanup", label="Cleaning up package caches", body=body)
