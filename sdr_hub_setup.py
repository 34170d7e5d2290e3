#!/usr/bin/env python3
"""
SDR / RF Hub Setup Utility
--------------------------------------------------

An interactive, menu-driven utility that turns a Raspberry Pi into a
radio-signal hub. From a numbered menu it can:

  • Install base dependencies (RTL-SDR tools, build chain) and blacklist
    the DVB kernel modules that grab RTL-SDR dongles
  • Configure the primary rtl_tcp I/Q streaming service
  • Build and install the readsb ADS-B decoder with its web map
  • Configure additional rtl_tcp services for extra dongles
  • Install the Prometheus node exporter

Every external command is checked; the first failure aborts the run.

Run with root privileges.

Version: 1.0.0
"""

# ----------------------------------------------------------------
# Dependencies and Imports
# ----------------------------------------------------------------
import argparse
import configparser
import datetime
import gzip
import io
import logging
import os
import shutil
import signal
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import pyfiglet
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

# ----------------------------------------------------------------
# Configuration & Constants
# ----------------------------------------------------------------
APP_NAME: str = "SDR Hub"
APP_SUBTITLE: str = "RF Hub Setup - Raspberry Pi"
VERSION: str = "1.0.0"

LOG_FILE: str = "/var/log/sdr_hub_setup.log"
MAX_LOG_SIZE: int = 10 * 1024 * 1024  # 10 MB
SYSTEMD_DIR: str = "/etc/systemd/system"
BLACKLIST_FILE: str = "/etc/modprobe.d/blacklist-rtl.conf"
BUILD_DIR: str = "/tmp"

RTL_TCP_BIN: str = "/usr/bin/rtl_tcp"
LISTEN_ADDRESS: str = "0.0.0.0"
PRIMARY_PORT: str = "1234"
PRIMARY_DEVICE: str = "0"
ADDITIONAL_PORT: str = "1235"
ADDITIONAL_DEVICE: str = "1"

READSB_REPO: str = "https://github.com/wiedehopf/readsb.git"
READSB_DIR_NAME: str = "readsb"
READSB_DEB_GLOB: str = "readsb_*.deb"
READSB_SERVICE: str = "readsb"

NODE_EXPORTER_PACKAGE: str = "prometheus-node-exporter"
NODE_EXPORTER_PORT: int = 9100

BASE_PACKAGES: List[str] = [
    "rtl-sdr",
    "git",
    "build-essential",
    "debhelper",
    "libusb-1.0-0-dev",
    "librtlsdr-dev",
    "curl",
    "net-tools",
    "sudo",
]

# DVB-T drivers that claim RTL2832U dongles before librtlsdr can
BLACKLISTED_MODULES: List[str] = ["dvb_usb_rtl28xxu", "rtl2832", "rtl2830"]

# ----------------------------------------------------------------
# Nord-Themed Colors
# ----------------------------------------------------------------
class NordColors:
    """Nord color palette for consistent theming."""

    POLAR_NIGHT_1: str = "#2E3440"
    SNOW_STORM_1: str = "#D8DEE9"
    SNOW_STORM_2: str = "#E5E9F0"
    FROST_1: str = "#8FBCBB"
    FROST_2: str = "#88C0D0"
    FROST_3: str = "#81A1C1"
    FROST_4: str = "#5E81AC"
    RED: str = "#BF616A"
    YELLOW: str = "#EBCB8B"
    GREEN: str = "#A3BE8C"
    PURPLE: str = "#B48EAD"


NORD_THEME = Theme(
    {
        "header": f"{NordColors.FROST_2} bold",
        "section": f"{NordColors.FROST_3} bold",
        "step": NordColors.FROST_2,
        "info": NordColors.FROST_3,
        "success": f"{NordColors.GREEN} bold",
        "warning": f"{NordColors.YELLOW} bold",
        "error": f"{NordColors.RED} bold",
    }
)
console: Console = Console(theme=NORD_THEME, highlight=False)

logger: logging.Logger = logging.getLogger("sdr_hub_setup")


# ----------------------------------------------------------------
# Exceptions
# ----------------------------------------------------------------
class SetupError(Exception):
    """Base class for errors that abort the setup run."""


@dataclass(frozen=True)
class CommandResult:
    argv: List[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.argv)


class CommandError(SetupError):
    """An external command exited non-zero (or could not be started)."""

    def __init__(self, result: CommandResult) -> None:
        self.result = result
        super().__init__(
            f"Command failed ({result.returncode}): {result.command_line}"
        )


class InstallError(SetupError):
    pass


class InputRejected(SetupError):
    """User input was refused; the action ends without side effects."""


# ----------------------------------------------------------------
# Data Structures
# ----------------------------------------------------------------
@dataclass
class HubConfig:
    """Paths and switches for one run of the utility."""

    systemd_dir: str = SYSTEMD_DIR
    blacklist_file: str = BLACKLIST_FILE
    build_dir: str = BUILD_DIR
    log_file: str = LOG_FILE
    readsb_repo: str = READSB_REPO
    rtl_tcp_bin: str = RTL_TCP_BIN
    listen_address: str = LISTEN_ADDRESS
    dry_run: bool = False


@dataclass
class StreamSettings:
    """One rtl_tcp streaming instance."""

    port: str
    device_index: str
    suffix: Optional[str] = None

    @property
    def service_name(self) -> str:
        return f"rtl_tcp_{self.suffix}" if self.suffix else "rtl_tcp"

    @property
    def unit_file(self) -> str:
        return f"{self.service_name}.service"

    @property
    def description(self) -> str:
        return f"RTL-SDR TCP Server ({self.suffix or 'primary'})"

    @property
    def systemctl_target(self) -> str:
        # extra instances are addressed by full unit name
        return self.unit_file if self.suffix else self.service_name


@dataclass
class ServiceUnit:
    """
    A systemd unit file, kept as ordered sections instead of a text
    template so every generated unit has the same layout.
    """

    unit: Dict[str, str] = field(default_factory=dict)
    service: Dict[str, str] = field(default_factory=dict)
    install: Dict[str, str] = field(default_factory=dict)

    def sections(self) -> List[Tuple[str, Dict[str, str]]]:
        return [
            ("Unit", self.unit),
            ("Service", self.service),
            ("Install", self.install),
        ]

    def render(self) -> str:
        parser = configparser.ConfigParser(interpolation=None)
        # systemd keys are case-sensitive
        parser.optionxform = str
        for name, options in self.sections():
            if options:
                parser[name] = options
        buffer = io.StringIO()
        parser.write(buffer, space_around_delimiters=False)
        return buffer.getvalue().rstrip("\n") + "\n"


def rtl_tcp_unit(settings: StreamSettings, config: HubConfig) -> ServiceUnit:
    """Build the unit for an rtl_tcp instance listening on all interfaces."""
    exec_start = (
        f"{config.rtl_tcp_bin} -a {config.listen_address} "
        f"-p {settings.port} -d {settings.device_index}"
    )
    return ServiceUnit(
        unit={"Description": settings.description, "After": "network.target"},
        service={
            "ExecStart": exec_start,
            "Restart": "on-failure",
            "RestartSec": "3",
        },
        install={"WantedBy": "multi-user.target"},
    )


# ----------------------------------------------------------------
# Logging Setup
# ----------------------------------------------------------------
def rotate_log(log_file: str) -> None:
    if os.path.exists(log_file) and os.path.getsize(log_file) > MAX_LOG_SIZE:
        ts = datetime.datetime.now().strftime("%Y%m%d%H%M%S")
        rotated = f"{log_file}.{ts}.gz"
        with open(log_file, "rb") as fin, gzip.open(rotated, "wb") as fout:
            shutil.copyfileobj(fin, fout)
        open(log_file, "w").close()


def setup_logging(log_file: str = LOG_FILE) -> logging.Logger:
    """Set up logging with RichHandler for the console and a log file."""
    console_handler = RichHandler(
        console=console, rich_tracebacks=True, markup=False, show_path=False
    )
    console_handler.setLevel(logging.WARNING)
    handlers: List[logging.Handler] = [console_handler]
    try:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        rotate_log(log_file)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        handlers.append(file_handler)
    except OSError as e:
        print_warning(f"Could not set up file logging at {log_file}: {e}")
    logging.basicConfig(
        level=logging.DEBUG, format="%(message)s", handlers=handlers, force=True
    )
    logger.info("SDR Hub Setup v%s starting", VERSION)
    return logger


# ----------------------------------------------------------------
# Console Helpers and UI Components
# ----------------------------------------------------------------
def create_header() -> Panel:
    """Render the application name with pyfiglet inside a Nord panel."""
    term_width = shutil.get_terminal_size((80, 24)).columns
    adjusted_width = min(term_width - 4, 80)
    ascii_art = ""
    for font in ("slant", "small", "standard"):
        try:
            fig = pyfiglet.Figlet(font=font, width=adjusted_width)
            ascii_art = fig.renderText(APP_NAME)
            if ascii_art.strip():
                break
        except Exception:
            continue
    if not ascii_art.strip():
        ascii_art = f"{APP_NAME}\n"
    colors = [
        NordColors.FROST_1,
        NordColors.FROST_2,
        NordColors.FROST_3,
        NordColors.FROST_4,
    ]
    styled = Text()
    for i, line in enumerate(l for l in ascii_art.splitlines() if l.strip()):
        styled.append(line, style=f"bold {colors[i % len(colors)]}")
        styled.append("\n")
    return Panel(
        styled,
        border_style=NordColors.FROST_3,
        padding=(1, 2),
        title=Text(f"v{VERSION}", style=f"bold {NordColors.SNOW_STORM_2}"),
        title_align="right",
        subtitle=Text(APP_SUBTITLE, style=f"bold {NordColors.SNOW_STORM_1}"),
        subtitle_align="center",
        box=box.ROUNDED,
    )


def print_section(text: str) -> None:
    console.print(f"\n[section]==> {text}[/section]")
    logger.info("--- %s ---", text)


def print_step(text: str) -> None:
    console.print(f"[step]• {text}[/step]")


def print_info(text: str) -> None:
    console.print(f"[info]  {text}[/info]")


def print_success(text: str) -> None:
    console.print(f"[success]✓ {text}[/success]")


def print_warning(text: str) -> None:
    console.print(f"[warning]⚠ {text}[/warning]")


def print_error(text: str) -> None:
    console.print(f"[error]✗ {text}[/error]")


def display_panel(
    message: str, style: str = NordColors.FROST_2, title: str = ""
) -> None:
    console.print(
        Panel(
            Text.from_markup(message),
            border_style=style,
            padding=(1, 2),
            title=f"[bold {style}]{title}[/]" if title else None,
        )
    )


def press_enter() -> None:
    console.print()
    Prompt.ask("Press Enter to continue", default="", show_default=False)


# ----------------------------------------------------------------
# Utility Functions & Classes
# ----------------------------------------------------------------
class Utils:
    @staticmethod
    def run_command(
        cmd: Sequence[str],
        check: bool = True,
        dry_run: bool = False,
        cwd: Optional[str] = None,
        capture_output: bool = False,
    ) -> CommandResult:
        """
        Run a command to completion and return its result.

        Output goes straight to the terminal unless capture_output is set.
        A non-zero exit raises CommandError when check is set. In dry-run
        mode the command is only logged.
        """
        argv = [str(a) for a in cmd]
        cmd_str = " ".join(argv)
        if dry_run:
            logger.info("[dry-run] %s", cmd_str)
            print_info(escape(f"[dry-run] {cmd_str}"))
            return CommandResult(argv=argv, returncode=0)

        logger.debug("Executing: %s%s", cmd_str, f" (cwd={cwd})" if cwd else "")
        try:
            proc = subprocess.run(
                argv, cwd=cwd, capture_output=capture_output, text=True, check=False
            )
        except FileNotFoundError as e:
            result = CommandResult(argv=argv, returncode=127, stderr=str(e))
        else:
            result = CommandResult(
                argv=argv,
                returncode=proc.returncode,
                stdout=proc.stdout or "",
                stderr=proc.stderr or "",
            )
        if result.stdout.strip():
            logger.debug("STDOUT %s", result.stdout.strip())
        if result.stderr.strip():
            logger.debug("STDERR %s", result.stderr.strip())

        if not result.ok:
            if check:
                logger.error("Command failed: %s (exit %d)", cmd_str, result.returncode)
                raise CommandError(result)
            logger.warning("Command exited %d: %s", result.returncode, cmd_str)
        return result

    @staticmethod
    def write_file(path: str, content: str, dry_run: bool = False) -> None:
        if dry_run:
            logger.info("[dry-run] would write %s", path)
            print_info(escape(f"[dry-run] would write {path}"))
            return
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        with open(path, "w") as f:
            f.write(content)
        logger.info("Wrote %s", path)


def ensure_blacklisted(
    blacklist_file: str, modules: Sequence[str], dry_run: bool = False
) -> List[str]:
    """
    Make sure each module has a `blacklist <module>` line in the file.

    Returns the modules that were appended. Lines already present are left
    alone, so repeated calls never create duplicates.
    """
    path = Path(blacklist_file)
    existing = path.read_text() if path.exists() else ""
    present = {line.strip() for line in existing.splitlines()}
    missing = [m for m in modules if f"blacklist {m}" not in present]

    if dry_run:
        for module in missing:
            logger.info("[dry-run] would blacklist %s in %s", module, blacklist_file)
        return missing

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as f:
        if missing and existing and not existing.endswith("\n"):
            f.write("\n")
        for module in missing:
            f.write(f"blacklist {module}\n")
            logger.info("Blacklisted kernel module %s", module)
    return missing


class Systemctl:
    """Thin wrapper over the systemctl calls this utility needs."""

    def __init__(self, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def _run(self, *args: str) -> CommandResult:
        return Utils.run_command(["systemctl", *args], dry_run=self.dry_run)

    def daemon_reload(self) -> CommandResult:
        return self._run("daemon-reload")

    def enable(self, service: str) -> CommandResult:
        return self._run("enable", service)

    def restart(self, service: str) -> CommandResult:
        return self._run("restart", service)


def check_root() -> bool:
    return os.geteuid() == 0


# ----------------------------------------------------------------
# Main Application
# ----------------------------------------------------------------
MENU_OPTIONS: List[Tuple[str, str, str]] = [
    ("1", "Install base dependencies (RTL-SDR, tools, blacklist DVB)", "install_base"),
    ("2", "Configure primary I/Q stream (rtl_tcp service)", "configure_rtl_tcp"),
    ("3", "Install ADS-B decoder + web map (readsb)", "install_readsb"),
    ("4", "Configure an additional rtl_tcp service", "configure_additional_rtl_tcp"),
    ("5", "Install Prometheus node exporter", "install_node_exporter"),
]
EXIT_OPTION: str = "6"


class SdrHubSetup:
    def __init__(self, config: Optional[HubConfig] = None) -> None:
        self.config = config or HubConfig()
        self.systemctl = Systemctl(dry_run=self.config.dry_run)
        self.status: Dict[str, Dict[str, str]] = {
            action: {"status": "pending", "message": ""}
            for _, _, action in MENU_OPTIONS
        }

    # -- helpers -------------------------------------------------
    def execute(self, cmd: Sequence[str], **kwargs: Any) -> CommandResult:
        return Utils.run_command(cmd, dry_run=self.config.dry_run, **kwargs)

    def run_with_status(
        self, desc: str, cmd: Sequence[str], **kwargs: Any
    ) -> CommandResult:
        print_step(desc)
        return self.execute(cmd, **kwargs)

    def apt(self, *args: str) -> CommandResult:
        return self.run_with_status(f"apt {' '.join(args)}", ["apt", *args])

    def deploy_stream(self, settings: StreamSettings) -> str:
        unit_path = os.path.join(self.config.systemd_dir, settings.unit_file)
        unit = rtl_tcp_unit(settings, self.config)
        Utils.write_file(unit_path, unit.render(), dry_run=self.config.dry_run)
        if not self.config.dry_run:
            print_success(f"Wrote {escape(unit_path)}")
        self.systemctl.daemon_reload()
        self.systemctl.enable(settings.systemctl_target)
        self.systemctl.restart(settings.systemctl_target)
        return unit_path

    # -- 1. base install ------------------------------------------
    def install_base(self) -> None:
        print_section("Updating apt and installing base packages")
        self.apt("update")
        self.apt("upgrade", "-y")
        self.apt("install", "-y", *BASE_PACKAGES)

        print_section("Blacklisting DVB kernel modules for RTL-SDR")
        added = ensure_blacklisted(
            self.config.blacklist_file, BLACKLISTED_MODULES, dry_run=self.config.dry_run
        )
        if added:
            print_success(
                f"Added to {escape(self.config.blacklist_file)}: {', '.join(added)}"
            )
        else:
            blacklist = escape(self.config.blacklist_file)
            print_info(f"{blacklist} already blacklists all DVB modules")

        console.print()
        print_success("Base install done.")
        print_warning(
            "A reboot is recommended after first run "
            "so the DVB modules are fully disabled."
        )

    # -- 2. primary rtl_tcp ---------------------------------------
    def configure_rtl_tcp(self) -> None:
        print_section("Configure rtl_tcp I/Q streaming service")
        port = Prompt.ask("Port for primary rtl_tcp instance", default=PRIMARY_PORT)
        device = Prompt.ask(
            "RTL-SDR device index for this stream", default=PRIMARY_DEVICE
        )
        settings = StreamSettings(
            port=port.strip() or PRIMARY_PORT,
            device_index=device.strip() or PRIMARY_DEVICE,
        )

        self.deploy_stream(settings)

        console.print()
        print_success("rtl_tcp service configured:")
        print_info(f"Port:   {escape(settings.port)}")
        print_info(f"Device: {escape(settings.device_index)}")
        console.print()
        print_info("You can verify with:")
        print_info(f"  netstat -tnlp | grep {escape(settings.port)}")

    # -- 3. readsb --------------------------------------------------
    def install_readsb(self) -> None:
        print_section("Installing readsb (ADS-B decoder + web map)")
        print_info("This may take a while on a Pi 1.")
        build_dir = Path(self.config.build_dir)
        src_dir = build_dir / READSB_DIR_NAME

        if not self.config.dry_run:
            build_dir.mkdir(parents=True, exist_ok=True)
            if src_dir.exists():
                shutil.rmtree(src_dir)
            for stale in build_dir.glob(READSB_DEB_GLOB):
                stale.unlink()

        try:
            self.run_with_status(
                "Cloning readsb",
                ["git", "clone", self.config.readsb_repo, READSB_DIR_NAME],
                cwd=str(build_dir),
            )
            self.run_with_status(
                "Building readsb package", ["dpkg-buildpackage", "-b"], cwd=str(src_dir)
            )
        except CommandError:
            if src_dir.exists():
                logger.warning("Removing partial source tree %s", src_dir)
                shutil.rmtree(src_dir, ignore_errors=True)
            raise

        debs = sorted(str(p) for p in build_dir.glob(READSB_DEB_GLOB))
        if not debs:
            if not self.config.dry_run:
                raise InstallError(f"No {READSB_DEB_GLOB} produced in {build_dir}")
            debs = [str(build_dir / READSB_DEB_GLOB)]

        installed = self.run_with_status(
            "Installing readsb package", ["dpkg", "-i", *debs], check=False
        )
        if not installed.ok:
            print_warning("dpkg reported missing dependencies; running apt -f install")
            self.apt("-f", "install", "-y")

        console.print()
        print_success("readsb installed.")
        print_info("By default, it will try to use an RTL-SDR directly.")
        print_info("If you have multiple dongles, you will likely want:")
        print_info("  - Device 0 for rtl_tcp (general I/Q hub)")
        print_info("  - Device 1 for readsb (ADS-B).")
        console.print()
        print_info(
            "You can adjust readsb options in /etc/default/readsb "
            "(or /etc/readsb.conf, depending on version)."
        )
        print_info("Typical extra options to set in the config file:")
        print_info(
            "  --device-type rtlsdr --device-index 1 --lat <your_lat> --lon <your_lon>"
        )
        console.print()

        print_step("Starting and enabling readsb service...")
        self.systemctl.enable(READSB_SERVICE)
        self.systemctl.restart(READSB_SERVICE)

        console.print()
        print_info("Once running, you should get a web map at:")
        print_info("  http://<pi-ip>/readsb/")
        print_info("or sometimes on port 8080 depending on your config.")

    # -- 4. additional rtl_tcp ------------------------------------
    def configure_additional_rtl_tcp(self) -> None:
        print_section("Configure an additional rtl_tcp service")
        print_info("This is useful for extra dongles / frequencies.")
        suffix = Prompt.ask(
            "Name suffix for this instance (e.g. 2, adsb, airband)",
            default="",
            show_default=False,
        )
        suffix = suffix.strip()
        if not suffix:
            raise InputRejected("Suffix cannot be empty.")

        port = Prompt.ask("Port for this rtl_tcp instance", default=ADDITIONAL_PORT)
        device = Prompt.ask(
            "RTL-SDR device index for this instance", default=ADDITIONAL_DEVICE
        )
        settings = StreamSettings(
            port=port.strip() or ADDITIONAL_PORT,
            device_index=device.strip() or ADDITIONAL_DEVICE,
            suffix=suffix,
        )

        self.deploy_stream(settings)

        console.print()
        print_success("Additional rtl_tcp service configured:")
        print_info(f"Service name: {escape(settings.unit_file)}")
        print_info(f"Port:         {escape(settings.port)}")
        print_info(f"Device index: {escape(settings.device_index)}")
        console.print()
        print_info("Verify with:")
        print_info(f"  netstat -tnlp | grep {escape(settings.port)}")

    # -- 5. node exporter -----------------------------------------
    def install_node_exporter(self) -> None:
        print_section("Installing Prometheus node exporter (via apt)")
        print_info(
            f"This exposes system metrics on port {NODE_EXPORTER_PORT} "
            "for your Prometheus server."
        )
        self.apt("update")
        self.apt("install", "-y", NODE_EXPORTER_PACKAGE)
        self.systemctl.enable(NODE_EXPORTER_PACKAGE)
        self.systemctl.restart(NODE_EXPORTER_PACKAGE)

        console.print()
        print_success("Prometheus node exporter installed and running.")
        print_info("Scrape endpoint (from your Prometheus server):")
        print_info(f"  http://<pi-ip>:{NODE_EXPORTER_PORT}/metrics")

    # -- menu -------------------------------------------------------
    def show_menu(self) -> str:
        console.clear()
        console.print(create_header())
        console.print()
        for key, label, _ in MENU_OPTIONS:
            console.print(f"[bold {NordColors.FROST_2}]{key})[/] {label}")
        console.print(f"[bold {NordColors.FROST_2}]{EXIT_OPTION})[/] Exit")
        console.print()
        return Prompt.ask(f"[bold {NordColors.PURPLE}]Select an option [1-6][/]")

    def perform(self, action: str) -> None:
        """Run one menu action, recording its outcome for the status report."""
        handler: Callable[[], None] = getattr(self, action)
        self.status[action] = {"status": "in_progress", "message": ""}
        logger.info("Starting action %s", action)
        try:
            handler()
        except InputRejected as e:
            print_error(escape(str(e)))
            self.status[action] = {"status": "rejected", "message": str(e)}
            logger.info("Action %s rejected: %s", action, e)
            return
        except SetupError as e:
            self.status[action] = {"status": "failed", "message": str(e)}
            raise
        self.status[action] = {"status": "success", "message": "completed"}
        logger.info("Finished action %s", action)

    def dispatch(self, choice: str) -> bool:
        """Handle one menu selection. Returns False when the user chose to exit."""
        choice = choice.strip()
        if choice == EXIT_OPTION:
            console.print("Exiting.")
            return False
        actions = {key: action for key, _, action in MENU_OPTIONS}
        if choice not in actions:
            print_error("Invalid choice.")
            logger.info("Rejected menu choice %r", choice)
            press_enter()
            return True
        self.perform(actions[choice])
        press_enter()
        return True

    def status_report(self) -> None:
        """Display a summary of the actions run during this session."""
        if all(data["status"] == "pending" for data in self.status.values()):
            return
        table = Table(title="Session Summary", box=box.SIMPLE, header_style="header")
        table.add_column("Action")
        table.add_column("Status")
        table.add_column("Message")
        styles = {
            "success": "success",
            "failed": "error",
            "rejected": "warning",
            "in_progress": "warning",
        }
        for action, data in self.status.items():
            if data["status"] == "pending":
                continue
            style = styles.get(data["status"], "step")
            table.add_row(
                action, f"[{style}]{data['status']}[/]", escape(data["message"])
            )
        console.print(table)

    def run(self) -> int:
        try:
            while True:
                try:
                    choice = self.show_menu()
                except EOFError:
                    console.print("Exiting.")
                    return 0
                if not self.dispatch(choice):
                    return 0
        finally:
            self.status_report()


# ----------------------------------------------------------------
# Signal Handling
# ----------------------------------------------------------------
def signal_handler(signum: int, frame: Optional[Any]) -> None:
    sig_name = signal.Signals(signum).name
    logger.error("Interrupted by %s. Exiting.", sig_name)
    print_warning(f"\nProcess interrupted by {sig_name}.")
    sys.exit(128 + signum)


def register_signal_handlers() -> None:
    # SIGINT stays with Python: Ctrl+C surfaces as KeyboardInterrupt in main
    for s in (signal.SIGTERM, signal.SIGHUP):
        signal.signal(s, signal_handler)


# ----------------------------------------------------------------
# Main Entry Point
# ----------------------------------------------------------------
def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Interactive SDR / RF hub setup for Raspberry Pi"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Log commands and file writes without performing them",
    )
    parser.add_argument("--log-file", default=LOG_FILE, help="Log file path")
    parser.add_argument(
        "--systemd-dir", default=SYSTEMD_DIR, help="Directory for generated unit files"
    )
    parser.add_argument(
        "--blacklist-file", default=BLACKLIST_FILE, help="Kernel module blacklist file"
    )
    parser.add_argument(
        "--build-dir", default=BUILD_DIR, help="Working directory for the readsb build"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    if not check_root():
        display_panel(
            f"[bold {NordColors.RED}]This script must be run as root.[/]\n\n"
            f"Try: sudo {Path(sys.argv[0]).name}",
            style=NordColors.RED,
            title="Permission Error",
        )
        return 1

    config = HubConfig(
        systemd_dir=args.systemd_dir,
        blacklist_file=args.blacklist_file,
        build_dir=args.build_dir,
        log_file=args.log_file,
        dry_run=args.dry_run,
    )
    setup_logging(config.log_file)
    register_signal_handlers()

    app = SdrHubSetup(config)
    try:
        return app.run()
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user.")
        return 130
    except CommandError as e:
        logger.error("%s", e)
        details = escape(e.result.stderr.strip() or e.result.stdout.strip())
        if not details:
            details = "See the command output above."
        display_panel(
            f"[bold {NordColors.RED}]{escape(str(e))}[/]\n\n{details}",
            style=NordColors.RED,
            title="Command Failed",
        )
        return 1
    except SetupError as e:
        logger.error("%s", e)
        print_error(escape(str(e)))
        return 1
    except Exception as e:
        logger.exception("Unexpected error")
        print_error(f"Unexpected error: {escape(str(e))}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
