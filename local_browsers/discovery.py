"""
Local browser discovery.

Finds browsers that are already installed on this machine and reports their
family name, version and executable path. Nothing is downloaded or launched
beyond the short-lived ``--version`` probes some families need.
"""
import asyncio
import configparser
import os
import plistlib
import re
import shutil
import sys
from pathlib import Path
from typing import Dict, List, Optional
from xml.parsers.expat import ExpatError

from .config import DiscoveryConfig
from .logging_config import get_logger
from .models import BrowserDefinition, BrowserRecord, VersionSource

logger = get_logger("local_browsers.discovery")

VERSION_PATTERN = re.compile(r"\d+(?:\.\d+)*")
VERSION_DIR_PATTERN = re.compile(r"^\d+(?:\.\d+)+$")

_MAC_APPS = ("/Applications", "~/Applications")


def _mac_app(bundle: str, executable: str):
    return tuple(f"{root}/{bundle}.app/Contents/MacOS/{executable}" for root in _MAC_APPS)


def _windows(*relative: str):
    roots = ("%LOCALAPPDATA%", "%ProgramFiles%", "%ProgramFiles(x86)%")
    return tuple(f"{root}\\{path}" for path in relative for root in roots)


PLATFORMS: Dict[str, Dict[str, BrowserDefinition]] = {
    "darwin": {
        "chrome": BrowserDefinition(
            "chrome", paths=_mac_app("Google Chrome", "Google Chrome"),
            version_source=VersionSource.PLIST,
        ),
        "canary": BrowserDefinition(
            "canary", paths=_mac_app("Google Chrome Canary", "Google Chrome Canary"),
            version_source=VersionSource.PLIST,
        ),
        "firefox": BrowserDefinition(
            "firefox", paths=_mac_app("Firefox", "firefox"),
            version_source=VersionSource.PLIST,
        ),
        "aurora": BrowserDefinition(
            "aurora", paths=_mac_app("Firefox Developer Edition", "firefox"),
            version_source=VersionSource.PLIST,
        ),
        "opera": BrowserDefinition(
            "opera", paths=_mac_app("Opera", "Opera"),
            version_source=VersionSource.PLIST,
        ),
        "safari": BrowserDefinition(
            "safari", paths=_mac_app("Safari", "Safari"),
            version_source=VersionSource.PLIST,
        ),
    },
    "linux": {
        "chrome": BrowserDefinition(
            "chrome", commands=("google-chrome", "google-chrome-stable"),
        ),
        "chromium": BrowserDefinition(
            "chromium", commands=("chromium", "chromium-browser"),
        ),
        "firefox": BrowserDefinition("firefox", commands=("firefox",)),
        "opera": BrowserDefinition("opera", commands=("opera",)),
    },
    "win32": {
        "chrome": BrowserDefinition(
            "chrome", paths=_windows("Google\\Chrome\\Application\\chrome.exe"),
            version_source=VersionSource.VERSION_DIR,
        ),
        "canary": BrowserDefinition(
            "canary", paths=_windows("Google\\Chrome SxS\\Application\\chrome.exe"),
            version_source=VersionSource.VERSION_DIR,
        ),
        "firefox": BrowserDefinition(
            "firefox", paths=_windows("Mozilla Firefox\\firefox.exe"),
            version_source=VersionSource.APPLICATION_INI,
        ),
        "aurora": BrowserDefinition(
            "aurora", paths=_windows("Firefox Developer Edition\\firefox.exe"),
            version_source=VersionSource.APPLICATION_INI,
        ),
        "opera": BrowserDefinition(
            "opera", paths=_windows("Programs\\Opera\\launcher.exe"),
            version_source=VersionSource.VERSION_DIR,
        ),
        "ie": BrowserDefinition(
            "ie", paths=_windows("Internet Explorer\\iexplore.exe"),
            version_source=VersionSource.REGISTRY,
            registry_key="SOFTWARE\\Microsoft\\Internet Explorer",
        ),
        "edge": BrowserDefinition(
            "edge", paths=_windows("Microsoft\\Edge\\Application\\msedge.exe"),
            version_source=VersionSource.VERSION_DIR,
        ),
    },
}


def platform(host: Optional[str] = None) -> Dict[str, BrowserDefinition]:
    """Browser definitions for ``host`` (defaults to this machine)."""
    host = host or sys.platform
    if host.startswith("linux"):
        host = "linux"
    return PLATFORMS.get(host, {})


class Launcher:
    """Lists the installed browsers for one set of platform definitions."""

    def __init__(
        self,
        definitions: Dict[str, BrowserDefinition],
        config: Optional[DiscoveryConfig] = None,
    ):
        self.definitions = definitions
        self.config = config or DiscoveryConfig()

    async def browsers(self) -> List[BrowserRecord]:
        records: List[BrowserRecord] = []
        for name, definition in self.definitions.items():
            if not self.config.allows(name):
                continue

            bin_path = self.locate(definition)
            if not bin_path:
                logger.debug(f"No {name} executable found")
                continue

            version = await self.read_version(definition, bin_path)
            if not version:
                logger.warning(f"Found {name} at {bin_path} but could not read its version")
                continue

            records.append(BrowserRecord(name=name, version=version, bin_path=bin_path))

        logger.info_with(
            f"Found {len(records)} local browser(s)",
            browsers=[record.name for record in records],
        )
        return records

    def locate(self, definition: BrowserDefinition) -> Optional[str]:
        override = self.config.binary_for(definition.name)
        if override:
            override = os.path.expanduser(os.path.expandvars(override))
            if os.path.exists(override):
                return override
            logger.warning(f"Configured {definition.name} binary does not exist: {override}")
            return None

        for candidate in definition.paths:
            path = os.path.expanduser(os.path.expandvars(candidate))
            if os.path.exists(path):
                return path

        for command in definition.commands:
            path = shutil.which(command)
            if path:
                return path

        return None

    async def read_version(self, definition: BrowserDefinition, bin_path: str) -> Optional[str]:
        source = definition.version_source
        if source == VersionSource.COMMAND:
            return await _version_from_command(bin_path)
        if source == VersionSource.PLIST:
            return _version_from_plist(bin_path)
        if source == VersionSource.VERSION_DIR:
            return _version_from_version_dir(bin_path)
        if source == VersionSource.APPLICATION_INI:
            return _version_from_application_ini(bin_path)
        if source == VersionSource.REGISTRY:
            return _version_from_registry(definition.registry_key)
        raise ValueError(f"Unknown version source: {source}")


async def local(config: Optional[DiscoveryConfig] = None) -> Launcher:
    """Launcher for this machine, configured from the environment by default."""
    if config is None:
        config = DiscoveryConfig.from_env()
    return Launcher(platform(), config)


# ==================== Version readers ====================

async def _version_from_command(bin_path: str) -> Optional[str]:
    process = await asyncio.create_subprocess_exec(
        bin_path, "--version",
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, _ = await process.communicate()
    if process.returncode != 0:
        logger.debug(f"{bin_path} --version exited with {process.returncode}")
        return None

    match = VERSION_PATTERN.search(stdout.decode(errors="replace"))
    return match.group(0) if match else None


def _version_from_plist(bin_path: str) -> Optional[str]:
    # <bundle>.app/Contents/MacOS/<exe> -> <bundle>.app/Contents/Info.plist
    info = Path(bin_path).parent.parent / "Info.plist"
    if not info.exists():
        return None
    try:
        with open(info, "rb") as f:
            data = plistlib.load(f)
    except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
        logger.debug(f"Unreadable {info}: {e}")
        return None
    if not isinstance(data, dict):
        return None
    return data.get("CFBundleShortVersionString")


def _version_from_version_dir(bin_path: str) -> Optional[str]:
    versions = [
        entry.name for entry in Path(bin_path).parent.iterdir()
        if entry.is_dir() and VERSION_DIR_PATTERN.match(entry.name)
    ]
    if not versions:
        return None
    return max(versions, key=lambda v: tuple(int(part) for part in v.split(".")))


def _version_from_application_ini(bin_path: str) -> Optional[str]:
    ini = Path(bin_path).parent / "application.ini"
    if not ini.exists():
        return None
    parser = configparser.ConfigParser(interpolation=None)
    parser.read(ini, encoding="utf-8")
    return parser.get("App", "Version", fallback=None)


def _version_from_registry(key: str) -> Optional[str]:
    if sys.platform != "win32":
        return None
    import winreg

    try:
        with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key) as handle:
            for value_name in ("svcVersion", "Version"):
                try:
                    value, _ = winreg.QueryValueEx(handle, value_name)
                    return str(value)
                except FileNotFoundError:
                    continue
    except FileNotFoundError:
        return None
    return None
