"""
Browser discovery data models.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Tuple


# Webdriver capability descriptor. Each family has its own keys.
Capabilities = Dict[str, Any]


class VersionSource(Enum):
    COMMAND = "command"                  # `<binary> --version`
    PLIST = "plist"                      # macOS bundle Info.plist
    VERSION_DIR = "version_dir"          # numeric directory next to the binary
    APPLICATION_INI = "application_ini"  # Firefox application.ini
    REGISTRY = "registry"                # Windows registry value


@dataclass(frozen=True)
class BrowserDefinition:
    """Where a browser family lives on one platform and how to read its version."""
    name: str
    paths: Tuple[str, ...] = ()
    commands: Tuple[str, ...] = ()
    version_source: VersionSource = VersionSource.COMMAND
    registry_key: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "paths": list(self.paths),
            "commands": list(self.commands),
            "version_source": self.version_source.value,
            "registry_key": self.registry_key,
        }


@dataclass(frozen=True)
class BrowserRecord:
    """An installed browser found on this machine."""
    name: str
    version: str
    bin_path: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "bin_path": self.bin_path,
        }
