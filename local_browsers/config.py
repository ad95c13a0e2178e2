"""
Discovery settings read from the environment.

LOCAL_BROWSERS_ONLY        comma-separated families to look for
LOCAL_BROWSERS_<FAMILY>    executable path for one family, e.g.
                           LOCAL_BROWSERS_CHROME=/opt/chrome/chrome
"""
import os
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

ENV_PREFIX = "LOCAL_BROWSERS_"
ENV_ONLY = f"{ENV_PREFIX}ONLY"

# Prefixed variables that are not binary overrides.
RESERVED_KEYS = {"ONLY", "LOG_LEVEL", "LOG_JSON", "LOG_FILE"}


def env_key(family: str) -> str:
    """Environment variable holding the binary override for ``family``."""
    return ENV_PREFIX + family.upper().replace(" ", "_")


@dataclass
class DiscoveryConfig:
    """Which families to look for and where their executables live."""
    only: Optional[List[str]] = None
    binaries: Dict[str, str] = field(default_factory=dict)

    def allows(self, family: str) -> bool:
        return self.only is None or family in self.only

    def binary_for(self, family: str) -> Optional[str]:
        return self.binaries.get(family)

    def to_dict(self) -> dict:
        return {
            "only": self.only,
            "binaries": dict(self.binaries),
        }

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DiscoveryConfig":
        environ = os.environ if environ is None else environ

        only = None
        raw_only = environ.get(ENV_ONLY, "").strip()
        if raw_only:
            only = [name.strip() for name in raw_only.split(",") if name.strip()]

        binaries = {}
        for key, value in environ.items():
            if not key.startswith(ENV_PREFIX) or not value:
                continue
            suffix = key[len(ENV_PREFIX):]
            if suffix in RESERVED_KEYS:
                continue
            binaries[suffix.lower().replace("_", " ")] = value

        return cls(only=only, binaries=binaries)
