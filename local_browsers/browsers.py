"""
Webdriver capabilities for locally installed browsers.

Turns browser names ("chrome", "firefox", "all", ...) into the capability
descriptors a webdriver client needs to start a session against the copy of
that browser installed on this machine.
"""
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Union

from selenium.webdriver import DesiredCapabilities

from . import discovery
from .logging_config import get_logger
from .models import BrowserRecord, Capabilities

logger = get_logger("local_browsers.browsers")

ALL = "all"

MAJOR_VERSION = re.compile(r"\d+")

BrowserSpec = Union[str, Mapping]


class BrowserError(Exception):
    """Base exception for browser resolution errors"""
    pass


class UnsupportedBrowserError(BrowserError):
    """Requested browser family cannot be converted on this platform"""
    def __init__(self, browsers: List[str], supported: List[str]):
        self.browsers = browsers
        self.supported = supported
        super().__init__(
            f"The following browsers are unsupported: {', '.join(map(str, browsers))}. "
            f"(All supported browsers: {', '.join(supported)})"
        )


class BrowserNotInstalledError(BrowserError):
    """Requested browser family is supported but not installed"""
    def __init__(self, browsers: List[str], installed: List[str]):
        self.browsers = browsers
        self.installed = installed
        super().__init__(
            f"The following browsers were not found: {', '.join(map(str, browsers))}. "
            f"(All installed browsers found: {', '.join(installed)})"
        )


class BrowserVersionError(BrowserError):
    """Discovered browser reported a version without a major number"""
    def __init__(self, browser: str, version: str):
        self.browser = browser
        self.version = version
        super().__init__(f"Cannot read a major version for {browser} from {version!r}")


def normalize(browsers: Optional[Iterable[BrowserSpec]]) -> List[Optional[str]]:
    """Reduce browser names and ``{"browserName": ...}`` descriptors to names."""
    names = []
    for browser in browsers or []:
        if isinstance(browser, str):
            names.append(browser)
        elif isinstance(browser, Mapping):
            names.append(browser.get("browserName"))
        else:
            names.append(getattr(browser, "browserName", None))
    return names


async def expand(names: Sequence[str]) -> List[Capabilities]:
    """
    Expand browser names into capabilities for locally installed browsers.

    An empty list, or one containing ``"all"``, selects every installed
    browser. Raises UnsupportedBrowserError before touching discovery when a
    name cannot be converted here, and BrowserNotInstalledError when a name
    is supported but was not found on this machine.
    """
    names = list(names)
    if ALL in names:
        names = []

    supported_names = supported()
    unsupported = _difference(names, supported_names)
    if unsupported:
        raise UnsupportedBrowserError(unsupported, supported_names)

    installed_by_name = await detect()
    installed = list(installed_by_name)
    if not names:
        names = installed

    missing = _difference(names, installed)
    if missing:
        raise BrowserNotInstalledError(missing, installed)

    logger.debug(f"Expanded browsers: {', '.join(names)}")
    return [installed_by_name[name] for name in names]


async def detect() -> Dict[str, Capabilities]:
    """Capabilities for every installed browser this module can convert."""
    launcher = await discovery.local()
    browsers = await launcher.browsers()

    results: Dict[str, Capabilities] = {}
    for browser in browsers:
        converter = CONVERTERS.get(browser.name)
        if converter is None:
            logger.debug(f"Skipping {browser.name}: no webdriver conversion")
            continue
        capabilities = converter(browser)
        if capabilities:
            results[browser.name] = capabilities

    return results


def supported() -> List[str]:
    """Browser families on this platform that can be converted to capabilities."""
    return [name for name in discovery.platform() if name in CONVERTERS]


# ==================== Record -> capabilities ====================

def _major_version(browser: BrowserRecord) -> str:
    match = MAJOR_VERSION.search(browser.version or "")
    if match is None:
        raise BrowserVersionError(browser.name, browser.version)
    return match.group(0)


def chrome(browser: BrowserRecord) -> Capabilities:
    return {
        "browserName": "chrome",
        "version": _major_version(browser),
        "chromeOptions": {
            "binary": browser.bin_path,
            "args": ["start-maximized"],
        },
    }


def firefox(browser: BrowserRecord) -> Capabilities:
    version = _major_version(browser)
    capabilities = DesiredCapabilities.FIREFOX.copy()
    capabilities["marionette"] = True
    capabilities["version"] = version
    capabilities["firefox_binary"] = browser.bin_path
    return capabilities


def safari(browser: BrowserRecord) -> Capabilities:
    # SafariDriver ignores custom binary paths.
    return {
        "browserName": "safari",
        "version": browser.version,
        "safari.options": {
            "skipExtensionInstallation": True,
        },
    }


def internet_explorer(browser: BrowserRecord) -> Capabilities:
    return {
        "browserName": "internet explorer",
        "version": browser.version,
    }


CONVERTERS: Mapping[str, Callable[[BrowserRecord], Optional[Capabilities]]] = MappingProxyType({
    "chrome": chrome,
    "canary": chrome,
    "firefox": firefox,
    "aurora": firefox,
    "ie": internet_explorer,
    "safari": safari,
})


def _difference(source: List[str], to_remove: List[str]) -> List[str]:
    return [value for value in source if value not in to_remove]
