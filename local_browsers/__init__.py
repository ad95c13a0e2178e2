"""
Local browser capabilities for webdriver test runners.

Resolves browser names into webdriver capability descriptors for the
browsers installed on this machine:
- normalize: mixed names / descriptor objects -> names
- supported: families convertible on this platform
- detect: installed families -> capabilities
- expand: requested names -> ordered capabilities
"""
__version__ = "0.1.0"

from .browsers import (
    BrowserError,
    BrowserNotInstalledError,
    BrowserVersionError,
    UnsupportedBrowserError,
    detect,
    expand,
    normalize,
    supported,
)

__all__ = [
    "__version__",
    "BrowserError",
    "BrowserNotInstalledError",
    "BrowserVersionError",
    "UnsupportedBrowserError",
    "detect",
    "expand",
    "normalize",
    "supported",
]
