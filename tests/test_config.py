import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from local_browsers.config import DiscoveryConfig, env_key


class TestDiscoveryConfig:
    def test_defaults(self):
        config = DiscoveryConfig()
        assert config.only is None
        assert config.binaries == {}
        assert config.allows("chrome")
        assert config.binary_for("chrome") is None

    def test_empty_environment(self):
        config = DiscoveryConfig.from_env({})
        assert config.to_dict() == {"only": None, "binaries": {}}

    def test_only(self):
        config = DiscoveryConfig.from_env({"LOCAL_BROWSERS_ONLY": " chrome, firefox ,,"})
        assert config.only == ["chrome", "firefox"]
        assert config.allows("firefox")
        assert not config.allows("safari")

    def test_blank_only_means_everything(self):
        config = DiscoveryConfig.from_env({"LOCAL_BROWSERS_ONLY": "  "})
        assert config.only is None

    def test_binary_overrides(self):
        config = DiscoveryConfig.from_env({
            "LOCAL_BROWSERS_CHROME": "/opt/chrome/chrome",
            "LOCAL_BROWSERS_IE": "C:\\ie\\iexplore.exe",
            "LOCAL_BROWSERS_FIREFOX": "",
            "PATH": "/usr/bin",
        })
        assert config.binaries == {
            "chrome": "/opt/chrome/chrome",
            "ie": "C:\\ie\\iexplore.exe",
        }

    def test_logging_variables_are_not_binaries(self):
        config = DiscoveryConfig.from_env({
            "LOCAL_BROWSERS_LOG_LEVEL": "DEBUG",
            "LOCAL_BROWSERS_LOG_JSON": "1",
            "LOCAL_BROWSERS_LOG_FILE": "/tmp/x.log",
            "LOCAL_BROWSERS_ONLY": "chrome",
        })
        assert config.binaries == {}

    def test_env_key(self):
        assert env_key("chrome") == "LOCAL_BROWSERS_CHROME"
        assert env_key("internet explorer") == "LOCAL_BROWSERS_INTERNET_EXPLORER"

    def test_env_key_round_trips_through_from_env(self):
        config = DiscoveryConfig.from_env({env_key("internet explorer"): "C:\\ie.exe"})
        assert config.binary_for("internet explorer") == "C:\\ie.exe"
