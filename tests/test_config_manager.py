import json

import pytest

from insider_locator.config.config_manager import (
    ConfigError,
    ConfigManager,
    ConfigSchema,
    create_default_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("ITL_NETWORK_TIMEOUT", "ITL_DETECTION_ANONYMIZATION_TOKENS", "ITL_GENERAL_COLORS_ENABLED",
                "ITL_GENERAL_LOG_LEVEL", "ITL_SERVICES_IP_API_URL", "ITL_SERVICES_POSITIONING_API_KEY",
                "ITL_DETECTION_VIRTUALIZATION_MARKERS"):
        monkeypatch.delenv(key, raising=False)


def test_defaults_are_valid():
    config = ConfigManager()
    config.validate()
    assert config.get("network.timeout") == 8.0
    assert config.get("detection.virtualization_markers") == ["VirtualBox", "VMware", "KVM"]


def test_missing_file_keeps_defaults(tmp_path):
    config = ConfigManager(str(tmp_path / "absent.json"))

    assert config.load() is False
    assert config.config == ConfigSchema.get_defaults()


def test_load_merges_over_defaults(tmp_path):
    path = tmp_path / "itl.json"
    path.write_text(json.dumps({
        "network": {"timeout": 5},
        "detection": {"anonymization_tokens": ["vpn", "hetzner"]},
    }))

    config = ConfigManager(str(path))

    assert config.load() is True
    assert config.get("network.timeout") == 5
    assert config.get("network.user_agent") == "insider-locator/1.0"
    assert config.get("detection.anonymization_tokens") == ["vpn", "hetzner"]
    assert config.get("services.ip_api_url") == "http://ip-api.com/json"


@pytest.mark.parametrize("content", [
    {"network": {"timeout": 500}},
    {"general": {"log_level": "LOUD"}},
    {"services": {"positioning_url": "ftp://example.com"}},
    {"detection": {"virtualization_markers": "VMware"}},
])
def test_invalid_config_raises(tmp_path, content):
    path = tmp_path / "itl.json"
    path.write_text(json.dumps(content))

    config = ConfigManager(str(path))
    with pytest.raises(ConfigError):
        config.load()
    assert config.get("network.timeout") == 8.0


def test_unparsable_config_raises(tmp_path):
    path = tmp_path / "itl.json"
    path.write_text("{oops")

    with pytest.raises(ConfigError):
        ConfigManager(str(path)).load()


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("ITL_NETWORK_TIMEOUT", "3")
    monkeypatch.setenv("ITL_DETECTION_ANONYMIZATION_TOKENS", "vpn, tor ,hetzner")
    monkeypatch.setenv("ITL_GENERAL_COLORS_ENABLED", "false")

    config = ConfigManager()

    assert config.get("network.timeout") == 3
    assert config.get("detection.anonymization_tokens") == ["vpn", "tor", "hetzner"]
    assert config.get("general.colors_enabled") is False


def test_get_unknown_key_returns_default():
    assert ConfigManager().get("nope.nothing", "fallback") == "fallback"


def test_get_returns_copies():
    config = ConfigManager()
    config.get("detection.anonymization_tokens").append("mutated")
    assert "mutated" not in config.get("detection.anonymization_tokens")


def test_set_and_save_round_trip(tmp_path):
    path = tmp_path / "saved.json"
    config = ConfigManager(str(path))
    config.set("general.log_level", "DEBUG")
    assert config.modified

    assert config.save() is True
    assert not config.modified

    reloaded = ConfigManager(str(path))
    reloaded.load()
    assert reloaded.get("general.log_level") == "DEBUG"


def test_create_default_config(tmp_path):
    path = tmp_path / "default.json"

    assert create_default_config(str(path)) is True
    assert json.loads(path.read_text()) == ConfigSchema.get_defaults()


@pytest.mark.parametrize("name, value", [
    ("ITL_NETWORK_TIMEOUT", "0"),
    ("ITL_NETWORK_TIMEOUT", "abc"),
    ("ITL_GENERAL_COLORS_ENABLED", "maybe"),
    ("ITL_GENERAL_LOG_LEVEL", "LOUD"),
    ("ITL_SERVICES_IP_API_URL", "ip-api.com"),
])
def test_invalid_environment_override_raises(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigError):
        ConfigManager()


def test_invalid_environment_override_raises_on_load(tmp_path, monkeypatch):
    path = tmp_path / "itl.json"
    path.write_text(json.dumps({"network": {"timeout": 5}}))
    config = ConfigManager(str(path))

    monkeypatch.setenv("ITL_NETWORK_TIMEOUT", "0")
    with pytest.raises(ConfigError):
        config.load()
    assert config.get("network.timeout") == 8.0


def test_environment_beats_config_file(tmp_path, monkeypatch):
    path = tmp_path / "itl.json"
    path.write_text(json.dumps({"network": {"timeout": 5}}))
    monkeypatch.setenv("ITL_NETWORK_TIMEOUT", "12.5")

    config = ConfigManager(str(path))
    config.load()

    assert config.get("network.timeout") == 12.5


def test_environment_values_follow_setting_types(monkeypatch):
    monkeypatch.setenv("ITL_SERVICES_POSITIONING_API_KEY", "12345")
    monkeypatch.setenv("ITL_DETECTION_VIRTUALIZATION_MARKERS", "QEMU")

    config = ConfigManager()

    assert config.get("services.positioning_api_key") == "12345"
    assert config.get("detection.virtualization_markers") == ["QEMU"]
