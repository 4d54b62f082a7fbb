"""
Tests for runtime configuration loading.

Covers file formats, key styles, the search order, environment
overrides and immutability of the loaded config.
"""

import dataclasses
import json

import pytest

from core.config.runtime import (
    REDACTED,
    ConfigError,
    GatewayConfig,
    get_default_config_template,
    load_gateway_config,
)


@pytest.fixture
def isolated_dirs(tmp_path, monkeypatch):
    """Run from an empty cwd with an empty home directory."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    return work, home


class TestFromDict:

    def test_defaults(self):
        config = GatewayConfig.from_dict({})

        assert config.server.url == "/trade"
        assert config.server.health_check == "/health"
        assert config.server.host == "0.0.0.0"
        assert config.server.port == 8080
        assert config.security.signing_method == "none"
        assert config.security.secret == ""
        assert config.dispatcher.type == "log"
        assert config.notifications.alert_on_startup is False
        assert dict(config.credentials) == {}

    def test_none_is_empty(self):
        assert GatewayConfig.from_dict(None) == GatewayConfig()

    def test_camel_case_keys(self):
        config = GatewayConfig.from_dict({
            "server": {
                "url": "/sms",
                "healthCheck": "/ping",
                "port": 9000,
                "logLevel": "debug",
                "security": {"signingMethod": "hash", "secret": "s3cret"},
            },
            "notifications": {"alertOnStartup": True, "webhookUrl": "http://hooks.local/x"},
        })

        assert config.server.url == "/sms"
        assert config.server.health_check == "/ping"
        assert config.server.port == 9000
        assert config.server.log_level == "DEBUG"
        assert config.security.signing_method == "hash"
        assert config.security.secret == "s3cret"
        assert config.notifications.alert_on_startup is True
        assert config.notifications.webhook_url == "http://hooks.local/x"

    def test_snake_case_keys(self):
        config = GatewayConfig.from_dict({
            "server": {
                "health_check": "/ping",
                "security": {"signing_method": "password", "secret": "abc123"},
            },
            "notifications": {"alert_on_startup": "yes"},
        })
        assert config.server.health_check == "/ping"
        assert config.security.signing_method == "password"
        assert config.notifications.alert_on_startup is True

    def test_paths_get_leading_slash(self):
        config = GatewayConfig.from_dict({"server": {"url": "trade", "healthCheck": "health"}})
        assert config.server.url == "/trade"
        assert config.server.health_check == "/health"

    def test_port_as_string(self):
        assert GatewayConfig.from_dict({"server": {"port": "8081"}}).server.port == 8081

    def test_bad_port(self):
        with pytest.raises(ConfigError):
            GatewayConfig.from_dict({"server": {"port": "eighty"}})

    def test_bad_timeout(self):
        with pytest.raises(ConfigError):
            GatewayConfig.from_dict({"dispatcher": {"timeout": "soon"}})

    def test_non_mapping_root(self):
        with pytest.raises(ConfigError):
            GatewayConfig.from_dict(["server"])

    def test_non_mapping_credentials(self):
        with pytest.raises(ConfigError):
            GatewayConfig.from_dict({"credentials": ["key"]})

    def test_signing_method_kept_verbatim(self):
        # Case folding happens at verification time
        config = GatewayConfig.from_dict({"server": {"security": {"signingMethod": "HASH"}}})
        assert config.security.signing_method == "HASH"

    @pytest.mark.parametrize("key", ["signingMethod", "signing_method"])
    def test_null_signing_method(self, key):
        with pytest.raises(ConfigError):
            GatewayConfig.from_dict({"server": {"security": {key: None, "secret": "abc123"}}})

    def test_credentials_are_opaque(self):
        credentials = {"bitfinex": {"key": "k", "secret": "s"}, "anything": [1, 2]}
        config = GatewayConfig.from_dict({"credentials": credentials})
        assert dict(config.credentials) == credentials


class TestImmutability:

    def test_frozen(self):
        config = GatewayConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.server = None
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.security.secret = "new"

    def test_credentials_read_only(self):
        config = GatewayConfig.from_dict({"credentials": {"bitfinex": {}}})
        with pytest.raises(TypeError):
            config.credentials["deribit"] = {}

    def test_source_dict_changes_do_not_leak(self):
        credentials = {"bitfinex": {}}
        config = GatewayConfig.from_dict({"credentials": credentials})
        credentials["deribit"] = {}
        assert "deribit" not in config.credentials


class TestFiles:

    def test_json_file(self, tmp_path):
        path = tmp_path / "instabot.json"
        path.write_text(json.dumps({"server": {"port": 9100}}))

        assert GatewayConfig.from_file(path).server.port == 9100

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "instabot.yaml"
        path.write_text(
            "server:\n"
            "  url: /sms\n"
            "  security:\n"
            "    signingMethod: password\n"
            "    secret: abc123\n"
            "credentials:\n"
            "  bitfinex:\n"
            "    key: k\n"
        )

        config = GatewayConfig.from_file(path)
        assert config.server.url == "/sms"
        assert config.security.secret == "abc123"
        assert dict(config.credentials) == {"bitfinex": {"key": "k"}}

    def test_yaml_empty_signing_method(self, tmp_path):
        path = tmp_path / "instabot.yaml"
        path.write_text(
            "server:\n"
            "  security:\n"
            "    signingMethod:\n"
            "    secret: abc123\n"
        )
        with pytest.raises(ConfigError):
            GatewayConfig.from_file(path)

    def test_json_null_signing_method(self, tmp_path):
        path = tmp_path / "instabot.json"
        path.write_text(json.dumps({"server": {"security": {"signingMethod": None}}}))
        with pytest.raises(ConfigError):
            load_gateway_config(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            GatewayConfig.from_file(path)

    def test_explicit_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_gateway_config(tmp_path / "nope.json")

    def test_template_is_valid(self):
        config = GatewayConfig.from_dict(json.loads(get_default_config_template()))
        assert config.security.signing_method == "hash"
        assert config.server.url == "/trade"


class TestSearchOrder:

    def test_no_files_gives_defaults(self, isolated_dirs):
        assert load_gateway_config() == GatewayConfig()

    def test_cwd_json(self, isolated_dirs):
        work, _ = isolated_dirs
        (work / "instabot.json").write_text(json.dumps({"server": {"port": 1}}))
        assert load_gateway_config().server.port == 1

    def test_json_before_hidden_and_yaml(self, isolated_dirs):
        work, _ = isolated_dirs
        (work / "instabot.json").write_text(json.dumps({"server": {"port": 1}}))
        (work / ".instabot.json").write_text(json.dumps({"server": {"port": 2}}))
        (work / "instabot.yaml").write_text("server:\n  port: 3\n")
        assert load_gateway_config().server.port == 1

    def test_yaml_in_cwd(self, isolated_dirs):
        work, _ = isolated_dirs
        (work / "instabot.yaml").write_text("server:\n  port: 3\n")
        assert load_gateway_config().server.port == 3

    def test_home_config(self, isolated_dirs):
        _, home = isolated_dirs
        config_dir = home / ".config" / "instabot"
        config_dir.mkdir(parents=True)
        (config_dir / "config.json").write_text(json.dumps({"server": {"port": 4}}))
        assert load_gateway_config().server.port == 4


class TestEnvOverrides:

    def test_no_env_returns_same_config(self):
        config = GatewayConfig()
        assert config.with_env_overrides() is config

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("INSTABOT_PORT", "9999")
        monkeypatch.setenv("INSTABOT_URL", "sms")
        monkeypatch.setenv("INSTABOT_SIGNING_METHOD", "hash")
        monkeypatch.setenv("INSTABOT_SECRET", "from-env")
        monkeypatch.setenv("INSTABOT_DISPATCHER_TYPE", "HTTP")
        monkeypatch.setenv("INSTABOT_DISPATCHER_ENDPOINT", "http://engine.local/x")
        monkeypatch.setenv("INSTABOT_ALERT_ON_STARTUP", "true")

        config = GatewayConfig.from_dict({
            "server": {"port": 8080, "security": {"signingMethod": "none"}},
            "credentials": {"bitfinex": {}},
        }).with_env_overrides()

        assert config.server.port == 9999
        assert config.server.url == "/sms"
        assert config.security.signing_method == "hash"
        assert config.security.secret == "from-env"
        assert config.dispatcher.type == "http"
        assert config.dispatcher.endpoint == "http://engine.local/x"
        assert config.notifications.alert_on_startup is True
        assert "bitfinex" in config.credentials

    def test_env_beats_file(self, isolated_dirs, monkeypatch):
        work, _ = isolated_dirs
        (work / "instabot.json").write_text(json.dumps({"server": {"port": 1}}))
        monkeypatch.setenv("INSTABOT_PORT", "2")
        assert load_gateway_config().server.port == 2

    def test_bad_env_port(self, monkeypatch):
        monkeypatch.setenv("INSTABOT_PORT", "lots")
        with pytest.raises(ConfigError):
            GatewayConfig.from_env()


class TestToDict:

    def test_redacts_secrets(self):
        config = GatewayConfig.from_dict({
            "server": {"security": {"signingMethod": "hash", "secret": "s3cret"}},
            "credentials": {"bitfinex": {"key": "k"}},
        })

        data = config.to_dict()
        assert data["server"]["security"]["secret"] == REDACTED
        assert data["credentials"] == {"bitfinex": REDACTED}
        assert "s3cret" not in json.dumps(data)

    def test_empty_secret_not_redacted(self):
        assert GatewayConfig().to_dict()["server"]["security"]["secret"] == ""

    def test_unredacted_round_trip(self):
        config = GatewayConfig.from_dict({
            "server": {"port": 9000, "security": {"signingMethod": "password", "secret": "abc123"}},
            "credentials": {"bitfinex": {"key": "k"}},
        })
        assert GatewayConfig.from_dict(config.to_dict(redact=False)) == config
