"""
Tests for Config
"""

import json

import pytest

from config import Config, ConfigError


@pytest.fixture
def cfg():
    return Config(validate=False, ensure_directories=False)


class TestValidation:
    def test_defaults_are_valid(self, cfg):
        cfg.validate()

    @pytest.mark.parametrize(
        "section,key,value,message",
        [
            ("game", "gateway", "carrier-pigeon", "Invalid gateway"),
            ("game", "default_mode", "gems", "Invalid default mode"),
            ("game", "reveal_delay", -1, "reveal_delay"),
            ("game", "default_bet_tiers", [], "default_bet_tiers"),
            ("game", "default_bet_tiers", [5, 0], "default_bet_tiers"),
            ("simulation", "starting_balance", -10, "starting_balance"),
            ("simulation", "win_multiplier", 0, "win_multiplier"),
            ("network", "base_url", "ftp://example.com", "Invalid base_url"),
            ("network", "timeout", 0, "timeout"),
            ("logging", "level", "LOUD", "Invalid log level"),
        ],
    )
    def test_invalid_values(self, cfg, section, key, value, message):
        cfg.set(section, key, value)

        with pytest.raises(ConfigError, match=message):
            cfg.validate()


class TestOverlay:
    def test_set_overrides_defaults(self, cfg):
        assert cfg.get("game", "gateway") in ("http", "simulated")

        cfg.set("game", "gateway", "simulated")

        assert cfg.get("game", "gateway") == "simulated"
        assert cfg.section("game")["gateway"] == "simulated"

    def test_missing_key_returns_default(self, cfg):
        assert cfg.get("game", "missing", 42) == 42
        assert cfg.get("nope", "missing") is None

    def test_instances_do_not_share_overrides(self, cfg):
        other = Config(validate=False, ensure_directories=False)
        cfg.set("network", "timeout", 3.0)

        assert other.get("network", "timeout") == Config.NETWORK["timeout"]
        assert cfg.get("network", "timeout") == 3.0


class TestFiles:
    def test_load_from_file(self, cfg, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"GAME": {"reveal_delay": 0.25}, "ignored": 5}))

        cfg.load_from_file(path)

        assert cfg.get("game", "reveal_delay") == 0.25

    def test_missing_file_is_ignored(self, cfg, tmp_path):
        cfg.load_from_file(tmp_path / "absent.json")
        assert cfg.get("game", "game_id") == Config.GAME["game_id"]

    def test_invalid_json(self, cfg, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            cfg.load_from_file(path)

    def test_non_object_json(self, cfg, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError):
            cfg.load_from_file(path)

    def test_save_omits_access_token(self, cfg, tmp_path):
        cfg.set("auth", "access_token", "secret-token")
        path = tmp_path / "out" / "config.json"

        cfg.save_to_file(path)

        saved = json.loads(path.read_text())
        assert "access_token" not in saved["auth"]
        assert "files" not in saved
        assert "secret-token" not in path.read_text()
        assert saved["game"]["game_endpoint"] == "game/rock-paper-scissors-minus-one"

    def test_ensure_directories(self, tmp_path, monkeypatch):
        monkeypatch.setenv("RPS_CONFIG_DIR", str(tmp_path / "cfg"))
        monkeypatch.setenv("RPS_LOG_DIR", str(tmp_path / "logs"))

        status = Config(validate=True, ensure_directories=True).ensure_directories()

        assert status == {"config_dir": True, "log_dir": True}
        assert (tmp_path / "logs").is_dir()
