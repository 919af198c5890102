"""
Tests for gateway factory functions
"""

import pytest

from config import Config
from gateway import HttpGateway, SimulatedGateway, create_gateway


@pytest.fixture
def app_config():
    return Config(validate=False, ensure_directories=False)


class TestCreateGateway:
    def test_http_from_config(self, app_config):
        app_config.set("game", "gateway", "http")
        app_config.set("network", "base_url", "https://backend.test/")
        app_config.set("auth", "access_token", "tok")

        gateway = create_gateway(app_config)

        assert isinstance(gateway, HttpGateway)
        assert gateway.base_url == "https://backend.test"
        assert gateway.game_id == 1104
        assert gateway.tokens.auth_headers() == {"Authorization": "tok"}

    def test_simulated_from_config(self, app_config):
        app_config.set("game", "gateway", "simulated")
        app_config.set("simulation", "starting_balance", 42)

        gateway = create_gateway(app_config)

        assert isinstance(gateway, SimulatedGateway)
        assert gateway.balance() == 42
        assert gateway.get_mode_name() == "simulated"

    def test_unknown_kind(self, app_config):
        app_config.set("game", "gateway", "carrier-pigeon")

        with pytest.raises(ValueError):
            create_gateway(app_config)
