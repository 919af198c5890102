"""Factory functions for creating NetworkGateway instances."""

import logging
import random
from typing import TYPE_CHECKING

from .base import NetworkGateway
from .http_gateway import HttpGateway
from .simulated import SimulatedGateway
from .tokens import TokenStore

if TYPE_CHECKING:
    from config import Config

logger = logging.getLogger(__name__)


def create_http_gateway(app_config: "Config", tokens: TokenStore | None = None) -> HttpGateway:
    """
    Create HttpGateway for the real backend.

    Args:
        app_config: Config providing NETWORK, AUTH and GAME settings
        tokens: Optional token store (defaults to AUTH['access_token'])

    Returns:
        HttpGateway bound to NETWORK['base_url']
    """
    if tokens is None:
        tokens = TokenStore(app_config.get("auth", "access_token", ""))
    if not tokens.has_token():
        logger.warning("No access token configured, requests will be unauthenticated")

    return HttpGateway(
        base_url=app_config.get("network", "base_url"),
        game_id=app_config.get("game", "game_id"),
        tokens=tokens,
        timeout=app_config.get("network", "timeout"),
        game_endpoint=app_config.get("game", "game_endpoint"),
        refresh_path=app_config.get("auth", "refresh_path"),
        max_auth_retries=app_config.get("network", "max_auth_retries", 1),
    )


def create_simulated_gateway(
    app_config: "Config", rng: random.Random | None = None
) -> SimulatedGateway:
    """
    Create SimulatedGateway for offline practice rounds.

    Args:
        app_config: Config providing SIMULATION and GAME settings
        rng: Random source (defaults to one seeded from SIMULATION['seed'])

    Returns:
        SimulatedGateway with a fresh wallet
    """
    if rng is None:
        rng = random.Random(app_config.get("simulation", "seed"))

    return SimulatedGateway(
        bet_tiers=app_config.get("game", "default_bet_tiers"),
        starting_balance=app_config.get("simulation", "starting_balance"),
        win_multiplier=app_config.get("simulation", "win_multiplier"),
        rng=rng,
    )


def create_gateway(app_config: "Config", rng: random.Random | None = None) -> NetworkGateway:
    """Create the gateway selected by GAME['gateway']."""
    kind = app_config.get("game", "gateway", "http")
    if kind == "simulated":
        gateway: NetworkGateway = create_simulated_gateway(app_config, rng=rng)
    elif kind == "http":
        gateway = create_http_gateway(app_config)
    else:
        raise ValueError(f"Unknown gateway kind: {kind!r}")

    logger.info(f"Using {gateway.get_mode_name()} gateway")
    return gateway
