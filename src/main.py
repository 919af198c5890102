"""
Main Entry Point for the Rock-Paper-Scissors-Minus-One client
Plays one round from the command line
"""

__version__ = "1.0.0"

import argparse
import asyncio
import logging
import random
import sys

from config import ConfigError, config
from core import BetTierSelector, GameStateMachine
from gateway import create_gateway
from models import Choice, CurrencyMode, GamePhase
from services import Events, ResultNotifier, cleanup_logging, setup_logging

EXIT_OK = 0
EXIT_WAGER_REFUSED = 1
EXIT_CONFIG_ERROR = 2
EXIT_INCOMPLETE = 3


class Application:
    """
    Command line round player
    Wires config, gateway, notifier and state machine for one session
    """

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.logger = logging.getLogger(__name__)
        self.rng = random.Random(args.seed)
        self.notifier = ResultNotifier(name="cli")
        self.selector = BetTierSelector(
            self.notifier,
            tiers=config.get("game", "default_bet_tiers"),
            currency_mode=CurrencyMode(args.mode or config.get("game", "default_mode")),
        )
        self.gateway = create_gateway(config, rng=random.Random(args.seed))
        self.machine = GameStateMachine(
            gateway=self.gateway,
            notifier=self.notifier,
            selector=self.selector,
            rng=self.rng,
            reveal_delay=config.get("game", "reveal_delay"),
        )
        self._setup_event_handlers()

    def _setup_event_handlers(self):
        self.notifier.subscribe(Events.CHOICE_REVEALED, self._handle_choice_revealed)
        self.notifier.subscribe(Events.CHOICE_REMOVED, self._handle_choice_removed)
        self.notifier.subscribe(Events.WAGER_FAILED, self._handle_wager_failed)
        self.notifier.subscribe(Events.BALANCE_CHANGED, self._handle_balance_changed)
        self.notifier.subscribe(Events.ROUND_RESULT_READY, self._handle_result)

    def _handle_choice_revealed(self, event):
        data = event["data"]
        suffix = "" if data["authoritative"] else " (offline)"
        print(f"Bot reveals {data['choice']}{suffix}")

    def _handle_choice_removed(self, event):
        data = event["data"]
        print(f"{data['side'].capitalize()} removes {data['choice']}")

    def _handle_wager_failed(self, event):
        data = event["data"]
        print(f"Bet refused: {data['error']}", file=sys.stderr)

    def _handle_balance_changed(self, event):
        data = event["data"]
        print(f"Balance {data['delta']:+d} {data['currency']}")

    def _handle_result(self, event):
        data = event["data"]
        print(f"{data['player_hand']} vs {data['bot_hand']}: {data['result'].upper()}")

    def _picks(self) -> list[Choice]:
        if self.args.picks:
            return [Choice(p) for p in self.args.picks]
        return self.rng.sample(list(Choice), 2)

    async def play_round(self) -> int:
        """Run one round end to end. Returns the process exit code."""
        try:
            outcome = await self.machine.place_bet(self.args.bet)
            if not outcome.accepted:
                return EXIT_WAGER_REFUSED

            picks = self._picks()
            print(f"Player picks {picks[0].value} and {picks[1].value}")
            for pick in picks:
                if not await self.machine.select_choice(pick):
                    print(f"Pick {pick.value} rejected", file=sys.stderr)
                    return EXIT_INCOMPLETE

            discard = Choice(self.args.remove) if self.args.remove else picks[-1]
            if not await self.machine.remove_choice(discard):
                print(f"Cannot remove {discard.value}: not one of the picks", file=sys.stderr)
                return EXIT_INCOMPLETE

            if self.machine.phase is not GamePhase.ROUND_COMPLETE:
                return EXIT_INCOMPLETE
            return EXIT_OK
        finally:
            await self.gateway.close()


def build_parser() -> argparse.ArgumentParser:
    hands = [c.value for c in Choice]
    parser = argparse.ArgumentParser(
        description="Rock-Paper-Scissors-Minus-One - play one round",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --gateway simulated --bet 5 --picks rock paper --remove paper
  %(prog)s --mode sweeps --bet 1
        """,
    )
    parser.add_argument("--mode", choices=[m.value for m in CurrencyMode], help="Currency to play with")
    parser.add_argument("--bet", type=int, help="Bet amount (defaults to the lowest tier)")
    parser.add_argument("--picks", nargs=2, choices=hands, metavar="HAND", help="Two distinct hands")
    parser.add_argument("--remove", choices=hands, help="Which picked hand to discard")
    parser.add_argument("--gateway", choices=["http", "simulated"], help="Backend to play against")
    parser.add_argument("--base-url", help="Backend base URL")
    parser.add_argument("--seed", type=int, help="Seed for local draws")
    parser.add_argument("--reveal-delay", type=float, help="Seconds between bot reveals")
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Console log level"
    )
    return parser


def apply_overrides(args: argparse.Namespace):
    """Layer command line flags over the environment-derived config"""
    if args.gateway:
        config.set("game", "gateway", args.gateway)
    if args.base_url:
        config.set("network", "base_url", args.base_url)
    if args.reveal_delay is not None:
        config.set("game", "reveal_delay", args.reveal_delay)
    if args.seed is not None:
        config.set("simulation", "seed", args.seed)
    if args.log_level:
        config.set("logging", "level", args.log_level)


def main(argv: list[str] | None = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    if args.picks and args.picks[0] == args.picks[1]:
        print("--picks must name two different hands", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    if args.remove and args.picks and args.remove not in args.picks:
        print("--remove must be one of --picks", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    apply_overrides(args)
    logger = setup_logging({"log_level": config.get("logging", "level")})

    try:
        config.validate()
    except ConfigError as e:
        logger.critical(str(e))
        return EXIT_CONFIG_ERROR

    try:
        app = Application(args)
        return asyncio.run(app.play_round())
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return EXIT_INCOMPLETE
    finally:
        cleanup_logging()


if __name__ == "__main__":
    sys.exit(main())
