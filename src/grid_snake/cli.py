"""Command-line entry point for Grid Snake."""

from __future__ import annotations

import argparse
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grid-snake",
        description="Grid Snake session server and headless simulation tools.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the HTTP/WebSocket server.")
    serve_p.add_argument("--host", type=str, default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play headless games with random turns.",
    )
    sim_p.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON config file (other flags override it).",
    )
    sim_p.add_argument("--games", type=int, default=10)
    sim_p.add_argument("--max-ticks", type=int, default=1_000)
    sim_p.add_argument("--turn-probability", type=float, default=0.2)
    sim_p.add_argument("--seed", type=int, default=0)
    sim_p.add_argument("--rows", type=int, default=None)
    sim_p.add_argument("--cols", type=int, default=None)
    sim_p.add_argument("--initial-length", type=int, default=None)
    sim_p.add_argument(
        "--consumption-timing", type=str, default=None,
        choices=["pre_step", "post_step"],
    )

    # --- config ---
    config_p = sub.add_parser(
        "config", help="Write the default configuration to a JSON file.",
    )
    config_p.add_argument("output", help="Path for the config file.")

    return parser


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from grid_snake.server.app import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def _run_simulate(args: argparse.Namespace) -> int:
    from grid_snake.config import GameConfig
    from grid_snake.simulate import simulate

    config = GameConfig.load(args.config) if args.config else GameConfig()

    flag_map = {
        "rows": "rows",
        "cols": "cols",
        "initial_length": "initial_length",
        "consumption_timing": "consumption_timing",
    }
    overrides = {
        cfg_name: getattr(args, cli_name)
        for cli_name, cfg_name in flag_map.items()
        if getattr(args, cli_name, None) is not None
    }
    try:
        if overrides:
            config = config.replace(**overrides)
        result = simulate(
            config,
            games=args.games,
            max_ticks=args.max_ticks,
            turn_probability=args.turn_probability,
            seed=args.seed,
        )
    except ValueError as exc:
        logger.error("Invalid simulation settings: %s", exc)
        return 2
    print(result.summary())  # noqa: T201
    return 0


def _run_config(args: argparse.Namespace) -> int:
    from grid_snake.config import GameConfig

    GameConfig().save(args.output)
    print(f"Wrote default config to {args.output}")  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``grid-snake`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "serve": _run_serve,
        "simulate": _run_simulate,
        "config": _run_config,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
