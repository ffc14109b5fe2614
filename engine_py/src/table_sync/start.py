#!/usr/bin/env python3
"""Startup script for the table sync console client"""

import argparse
import asyncio
import logging

from .config import ClientConfig
from .main import run_session


def parse_args(config: ClientConfig) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Card table sync console client")
    parser.add_argument("--scheme", default=config.scheme, help=f"ws or wss (default: {config.scheme})")
    parser.add_argument("--host", default=config.host, help=f"Relay host (default: {config.host})")
    parser.add_argument("--port", type=int, default=config.port, help=f"Relay port (default: {config.port})")
    parser.add_argument("-n", "--name", default="Player", help="Player name (default: Player)")
    parser.add_argument("-g", "--game-id", default=None, help="Game to join (default: let the server choose)")
    parser.add_argument("--deal", action="store_true", help="Ask the server to deal after joining")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args()


def main():
    config = ClientConfig.from_env()
    args = parse_args(config)
    config.scheme = args.scheme
    config.host = args.host
    config.port = args.port

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    print(f"🃏 Connecting to {config.url} as {args.name}")

    try:
        asyncio.run(run_session(config, args.name, args.game_id, args.deal))
    except KeyboardInterrupt:
        print("Interrupted")


if __name__ == "__main__":
    main()
