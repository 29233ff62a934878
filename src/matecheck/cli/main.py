from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn
from pydantic import ValidationError

from ..config import EngineConfig
from ..engine.position import BLACK, WHITE


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="matecheck", description="Play against matecheck")
    parser.add_argument("--depth", type=int, default=None, help="Search depth in plies")
    parser.add_argument("--movetime-ms", type=int, default=None, help="Search time budget")
    parser.add_argument(
        "--mate-distance",
        action="store_true",
        default=None,
        help="Prefer shorter mates over longer ones",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command")

    play = sub.add_parser("play", help="Play a game in the terminal (default)")
    play.add_argument("--human", choices=("white", "black"), default="white")

    sub.add_parser("uci", help="Speak UCI on stdin/stdout")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level)

    try:
        config = EngineConfig.from_env().merged(
            depth=args.depth, movetime_ms=args.movetime_ms, mate_distance=args.mate_distance
        )
    except ValidationError as e:
        parser.error(f"invalid engine settings: {e}")

    if args.command == "uci":
        from ..protocol.uci.loop import run_uci

        run_uci(config=config)
    elif args.command == "serve":
        from ..protocol.http.app import create_app

        uvicorn.run(create_app(config), host=args.host, port=args.port)
    else:
        from .play import PlaySession

        human = BLACK if getattr(args, "human", "white") == "black" else WHITE
        PlaySession(config, human=human).run()


if __name__ == "__main__":
    main()
