"""
Command line entry point.

Usage:
  price-resolver serve [--host 127.0.0.1] [--port 8000] [--reload]
  price-resolver quote AAPL MSFT [--type stock] [--pause 0.6]
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__, config


def _cmd_serve(args: argparse.Namespace) -> int:
    try:
        import uvicorn
    except ImportError:
        print("uvicorn not installed. Install with: pip install 'price-resolver[api]'", file=sys.stderr)
        return 1

    uvicorn.run("price_resolver.api:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def _cmd_quote(args: argparse.Namespace) -> int:
    from .service import create_default_service

    service = create_default_service()
    pause = args.pause if args.pause is not None else config.batch_pause_s()
    results = service.get_prices(((args.type, s) for s in args.symbols), pause_s=pause)
    for result in results:
        print(json.dumps(result.to_payload()))
    return 0 if results else 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="price-resolver",
        description="Best-effort current prices for stocks and crypto",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the price API server")
    serve.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")
    serve.add_argument("--reload", action="store_true", help="Enable auto-reload for development")
    serve.set_defaults(func=_cmd_serve)

    quote = sub.add_parser("quote", help="Resolve one or more symbols and print JSON lines")
    quote.add_argument("symbols", nargs="+", help="Ticker symbols, e.g. AAPL BTC")
    quote.add_argument("--type", default="stock", choices=["stock", "crypto"], help="Asset class")
    quote.add_argument(
        "--pause", type=float, default=None, help="Seconds between provider lookups (default: config)"
    )
    quote.set_defaults(func=_cmd_quote)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
