"""
Entry point for running perp_datafeed as a module.

Usage:
    python -m perp_datafeed [command] [options]

Commands:
    fetch       Fetch CoinEx perpetuals + funding rates and print a summary (default)
    cached      Show cached contracts (no network)
    stats       Show cache statistics
    doctor      Run preflight checks

Options:
    --env ENV           Config environment (loads config/<env>.yaml on top of config.yaml)
    --active            cached: only contracts with status "online"
    --market MARKET     cached: a single market, e.g. BTCUSDT
"""

from __future__ import annotations

import argparse
import asyncio
import sys


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="CoinEx perpetuals datafeed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "command",
        nargs="?",
        default="fetch",
        choices=["fetch", "cached", "stats", "doctor"],
        help="Command to execute (default: fetch)",
    )
    parser.add_argument(
        "--env",
        default="development",
        help="Config environment (development/production)",
    )
    parser.add_argument(
        "--active",
        action="store_true",
        help="cached: only active contracts",
    )
    parser.add_argument(
        "--market",
        default=None,
        help="cached: show a single market",
    )

    args = parser.parse_args(argv)

    # Import here to avoid slow startup for --help
    from perp_datafeed.app.run import run_cached, run_doctor, run_fetch, run_stats

    try:
        if args.command == "fetch":
            return asyncio.run(run_fetch(env=args.env))
        elif args.command == "cached":
            return asyncio.run(run_cached(env=args.env, active_only=args.active, market=args.market))
        elif args.command == "stats":
            return asyncio.run(run_stats(env=args.env))
        elif args.command == "doctor":
            return asyncio.run(run_doctor(env=args.env))
        else:
            parser.print_help()
            return 1
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 130
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
