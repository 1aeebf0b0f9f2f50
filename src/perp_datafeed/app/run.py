"""
Entry points for datafeed commands.

Each command sets up the environment and runs the appropriate logic.
"""

from __future__ import annotations

import functools
from pathlib import Path

from rich.console import Console

# Load .env file BEFORE importing settings
from dotenv import load_dotenv

for env_path in [
    Path.cwd() / ".env",
    Path(__file__).parent.parent.parent.parent / ".env",  # Project root
]:
    if env_path.exists():
        load_dotenv(env_path)
        break
else:
    load_dotenv()

from perp_datafeed.app.fetch_coinex import run_fetch_coinex  # noqa: E402
from perp_datafeed.config.settings import get_settings  # noqa: E402
from perp_datafeed.domain.errors import ValidationError  # noqa: E402
from perp_datafeed.observability.logging import get_logger, setup_logging  # noqa: E402
from perp_datafeed.services.perpetuals import CoinexPerpetualsFetcher  # noqa: E402
from perp_datafeed.ui.tables import build_contracts_table, build_stats_table  # noqa: E402

console = Console()


async def run_fetch(env: str = "development") -> int:
    """Fetch CoinEx markets and funding rates, then print a summary."""
    settings = get_settings(env)
    setup_logging(settings)

    errors = settings.validate_config()
    if errors:
        raise ValidationError("Invalid configuration: " + "; ".join(errors))

    await run_fetch_coinex(functools.partial(CoinexPerpetualsFetcher, settings))
    return 0


async def run_cached(
    env: str = "development",
    *,
    active_only: bool = False,
    market: str | None = None,
) -> int:
    """Show cached contracts without touching the network."""
    settings = get_settings(env)
    setup_logging(settings)

    async with CoinexPerpetualsFetcher(settings) as fetcher:
        if market:
            contract = await fetcher.get_cached_perpetual_by_market(market)
            if contract is None:
                console.print(f"[yellow]No cached contract for {market}[/yellow]")
                return 1
            contracts = [contract]
        elif active_only:
            contracts = await fetcher.get_active_cached_perpetuals()
        else:
            contracts = await fetcher.get_cached_perpetuals()

    title = f"CoinEx perpetuals ({len(contracts)})"
    console.print(build_contracts_table(contracts, title=title))
    return 0


async def run_stats(env: str = "development") -> int:
    """Print cache statistics."""
    settings = get_settings(env)
    setup_logging(settings)

    async with CoinexPerpetualsFetcher(settings) as fetcher:
        stats = await fetcher.get_database_stats()

    console.print(build_stats_table(stats))
    return 0


async def run_doctor(env: str = "development") -> int:
    """Run preflight checks."""
    settings = get_settings(env)
    setup_logging(settings)
    logger = get_logger(__name__)

    logger.info("Running preflight checks...")

    checks_passed = 0
    checks_failed = 0

    # Check 1: Configuration
    errors = settings.validate_config()
    if errors:
        for error in errors:
            logger.error(f"[FAIL] {error}")
        checks_failed += 1
    else:
        logger.info(f"[OK] Configuration valid (env={settings.env}, coinex={settings.coinex.base_url})")
        checks_passed += 1

    # Check 2: Database directory
    db_dir = Path(settings.database.path).parent
    if db_dir.exists():
        logger.info("[OK] Database directory exists")
    else:
        db_dir.mkdir(parents=True, exist_ok=True)
        logger.info("[OK] Database directory created")
    checks_passed += 1

    # Check 3: Logs directory
    logs_dir = Path(settings.logging.log_dir)
    if logs_dir.exists():
        logger.info("[OK] Logs directory exists")
    else:
        logs_dir.mkdir(parents=True, exist_ok=True)
        logger.info("[OK] Logs directory created")
    checks_passed += 1

    logger.info(f"Preflight: {checks_passed} passed, {checks_failed} failed")

    return 0 if checks_failed == 0 else 1
