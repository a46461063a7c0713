# main.py
"""Command-line entry point for the Veritas validation pipeline."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from veritas.analyzers import ClaudeSentimentClassifier, KeywordSentimentClassifier, SentimentClassifier
from veritas.collectors import Collector, YFinanceMarketProvider
from veritas.config.settings import Settings
from veritas.orchestrator import (
    ProgressUpdate,
    ValidationOrchestrator,
    get_status_message,
    is_sufficient_for_analysis,
)
from veritas.scoring import SourceReliabilityTracker
from veritas.simulation import ScenarioRunner, SimulatedMarket, SimulatorEngine
from veritas.simulation.scenarios import default_scenarios
from veritas.validators import default_validators


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)


def load_config(config_path: Path) -> Settings:
    """Load settings from YAML, falling back to defaults when the file is absent.

    Raises:
        SystemExit: If the YAML file exists but cannot be parsed.
    """
    load_dotenv()

    if not config_path.exists():
        logger.info(f"{config_path} not found, using default settings")
        return Settings()

    try:
        settings = Settings.from_yaml(config_path)
        logger.info(f"✓ Settings loaded from {config_path}")
    except Exception as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)

    return settings


def build_classifier(settings: Settings, symbol: str) -> SentimentClassifier:
    """Claude classifier when enabled and keyed, keyword classifier otherwise."""
    claude = settings.classifiers.claude
    if claude.enabled and settings.anthropic.api_key:
        logger.info(f"✓ Claude sentiment classifier enabled ({claude.model})")
        return ClaudeSentimentClassifier(
            api_key=settings.anthropic.api_key,
            model=claude.model,
            max_tokens=claude.max_tokens,
            rate_limit_per_minute=claude.rate_limit_per_minute,
            symbol=symbol,
        )
    if claude.enabled:
        logger.warning("ANTHROPIC_API_KEY not set - using keyword sentiment classifier")
    return KeywordSentimentClassifier()


def log_progress(update: ProgressUpdate) -> None:
    stages = ", ".join(c.value for c in update.completed_stages) or "none"
    logger.info(f"Progress {update.progress}% [{update.state.value}] completed: {stages}")


async def run_scenarios(settings: Settings) -> int:
    engine = SimulatorEngine(settings.simulation, settings.validators)
    runner = ScenarioRunner(
        engine,
        default_scenarios(hang_seconds=settings.simulation.hang_seconds),
        settings=settings.simulation,
    )
    report = await runner.run_all()

    logger.info("=" * 60)
    for line in report.render():
        logger.info(line)
    return 0 if report.all_passed else 1


async def run_demo(settings: Settings, symbol: str) -> int:
    """Validate one symbol with a live Yahoo Finance quote.

    Yahoo Finance is the only live provider; the remaining providers are
    simulated around its quote so the full pipeline can run.
    """
    live = YFinanceMarketProvider()
    try:
        quote = await live.fetch(symbol, context=None)
    except Exception as e:
        logger.error(f"Failed to fetch a live quote for {symbol}: {e}")
        return 1
    logger.info(f"✓ Live quote for {symbol}: ${quote['price']:,.2f}")

    market = SimulatedMarket(
        symbol=symbol,
        base_price=quote["price"],
        volume_24h=quote.get("volume_24h") or 1e9,
        change_24h_percent=quote.get("change_24h_percent") or 0.0,
        seed=settings.simulation.seed,
    )
    providers = [
        live,
        *market.market_providers(count=1),
        *market.social_providers(),
        *market.onchain_providers(),
        *market.news_providers(),
    ]
    logger.warning("Social, on-chain and news providers are simulated")

    tracker = None
    if settings.reliability.enabled:
        tracker = SourceReliabilityTracker(settings.reliability.data_dir)

    orchestrator = ValidationOrchestrator(
        collector=Collector(providers, settings.collectors),
        validators=default_validators(settings.validators, build_classifier(settings, symbol)),
        settings=settings.orchestrator,
        reliability_tracker=tracker,
    )
    result = await orchestrator.run(symbol, progress_callback=log_progress)

    print(result.data_quality_summary)
    logger.info(get_status_message(result))
    sufficient = is_sufficient_for_analysis(result, settings.orchestrator.minimum_confidence)
    logger.info(f"Sufficient for analysis: {sufficient}")
    return 0 if sufficient else 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cross-validate crypto market data")
    parser.add_argument("--config", type=Path, default=Path("config/settings.yaml"))
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("simulate", help="run the built-in simulation scenarios")

    demo = sub.add_parser("demo", help="validate a symbol using a live Yahoo Finance quote")
    demo.add_argument("symbol", nargs="?", default=None)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    settings = load_config(args.config)

    logger.info("=" * 60)
    logger.info(f"Starting {settings.system.name} v{settings.system.version}")
    logger.info("=" * 60)

    if args.command == "simulate":
        return asyncio.run(run_scenarios(settings))
    return asyncio.run(run_demo(settings, args.symbol or settings.system.default_symbol))


if __name__ == "__main__":
    sys.exit(main())
