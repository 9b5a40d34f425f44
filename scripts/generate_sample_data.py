#!/usr/bin/env python3
"""Generate a sample collection portfolio and its reports.

Writes one JSON file per entity type (clients, titles, adjustments,
agreements, contacts, events) plus ``portfolio_summary.json`` with the
aging report, dashboard figures and agreement totals.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from collection_engine.config import EngineConfig
from collection_engine.exceptions import CollectionEngineError
from collection_engine.logging import setup_logging
from collection_engine.money import format_brl
from collection_engine.scenarios import CollectionPortfolioScenario
from collection_engine.sinks import ConsoleSink, JsonFileSink

logger = logging.getLogger(__name__)


def print_summary(summary: dict, output_dir: Path) -> None:
    """Print generation summary."""
    print("\n" + "=" * 60)
    print(f"Portfolio as of {summary['reference_date']:%d/%m/%Y}")
    print("=" * 60)
    for name, count in summary["entities"].items():
        print(f"{name + ':':18}{count}")
    print(f"{'open debts:':18}{summary['open_debts']}")
    print(f"{'outstanding:':18}{format_brl(summary['total_outstanding'])}")

    print("\nAging")
    for bucket in summary["aging"].buckets:
        print(f"  {bucket.label:12}{bucket.count:6}  {format_brl(bucket.value):>16}  {bucket.percentage}%")

    dashboard = summary["dashboard"]
    print(f"\nDefault rate:     {dashboard.default_rate}%")
    print(f"Recovery rate:    {dashboard.recovery_rate}%")
    print(f"Agreements:       {summary['agreements'].count}")
    print(f"\nAll files saved to: {output_dir}")
    print("=" * 60)


def main() -> None:
    """Generate the sample portfolio."""
    config = EngineConfig.from_env()

    parser = argparse.ArgumentParser(description="Generate a sample collection portfolio")
    parser.add_argument("--clients", type=int, default=25, help="Number of clients (default: 25)")
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed if config.seed is not None else 42,
        help="Random seed (default: 42)",
    )
    parser.add_argument(
        "--today",
        type=date.fromisoformat,
        default=None,
        help="Reference date as YYYY-MM-DD (default: current date)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=config.output.json_output_dir,
        help="Directory for JSON files",
    )
    parser.add_argument("--console", action="store_true", help="Also print records to stdout")
    parser.add_argument(
        "--log-format", choices=["standard", "json"], default="standard", help="Log format"
    )
    args = parser.parse_args()
    today = args.today or date.today()

    setup_logging(
        level=config.log_level,
        format_type=args.log_format,
        reference_date=today,
    )

    try:
        scenario = CollectionPortfolioScenario(
            num_clients=args.clients,
            reference_date=today,
            seed=args.seed,
            config=config,
        )
        scenario.generate()

        sinks = [JsonFileSink(args.output_dir, pretty=config.output.pretty_json)]
        if args.console:
            sinks.append(ConsoleSink(max_records=3))
        scenario.export(sinks)

        summary = scenario.get_portfolio_summary()
        sinks[0].write_document("portfolio_summary", summary)
        for sink in sinks:
            sink.close()
    except CollectionEngineError as e:
        logger.error("Sample generation failed: %s", e)
        sys.exit(1)

    if summary:
        print_summary(summary, args.output_dir)


if __name__ == "__main__":
    main()
