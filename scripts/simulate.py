#!/usr/bin/env python3
"""Run a concurrent loan workflow simulation.

Builds the loan service from environment configuration (see
``LoanOriginationConfig.from_env``), then drives ``--loans`` loans from
proposal to disbursement on a thread pool and prints a summary.

Examples::

    python scripts/simulate.py --loans 500 --workers 16 --seed 42
    PUBLISHER_BACKEND=kafka KAFKA_BOOTSTRAP_SERVERS=kafka:9092 python scripts/simulate.py
"""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_origination.bootstrap import build_service
from loan_origination.config import LoanOriginationConfig, PublisherConfig
from loan_origination.exceptions import ConfigurationError
from loan_origination.logging import configure_logging
from loan_origination.scenarios.loan_workflow import LoanWorkflowScenario

logger = logging.getLogger("loan_origination.simulate")


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Simulate concurrent loan origination workflows"
    )
    parser.add_argument(
        "--loans",
        type=int,
        default=None,
        help="Number of loans to run (default: SIM_LOANS or 100)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Thread pool size (default: SIM_WORKERS or 8)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--publisher",
        choices=["kafka", "memory", "log"],
        default=None,
        help="Event publisher backend (default: PUBLISHER_BACKEND or log)",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default=None,
        help="Log output format",
    )

    args = parser.parse_args()

    try:
        config = LoanOriginationConfig.from_env()
        if args.publisher:
            config.publisher = PublisherConfig(
                backend=args.publisher,
                loan_invested_topic=config.publisher.loan_invested_topic,
            )
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    if args.loans is not None:
        config.simulation.num_loans = args.loans
    if args.workers is not None:
        config.simulation.max_workers = args.workers
    if args.seed is not None:
        config.simulation.seed = args.seed

    try:
        configure_logging(config, args.log_format)
    except ConfigurationError as exc:
        print(f"Invalid logging configuration: {exc}", file=sys.stderr)
        return 2

    try:
        service = build_service(config)
    except ConfigurationError as exc:
        logger.critical("Cannot start loan service: %s", exc)
        return 2

    try:
        result = LoanWorkflowScenario(service, config=config.simulation).run()
    finally:
        service.publisher.close()

    print(json.dumps(result.summary(), indent=2))
    return 1 if result.failures else 0


if __name__ == "__main__":
    sys.exit(main())
