#!/usr/bin/env python3
"""
Command-line entry point - run alert test case files against InfluxDB and Kapacitor.

Usage:
    tickharness tests/cases/cpu_alert.json
    python -m tickharness.main cases/*.json --log-format human
"""
import argparse
import sys
from typing import List, Optional

from .errors import CaseFileError
from .influxdb.client import InfluxDBClient
from .kapacitor.client import KapacitorClient
from .runner.case_runner import CaseRunner
from .runner.schema import load_test_cases
from .utils.config import get_settings
from .utils.logger import setup_logging, get_logger, print_banner

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(description="Run Kapacitor alert test cases")
    parser.add_argument(
        "files",
        nargs="+",
        help="Test case JSON files"
    )
    parser.add_argument(
        "--log-format",
        choices=["json", "human"],
        help="Log output format (default: LOG_FORMAT setting)"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Log level (default: LOG_LEVEL setting)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Load every test case file, run the cases and print a summary.
    
    Service hosts come from INFLUXDB_HOST and KAPACITOR_HOST.
    
    Returns:
        0 when every case passes, 1 otherwise
    """
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging(
        args.log_level or settings.log_level,
        args.log_format or settings.log_format
    )
    
    cases = []
    try:
        for path in args.files:
            cases.extend(load_test_cases(path))
    except CaseFileError as e:
        logger.error("test_case_loading_failed", error=str(e))
        print(f"\n❌ {e}\n")
        return 1
    
    influxdb = InfluxDBClient(
        host=settings.influxdb_url,
        timeout=settings.request_timeout,
        poll_attempts=settings.poll_attempts,
        poll_interval=settings.poll_interval_seconds,
        default_duration=settings.default_duration,
        default_retention_policy=settings.default_retention_policy
    )
    kapacitor = KapacitorClient(
        host=settings.kapacitor_url,
        timeout=settings.request_timeout
    )
    
    results = CaseRunner(influxdb, kapacitor).run_all(cases)
    
    passed = sum(1 for result in results if result["passed"])
    summary = {
        result["name"]: "PASS" if result["passed"] else f"FAIL {result['error'] or result['actual']}"
        for result in results
    }
    summary["total"] = f"{passed}/{len(results)} passed"
    print_banner("KAPACITOR ALERT TESTS", summary)
    
    return 0 if passed == len(results) else 1


if __name__ == "__main__":
    sys.exit(main())
