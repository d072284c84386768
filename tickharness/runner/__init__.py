"""Alert test case loading and execution."""
from .case_runner import CaseRunner, compare_alerts
from .schema import load_test_cases

__all__ = ["CaseRunner", "compare_alerts", "load_test_cases"]
