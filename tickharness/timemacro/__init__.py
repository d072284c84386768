"""Timestamp macro translation for test data lines."""
from .arithmetic import evaluate
from .durations import parse_duration, replace_durations
from .translator import TimestampTranslator

__all__ = ["TimestampTranslator", "evaluate", "parse_duration", "replace_durations"]
