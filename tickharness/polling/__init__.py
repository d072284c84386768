"""Bounded polling helpers."""
from .monitor import BoundedPoller, PollState

__all__ = ["BoundedPoller", "PollState"]
