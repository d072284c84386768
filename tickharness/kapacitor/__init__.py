"""Kapacitor integration module."""
from .client import KapacitorClient
from .stats import aggregate_alert_stats, batch_replace_every

__all__ = ["KapacitorClient", "aggregate_alert_stats", "batch_replace_every"]
