"""InfluxDB integration module."""
from .client import InfluxDBClient

__all__ = ["InfluxDBClient"]
