"""Test harness for InfluxDB and Kapacitor alert tasks."""
from .influxdb import InfluxDBClient
from .kapacitor import KapacitorClient
from .timemacro import TimestampTranslator

__all__ = ["InfluxDBClient", "KapacitorClient", "TimestampTranslator"]

__version__ = "0.1.0"
