"""Helpers for Kapacitor task scripts and task status payloads."""
import re
from typing import Any, Dict

from ..errors import TaskStatusError

EVERY_PATTERN = re.compile(r"every\((.*?)\)")
ALERT_KEY_PREFIX = "alert"


def batch_replace_every(script: str) -> str:
    """Run batch queries every second to keep tests fast."""
    return EVERY_PATTERN.sub("every(1s)", script)


def aggregate_alert_stats(stats: Any) -> Dict[str, int]:
    """Sum alert node counters across every ``alert*`` node.
    
    Args:
        stats: The ``stats`` section of a task response, holding ``node-stats``
        
    Returns:
        Counter name to total, e.g. {"crit": 5, "ok": 1}
        
    Raises:
        TaskStatusError: If the stats are malformed, have no alert node, or a counter is not numeric
    """
    totals: Dict[str, int] = {}
    found_alert = False
    
    if stats is None:
        stats = {}
    if not isinstance(stats, dict):
        raise TaskStatusError("kapacitor.status: wrong response from service")
    
    node_stats = stats.get("node-stats")
    if node_stats is None:
        node_stats = {}
    if not isinstance(node_stats, dict):
        raise TaskStatusError("kapacitor.status: wrong response from service")
    
    for node, counters in node_stats.items():
        if not node.startswith(ALERT_KEY_PREFIX):
            continue
        found_alert = True
        if not isinstance(counters, dict):
            raise TaskStatusError("kapacitor.status: wrong response from service")
        for name, value in counters.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TaskStatusError("kapacitor.status: wrong response from service")
            totals[name] = totals.get(name, 0) + int(value)
    
    if not found_alert:
        raise TaskStatusError("kapacitor.status: expected alert.* key to be found on stats")
    
    return totals
