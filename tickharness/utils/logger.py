"""Structured logging configuration."""
import logging
import structlog
from typing import Any, Optional
from .config import get_settings

LEVEL_COLORS = {
    "DEBUG": "\033[90m",    # Gray
    "INFO": "\033[36m",     # Cyan
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",    # Red
}
RESET_COLOR = "\033[0m"

# Shown even when falsy, e.g. passed=False or attempts=0
ALWAYS_SHOWN = ("test_name", "task_id", "db", "rp", "passed", "status_code", "attempts", "error")
MAX_VALUE_LENGTH = 120


def human_readable_renderer(logger, method_name, event_dict):
    """Render one line per event: time, level, event name, then short context."""
    timestamp = event_dict.pop("timestamp", "")
    level = event_dict.pop("level", "info").upper()
    event = event_dict.pop("event", "")
    event_dict.pop("logger", None)
    exception = event_dict.pop("exception", None)
    
    clock = timestamp.split("T")[1][:8] if "T" in timestamp else timestamp[:8]
    parts = [f"[{clock}]"] if clock else []
    parts.append(f"{LEVEL_COLORS.get(level, '')}{level:8}{RESET_COLOR}")
    parts.append(f"| {event}")
    
    context = []
    for key, value in event_dict.items():
        if not value and key not in ALWAYS_SHOWN:
            continue
        text = str(value)
        if len(text) > MAX_VALUE_LENGTH:
            text = text[:MAX_VALUE_LENGTH] + "..."
        context.append(f"{key}={text}")
    if context:
        parts.append(f"({', '.join(context)})")
    
    rendered = " ".join(parts)
    if exception:
        rendered += f"\n{exception}"
    return rendered


def setup_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structured logging for the harness.
    
    Args:
        log_level: Logging level name; read from settings when omitted
        log_format: "json" or "human"; read from settings when omitted
    """
    if log_level is None or log_format is None:
        settings = get_settings()
        log_level = log_level or settings.log_level
        log_format = log_format or settings.log_format
    
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
    )
    
    if log_format.lower() == "human":
        renderer = human_readable_renderer
    else:
        renderer = structlog.processors.JSONRenderer()
    
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def print_banner(title: str, items: dict = None, width: int = 80) -> None:
    """
    Print a formatted banner for test run summaries.
    
    Args:
        title: Banner title
        items: Dictionary of key-value pairs to display
        width: Banner width
    """
    border = "=" * width
    print(f"\n{border}")
    print(f"  {title}")
    print(border)
    
    if items:
        for key, value in items.items():
            formatted_key = key.replace("_", " ").title()
            print(f"{formatted_key:.<30} {value}")
    
    print(f"{border}\n")
