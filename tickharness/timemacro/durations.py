"""Human-readable duration literals ('30s', '1h30m') to nanoseconds."""
import re

# Case-sensitive to match InfluxQL. Hours, minutes and seconds only.
DURATION_PATTERN = re.compile(r"([0-9]+[smh])+")
_PART_PATTERN = re.compile(r"([0-9]+)([smh])")

NANOS_PER_UNIT = {
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

# Durations are signed 64-bit nanosecond counts on the server side
MAX_DURATION_NS = 2 ** 63 - 1


def parse_duration(text: str) -> int:
    """Parse a duration literal into nanoseconds.
    
    Args:
        text: Literal such as '5m' or '1h30m10s'
        
    Returns:
        Duration in nanoseconds
        
    Raises:
        ValueError: If the literal is malformed or overflows int64
    """
    if not text or DURATION_PATTERN.fullmatch(text) is None:
        raise ValueError(f"invalid duration {text!r}")
    
    total = 0
    for amount, unit in _PART_PATTERN.findall(text):
        total += int(amount) * NANOS_PER_UNIT[unit]
        if total > MAX_DURATION_NS:
            raise ValueError(f"invalid duration {text!r}: out of range")
    return total


def _replace_match(match: re.Match) -> str:
    literal = match.group(0)
    try:
        return str(parse_duration(literal))
    except ValueError:
        return literal


def replace_durations(expression: str) -> str:
    """Replace every duration literal in an expression with its nanoseconds.
    
    Literals that fail to parse are left as-is; the evaluator reports them.
    """
    return DURATION_PATTERN.sub(_replace_match, expression)
