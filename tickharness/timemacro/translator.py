"""Rewrite relative now() expressions in data lines to absolute timestamps."""
import re
import time
from typing import Callable, Optional

from ..errors import ArithmeticExpressionError, TimeExpressionError
from ..utils.logger import get_logger
from .arithmetic import evaluate
from .durations import replace_durations

logger = get_logger(__name__)

# 'now()' is case-insensitive to match InfluxQL and must follow whitespace.
# Capturing the parts on either side avoids splicing by index.
LINE_PATTERN = re.compile(r"(.*)\s+now\(\)(.*)", re.IGNORECASE)


class TimestampTranslator:
    """Translate ``now()`` macros in line protocol into nanosecond timestamps.
    
    The current time is read once, when the translator is built, so every
    ``now()`` in one data load resolves against the same instant. Build a
    new translator to pick up a fresh clock reading.
    """
    
    def __init__(self, now_ns: Optional[int] = None, clock: Callable[[], int] = time.time_ns):
        """Initialize the translator.
        
        Args:
            now_ns: Fixed current time in nanoseconds since the Unix epoch
            clock: Nanosecond clock read once when now_ns is not given
        """
        self.now_ns = now_ns if now_ns is not None else clock()
    
    def translate(self, line: str) -> str:
        """Replace the trailing ``now()`` expression with an absolute timestamp.
        
        Args:
            line: Data line, e.g. 'cpu,host=a value=1 now()-1h30m'
            
        Returns:
            The line up to the macro, a space, and the evaluated timestamp.
            Lines without a macro are returned unchanged.
            
        Raises:
            TimeExpressionError: If the expression after now() does not evaluate
        """
        match = LINE_PATTERN.search(line)
        if match is None:
            return line
        
        prefix, suffix = match.group(1), match.group(2)
        expression = replace_durations(str(self.now_ns) + suffix)
        
        try:
            timestamp = evaluate(expression)
        except ArithmeticExpressionError as e:
            raise TimeExpressionError(
                f"cannot evaluate time expression {expression!r}: {e}",
                line=line,
                expression=expression
            ) from e
        
        return f"{prefix} {timestamp}"
    
    def translate_or_original(self, line: str) -> str:
        """Translate a line, falling back to the original line on failure."""
        try:
            return self.translate(line)
        except TimeExpressionError as e:
            logger.error(
                "timestamp_translation_failed",
                line=line,
                expression=e.expression,
                error=str(e)
            )
            return line
