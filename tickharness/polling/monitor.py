"""Bounded-attempt polling for conditions that settle asynchronously."""
import time
from enum import Enum
from typing import Callable

from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_ATTEMPTS = 10
DEFAULT_INTERVAL_SECONDS = 1.0


class PollState(Enum):
    """Lifecycle of a bounded poll."""
    POLLING = "polling"
    RESOLVED = "resolved"
    EXHAUSTED = "exhausted"


class BoundedPoller:
    """Run a check until it returns True or the attempt budget runs out.
    
    Checks are spaced by ``interval`` seconds; no sleep happens after the
    final attempt. Exceptions raised by the check are not retried.
    """
    
    def __init__(
        self,
        check: Callable[[], bool],
        attempts: int = DEFAULT_ATTEMPTS,
        interval: float = DEFAULT_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        name: str = "poll"
    ):
        """Initialize the poller.
        
        Args:
            check: Condition to poll; True resolves the poll
            attempts: Maximum number of checks (must be at least 1)
            interval: Seconds to wait between checks
            sleep: Sleep function, replaceable in tests
            name: Label used in log events
        """
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        
        self.check = check
        self.attempts = attempts
        self.interval = interval
        self.sleep = sleep
        self.name = name
        self.state = PollState.POLLING
        self.attempts_made = 0
    
    def step(self) -> PollState:
        """Run one check and advance the state."""
        if self.state is not PollState.POLLING:
            return self.state
        
        if self.attempts_made > 0:
            self.sleep(self.interval)
        
        self.attempts_made += 1
        if self.check():
            self.state = PollState.RESOLVED
        elif self.attempts_made >= self.attempts:
            self.state = PollState.EXHAUSTED
        
        logger.debug(
            "poll_attempt",
            poll=self.name,
            attempt=self.attempts_made,
            state=self.state.value
        )
        return self.state
    
    def run(self) -> PollState:
        """Step until the poll resolves or exhausts its attempts."""
        while self.state is PollState.POLLING:
            self.step()
        
        logger.info(
            "poll_finished",
            poll=self.name,
            state=self.state.value,
            attempts=self.attempts_made
        )
        return self.state
