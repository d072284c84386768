"""Tests for the bounded polling state machine."""
import pytest
from unittest.mock import Mock
from tickharness.polling.monitor import BoundedPoller, PollState


class TestBoundedPoller:
    """Test BoundedPoller transitions and sleep spacing."""
    
    @pytest.fixture
    def sleep(self):
        """Create a fake sleep function."""
        return Mock()
    
    def test_resolves_on_first_check(self, sleep):
        """Test an immediately true check resolves without sleeping."""
        check = Mock(return_value=True)
        poller = BoundedPoller(check, attempts=10, interval=1.0, sleep=sleep)
        
        assert poller.run() is PollState.RESOLVED
        assert poller.attempts_made == 1
        sleep.assert_not_called()
    
    def test_resolves_midway(self, sleep):
        """Test the poll stops as soon as the check passes."""
        check = Mock(side_effect=[False, False, True])
        poller = BoundedPoller(check, attempts=10, interval=0.5, sleep=sleep)
        
        assert poller.run() is PollState.RESOLVED
        assert poller.attempts_made == 3
        assert sleep.call_count == 2
        sleep.assert_called_with(0.5)
    
    def test_exhausts_after_budget(self, sleep):
        """Test a never-true check fails after exactly the attempt budget."""
        check = Mock(return_value=False)
        poller = BoundedPoller(check, attempts=10, interval=1.0, sleep=sleep)
        
        assert poller.run() is PollState.EXHAUSTED
        assert check.call_count == 10
        assert poller.attempts_made == 10
        assert sleep.call_count == 9
    
    def test_step_advances_one_attempt(self, sleep):
        """Test manual stepping through the states."""
        poller = BoundedPoller(Mock(return_value=False), attempts=2, sleep=sleep)
        
        assert poller.state is PollState.POLLING
        assert poller.step() is PollState.POLLING
        assert poller.step() is PollState.EXHAUSTED
        # Terminal states do not run further checks
        assert poller.step() is PollState.EXHAUSTED
        assert poller.attempts_made == 2
    
    def test_check_errors_propagate(self, sleep):
        """Test exceptions from the check are not retried."""
        check = Mock(side_effect=ConnectionError("refused"))
        poller = BoundedPoller(check, attempts=10, sleep=sleep)
        
        with pytest.raises(ConnectionError):
            poller.run()
        assert check.call_count == 1
    
    def test_rejects_zero_attempts(self):
        """Test the attempt budget must be positive."""
        with pytest.raises(ValueError):
            BoundedPoller(Mock(), attempts=0)
