"""Tests for now() timestamp macro translation."""
import pytest
from unittest.mock import Mock
from tickharness.errors import TimeExpressionError
from tickharness.timemacro.translator import TimestampTranslator

NOW = 1257894000000000000
HOUR = 3_600_000_000_000
MINUTE = 60_000_000_000


class TestTimestampTranslator:
    """Test TimestampTranslator against a fixed clock."""
    
    @pytest.fixture
    def translator(self):
        """Create a translator pinned to NOW."""
        return TimestampTranslator(now_ns=NOW)
    
    @pytest.mark.parametrize("line", [
        "cpu,host=a value=1",
        "cpu,host=a value=1 1257894000000000000",
        "cpu value=1 now",
        "",
    ])
    def test_lines_without_macro_unchanged(self, translator, line):
        """Test lines with no now() token pass through."""
        assert translator.translate(line) == line
    
    def test_subtract_hour(self, translator):
        """Test a simple relative offset."""
        assert translator.translate("INSERT x now()-1h") == f"INSERT x {NOW - HOUR}"
    
    def test_bare_now(self, translator):
        """Test now() with no offset resolves to the clock value."""
        assert translator.translate("cpu value=1 now()") == f"cpu value=1 {NOW}"
    
    def test_case_insensitive_with_nested_durations(self, translator):
        """Test mixed-case token and parenthesised duration arithmetic."""
        result = translator.translate("INSERT x Now()+ (1h-30m)")
        assert result == f"INSERT x {NOW + HOUR - 30 * MINUTE}"
    
    def test_combined_duration(self, translator):
        """Test combined literals like 1h30m."""
        assert translator.translate("cpu value=1 NOW()-1h30m") == f"cpu value=1 {NOW - 90 * MINUTE}"
    
    def test_result_is_plain_integer(self, translator):
        """Test the timestamp has no decimal point or exponent."""
        result = translator.translate("cpu value=1 now()-(1h-5m)")
        timestamp = result.rsplit(" ", 1)[1]
        assert timestamp.isdigit()
        assert int(timestamp) == NOW - (HOUR - 5 * MINUTE)
    
    def test_whitespace_before_token_preserved(self, translator):
        """Test only the character right before now() is replaced by the separator."""
        assert translator.translate("cpu value=1   now()") == f"cpu value=1   {NOW}"
        assert translator.translate("cpu value=1\tnow()") == f"cpu value=1 {NOW}"
    
    def test_token_needs_leading_whitespace(self, translator):
        """Test now() glued to other text is not a macro."""
        line = "cpu value=1,tag=xnow()-1h"
        assert translator.translate(line) == line
    
    def test_invalid_expression_raises_with_original_line(self, translator):
        """Test evaluation failures keep the untranslated line."""
        line = "cpu value=1 now()-1d"
        with pytest.raises(TimeExpressionError) as exc_info:
            translator.translate(line)
        
        assert exc_info.value.line == line
        assert exc_info.value.expression == f"{NOW}-1d"
    
    def test_translate_or_original_falls_back(self, translator):
        """Test the data-loading path keeps the original line on failure."""
        line = "cpu value=1 now()-abc"
        assert translator.translate_or_original(line) == line
    
    def test_clock_read_once(self):
        """Test the clock is sampled at construction and reused."""
        clock = Mock(side_effect=[NOW, NOW + HOUR])
        translator = TimestampTranslator(clock=clock)
        
        first = translator.translate("a now()")
        second = translator.translate("b now()")
        
        assert first == f"a {NOW}"
        assert second == f"b {NOW}"
        clock.assert_called_once()
    
    def test_explicit_now_skips_clock(self):
        """Test an injected now_ns wins over the clock."""
        clock = Mock(return_value=0)
        translator = TimestampTranslator(now_ns=NOW, clock=clock)
        
        assert translator.now_ns == NOW
        clock.assert_not_called()
