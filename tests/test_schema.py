"""Tests for test case file loading and validation."""
import json
import pytest
from pathlib import Path
from tickharness.errors import CaseFileError
from tickharness.runner.schema import load_test_cases

DATA_FILE = Path(__file__).parent / "test_data" / "alert_cases.json"


def valid_case():
    """Return a minimal valid stream test case."""
    return {
        "name": "cpu alert",
        "task_name": "cpu_alert",
        "type": "stream",
        "db": "telegraf",
        "rp": "autogen",
        "script": "stream|from().measurement('cpu')|alert()",
        "data": ["cpu usage_idle=5"],
        "expects": {"crit": 1}
    }


class TestLoadTestCases:
    """Test suite for test case files."""
    
    def test_load_case_list(self):
        """Test a {"tests": [...]} file loads every case."""
        cases = load_test_cases(DATA_FILE)
        
        assert len(cases) == 2
        assert cases[0]["task_name"] == "cpu_alert"
        assert cases[1]["type"] == "batch"
        assert cases[1]["duration"] == "2h"
    
    def test_load_single_case(self, tmp_path):
        """Test a file holding one case object."""
        path = tmp_path / "single.json"
        path.write_text(json.dumps(valid_case()))
        
        cases = load_test_cases(str(path))
        assert cases == [valid_case()]
    
    def test_rp_is_optional(self, tmp_path):
        """Test a case without a retention policy is accepted."""
        case = valid_case()
        del case["rp"]
        path = tmp_path / "no_rp.json"
        path.write_text(json.dumps(case))
        
        cases = load_test_cases(path)
        assert "rp" not in cases[0]
    
    def test_unknown_type_rejected(self, tmp_path):
        """Test task types other than stream/batch fail validation."""
        case = valid_case()
        case["type"] = "realtime"
        path = tmp_path / "bad_type.json"
        path.write_text(json.dumps(case))
        
        with pytest.raises(CaseFileError, match="test case #0 is invalid"):
            load_test_cases(path)
    
    def test_missing_expects_rejected(self, tmp_path):
        """Test a case without expectations fails validation."""
        case = valid_case()
        del case["expects"]
        path = tmp_path / "no_expects.json"
        path.write_text(json.dumps({"tests": [valid_case(), case]}))
        
        with pytest.raises(CaseFileError, match="test case #1 is invalid"):
            load_test_cases(path)
    
    def test_negative_expectation_rejected(self, tmp_path):
        """Test alert counts must be non-negative integers."""
        case = valid_case()
        case["expects"] = {"crit": -1}
        path = tmp_path / "negative.json"
        path.write_text(json.dumps(case))
        
        with pytest.raises(CaseFileError):
            load_test_cases(path)
    
    def test_unreadable_file(self, tmp_path):
        """Test missing files and invalid JSON raise CaseFileError."""
        with pytest.raises(CaseFileError, match="Cannot read"):
            load_test_cases(tmp_path / "missing.json")
        
        broken = tmp_path / "broken.json"
        broken.write_text("{not json")
        with pytest.raises(CaseFileError, match="Cannot read"):
            load_test_cases(broken)
