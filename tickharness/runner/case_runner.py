"""Run alert test cases against live InfluxDB and Kapacitor services."""
import time
import requests
from typing import Any, Callable, Dict, List, Optional

from ..errors import HarnessError
from ..influxdb.client import InfluxDBClient
from ..kapacitor.client import KapacitorClient
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_WAIT_SECONDS = 2.0


class CaseRunner:
    """
    Drive one alert test case end to end.
    
    Workflow:
    1. Create the database (batch tasks only, data is queried from it)
    2. Load the task into Kapacitor
    3. Write test data to InfluxDB (batch) or Kapacitor (stream)
    4. Wait for the task to process the data
    5. Compare alert counters with the expected ones
    6. Tear down the task, alert topics and database
    """
    
    def __init__(
        self,
        influxdb: InfluxDBClient,
        kapacitor: KapacitorClient,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.influxdb = influxdb
        self.kapacitor = kapacitor
        self.sleep = sleep
    
    def run(self, case: Dict[str, Any]) -> Dict[str, Any]:
        """Run a single validated test case.
        
        Args:
            case: Test case as returned by load_test_cases
            
        Returns:
            Result with name, passed, expected, actual and error
        """
        name = case["name"]
        task_id = case["task_name"]
        db = case["db"]
        rp = case.get("rp") or self.influxdb.default_retention_policy
        is_batch = case["type"] == "batch"
        
        result = {
            "name": name,
            "task_name": task_id,
            "passed": False,
            "expected": dict(case["expects"]),
            "actual": None,
            "error": None
        }
        database_created = False
        
        logger.info("test_case_started", test_name=name, task_id=task_id, type=case["type"])
        
        try:
            if is_batch:
                self.influxdb.setup(db, case.get("duration", ""), rp)
                database_created = True
            
            self.kapacitor.load_task({
                "id": task_id,
                "type": case["type"],
                "dbrps": [{"db": db, "rp": rp}],
                "script": case["script"],
                "status": "enabled"
            })
            
            data = case.get("data", [])
            if is_batch:
                self.influxdb.write_data(data, db, rp)
            else:
                self.kapacitor.write_data(data, db, rp)
            
            self.sleep(case.get("wait_seconds", DEFAULT_WAIT_SECONDS))
            
            actual = self.kapacitor.status(task_id)
            result["actual"] = actual
            result["passed"] = compare_alerts(result["expected"], actual)
            
        except (HarnessError, requests.RequestException, ValueError) as e:
            result["error"] = str(e)
            logger.error("test_case_failed", test_name=name, task_id=task_id, error=str(e))
        
        finally:
            self._teardown(task_id, db if database_created else None)
        
        logger.info(
            "test_case_finished",
            test_name=name,
            passed=result["passed"],
            expected=result["expected"],
            actual=result["actual"]
        )
        return result
    
    def run_all(self, cases: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Run test cases one after another."""
        return [self.run(case) for case in cases]
    
    def _teardown(self, task_id: str, db: Optional[str]) -> None:
        """Remove everything a test case created; failures are only logged."""
        steps = [
            ("delete_task", lambda: self.kapacitor.delete_task(task_id)),
            ("delete_all_topics", self.kapacitor.delete_all_topics),
        ]
        if db:
            steps.append(("drop_database", lambda: self.influxdb.cleanup(db)))
        
        for step, action in steps:
            try:
                action()
            except (HarnessError, requests.RequestException, ValueError) as e:
                logger.warning("teardown_step_failed", step=step, task_id=task_id, error=str(e))


def compare_alerts(expected: Dict[str, int], actual: Dict[str, int]) -> bool:
    """True when every expected counter matches; missing counters count as 0."""
    return all(actual.get(level, 0) == count for level, count in expected.items())
