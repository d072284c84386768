"""Kapacitor HTTP client for loading alert tasks and reading their status."""
import requests
from typing import Any, Dict, Iterable, List, Optional

from ..errors import ResponseFormatError, TaskLoadError, TaskStatusError
from ..utils.logger import get_logger
from .stats import aggregate_alert_stats, batch_replace_every

logger = get_logger(__name__)

API_PREFIX = "/kapacitor/v1"
TASKS_PATH = f"{API_PREFIX}/tasks"
TOPICS_PATH = f"{API_PREFIX}/alerts/topics"
WRITE_PATH = f"{API_PREFIX}/write"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


class KapacitorClient:
    """Client for Kapacitor task, topic and write endpoints."""
    
    def __init__(self, host: str, timeout: int = 30, session: Optional[requests.Session] = None):
        """Initialize the Kapacitor client.
        
        Args:
            host: Kapacitor base URL, e.g. http://localhost:9092
            timeout: Request timeout in seconds (default: 30)
            session: Optional pre-configured requests session
        """
        self.host = host.rstrip('/')
        self.timeout = timeout
        
        if session is None:
            session = requests.Session()
            adapter = requests.adapters.HTTPAdapter(
                pool_connections=10,
                pool_maxsize=10,
                max_retries=0
            )
            session.mount('http://', adapter)
            session.mount('https://', adapter)
        self.session = session
        
        logger.info("kapacitor_client_initialized", host=self.host, timeout=timeout)
    
    def load_task(self, task: Dict[str, Any]) -> None:
        """Create a task from its JSON definition.
        
        Batch tasks have every ``every(...)`` rewritten to ``every(1s)``.
        The caller's dict is not modified.
        
        Args:
            task: Task definition (id, type, dbrps, script, status)
            
        Raises:
            TaskLoadError: If the script is not a string or Kapacitor rejects the task
            requests.RequestException: On transport failure
        """
        logger.info("kapacitor_loading_task", task_id=task.get("id"))
        definition = dict(task)
        
        if definition.get("type") == "batch":
            script = definition.get("script")
            if not isinstance(script, str):
                raise TaskLoadError("Task Load: script is not of type string")
            definition["script"] = batch_replace_every(script)
            logger.debug("batch_script_after_replace", task_id=task.get("id"), script=definition["script"])
        
        response = self.session.post(
            f"{self.host}{TASKS_PATH}",
            json=definition,
            timeout=self.timeout
        )
        
        if response.status_code != 200:
            raise TaskLoadError(
                f"{response.status_code} {response.reason}:: {response.text}",
                status_code=response.status_code,
                body=response.text
            )
    
    def list_topics(self) -> List[str]:
        """Return the ids of all alert topics."""
        response = self.session.get(f"{self.host}{TOPICS_PATH}", timeout=self.timeout)
        body = response.json()
        if not isinstance(body, dict):
            raise ResponseFormatError("kapacitor.topics: wrong response from service")
        topics = body.get("topics")
        if topics is None:
            topics = []
        if not isinstance(topics, list) or not all(isinstance(topic, dict) for topic in topics):
            raise ResponseFormatError("kapacitor.topics: wrong response from service")
        topic_ids = [topic.get("id") for topic in topics if topic.get("id")]
        logger.debug("kapacitor_topics_listed", topics=topic_ids)
        return topic_ids
    
    def delete_all_topics(self) -> None:
        """Delete every alert topic; the first failure stops the sweep."""
        for topic_id in self.list_topics():
            self.delete_topic(topic_id)
    
    def delete_topic(self, topic: str) -> None:
        """Delete one alert topic."""
        response = self.session.delete(f"{self.host}{TOPICS_PATH}/{topic}", timeout=self.timeout)
        logger.info("kapacitor_deleted_topic", topic=topic, status_code=response.status_code)
    
    def delete_task(self, task_id: str) -> None:
        """Delete a task by id."""
        self.session.delete(f"{self.host}{TASKS_PATH}/{task_id}", timeout=self.timeout)
        logger.info("kapacitor_deleted_task", task_id=task_id)
    
    def write_data(self, lines: Iterable[str], db: str, rp: str) -> None:
        """Write data lines straight into Kapacitor for stream tasks.
        
        Lines are posted verbatim. The first transport error stops the batch.
        """
        url = f"{self.host}{WRITE_PATH}"
        for line in lines:
            self.session.post(
                url,
                params={"db": db, "rp": rp},
                data=line.encode("utf-8"),
                headers={"Content-Type": FORM_CONTENT_TYPE},
                timeout=self.timeout
            )
            logger.debug("kapacitor_data_added", db=db, rp=rp, line=line)
    
    def status(self, task_id: str) -> Dict[str, int]:
        """Get alert counters for a task, summed across its alert nodes.
        
        Raises:
            TaskStatusError: If the response carries no usable alert stats
            ValueError: If the response body is not JSON
        """
        logger.info("kapacitor_fetching_status", task_id=task_id)
        response = self.session.get(f"{self.host}{TASKS_PATH}/{task_id}", timeout=self.timeout)
        body = response.json()
        if not isinstance(body, dict):
            raise TaskStatusError("kapacitor.status: wrong response from service")
        return aggregate_alert_stats(body.get("stats"))
