"""InfluxDB 1.x HTTP client for provisioning test databases and loading data."""
import time
import requests
from typing import Any, Callable, Iterable, List, Optional

from ..errors import DatabaseNotFoundError, DatabaseStillFoundError, ResponseFormatError
from ..polling.monitor import BoundedPoller, PollState, DEFAULT_ATTEMPTS, DEFAULT_INTERVAL_SECONDS
from ..timemacro.translator import TimestampTranslator
from ..utils.logger import get_logger

logger = get_logger(__name__)

WRITE_PATH = "/write"
QUERY_PATH = "/query"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

DEFAULT_RETENTION_POLICY = "autogen"
DEFAULT_DURATION = "1h"


class InfluxDBClient:
    """Client for the InfluxDB write and query endpoints."""
    
    def __init__(
        self,
        host: str,
        timeout: int = 30,
        poll_attempts: int = DEFAULT_ATTEMPTS,
        poll_interval: float = DEFAULT_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        session: Optional[requests.Session] = None,
        translator: Optional[TimestampTranslator] = None,
        default_duration: str = DEFAULT_DURATION,
        default_retention_policy: str = DEFAULT_RETENTION_POLICY
    ):
        """Initialize the InfluxDB client.
        
        Args:
            host: InfluxDB base URL, e.g. http://localhost:8086
            timeout: Request timeout in seconds (default: 30)
            poll_attempts: Existence checks after create/drop (default: 10)
            poll_interval: Seconds between existence checks (default: 1)
            sleep: Sleep function used between checks
            session: Optional pre-configured requests session
            translator: Translator for now() macros; one is built if omitted
            default_duration: Retention duration used when setup gets none
            default_retention_policy: Retention policy used when none is given
        """
        self.host = host.rstrip('/')
        self.timeout = timeout
        self.poll_attempts = poll_attempts
        self.poll_interval = poll_interval
        self.sleep = sleep
        self.translator = translator or TimestampTranslator()
        self.default_duration = default_duration
        self.default_retention_policy = default_retention_policy
        
        if session is None:
            session = requests.Session()
            adapter = requests.adapters.HTTPAdapter(
                pool_connections=10,
                pool_maxsize=10,
                max_retries=0  # No transport-level retries
            )
            session.mount('http://', adapter)
            session.mount('https://', adapter)
        self.session = session
        
        logger.info("influxdb_client_initialized", host=self.host, timeout=timeout)
    
    def write_data(self, lines: Iterable[str], db: str, rp: str) -> None:
        """Write test data lines, one request per line.
        
        ``now()`` macros are translated first; a line whose macro cannot be
        evaluated is written as-is. The first transport error stops the batch.
        
        Args:
            lines: Line protocol data points
            db: Target database
            rp: Target retention policy
            
        Raises:
            requests.RequestException: On the first failed request
        """
        url = f"{self.host}{WRITE_PATH}"
        
        for line in lines:
            data = self.translator.translate_or_original(line)
            response = self.session.post(
                url,
                params={"db": db, "rp": rp},
                data=data.encode("utf-8"),
                headers={"Content-Type": FORM_CONTENT_TYPE},
                timeout=self.timeout
            )
            
            if response.status_code >= 300:
                logger.warning(
                    "influxdb_write_rejected",
                    db=db,
                    rp=rp,
                    status_code=response.status_code,
                    response_body=response.text[:500],
                    line=data
                )
            else:
                logger.debug("influxdb_data_added", db=db, rp=rp, line=data)
    
    def query(self, q: str) -> requests.Response:
        """POST an InfluxQL statement to the query endpoint."""
        return self.session.post(
            f"{self.host}{QUERY_PATH}",
            data={"q": q},
            headers={"Content-Type": FORM_CONTENT_TYPE},
            timeout=self.timeout
        )
    
    def does_database_exist(self, db: str) -> bool:
        """Check whether a database is listed by SHOW DATABASES.
        
        Raises:
            requests.RequestException: On transport failure
            ValueError: If the response body is not JSON or has an unexpected shape
        """
        logger.debug("influxdb_checking_database", db=db)
        response = self.query("SHOW DATABASES")
        return _contains_value(response.json(), db)
    
    def setup(self, db: str, duration: str = "", rp: str = "") -> None:
        """Create the database and retention policy tests will run against.
        
        Args:
            db: Database name
            duration: Retention duration (default: the client default_duration)
            rp: Retention policy name (default: the client default_retention_policy)
            
        Raises:
            DatabaseNotFoundError: If the database never appears
        """
        rp = rp or self.default_retention_policy
        duration = duration or self.default_duration
        
        logger.info("influxdb_setup", db=db, rp=rp, duration=duration)
        self.query(f'CREATE DATABASE "{db}" WITH DURATION {duration} REPLICATION 1 NAME "{rp}"')
        self.monitor_create(db)
    
    def cleanup(self, db: str) -> None:
        """Drop a test database and wait until it is gone.
        
        Raises:
            DatabaseStillFoundError: If the database is still listed
        """
        self.query(f'DROP DATABASE "{db}"')
        self.monitor_delete(db)
        logger.info("influxdb_cleanup", db=db)
    
    def monitor_create(self, db: str) -> None:
        """Wait for a database to appear."""
        logger.info("influxdb_create_monitor", db=db)
        poller = self._poller(lambda: self.does_database_exist(db), f"create:{db}")
        if poller.run() is PollState.EXHAUSTED:
            raise DatabaseNotFoundError(
                f"Database not found: {db}",
                db=db,
                attempts=poller.attempts_made
            )
    
    def monitor_delete(self, db: str) -> None:
        """Wait for a database to disappear."""
        logger.info("influxdb_delete_monitor", db=db)
        poller = self._poller(lambda: not self.does_database_exist(db), f"delete:{db}")
        if poller.run() is PollState.EXHAUSTED:
            raise DatabaseStillFoundError(
                f"Database still found: {db}",
                db=db,
                attempts=poller.attempts_made
            )
    
    def _poller(self, check: Callable[[], bool], name: str) -> BoundedPoller:
        return BoundedPoller(
            check,
            attempts=self.poll_attempts,
            interval=self.poll_interval,
            sleep=self.sleep,
            name=name
        )


def _contains_value(response_data: Any, value: str) -> bool:
    """Look for a value among results[].series[].values[][].
    
    Raises:
        ResponseFormatError: If a level of the response is not the expected type
    """
    if not isinstance(response_data, dict):
        raise ResponseFormatError("influxdb.query: wrong response from service")
    
    for result in _list_of(response_data.get("results")):
        if not isinstance(result, dict):
            raise ResponseFormatError("influxdb.query: wrong response from service")
        for series in _list_of(result.get("series")):
            if not isinstance(series, dict):
                raise ResponseFormatError("influxdb.query: wrong response from service")
            for row in _list_of(series.get("values")):
                if value in _list_of(row):
                    return True
    return False


def _list_of(node: Any) -> List[Any]:
    """Missing levels count as empty; anything else must be a JSON array."""
    if node is None:
        return []
    if not isinstance(node, list):
        raise ResponseFormatError("influxdb.query: wrong response from service")
    return node
