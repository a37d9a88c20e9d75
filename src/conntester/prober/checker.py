import logging
import time
from typing import Callable, Sequence
from ..connectors.factory import get_connector
from ..domain.interfaces import DatabaseConnector, MetricsEmitter
from ..domain.models import DEFAULT_TIMEOUT, FailureStage, ProbeResult, ProbeStatus
from ..exceptions import ConnectionError, QueryError
from ..metrics import ATTEMPT_COUNT_METRIC, CONNECTION_LATENCY_METRIC, QUERY_LATENCY_METRIC
from ..tags import with_status

logger = logging.getLogger("conntester")

class ConnectionProber:
    """
    Runs one connect -> ping -> query cycle against a database URI and
    reports it to the metrics sink.

    Emissions per cycle:
      - engine could not be built: attempt_count{status:failure} only
      - otherwise: duration + attempt_count tagged with the connection status,
        then test_query_duration tagged with the query status if the ping passed
    """
    def __init__(
        self,
        sink: MetricsEmitter,
        timeout: int = DEFAULT_TIMEOUT,
        base_tags: Sequence[str] = (),
        connector_factory: Callable[[str], DatabaseConnector] = get_connector,
    ):
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self.sink = sink
        self.timeout = timeout
        self.base_tags = tuple(base_tags)
        self._connector_factory = connector_factory

    def run(self, uri: str) -> ProbeResult:
        deadline = time.monotonic() + self.timeout
        start = time.perf_counter()

        try:
            connector = self._connector_factory(uri)
            connector.connect(deadline)
        except ConnectionError as e:
            logger.warning(f"Failed to create database connection: {e}")
            self.sink.increment(ATTEMPT_COUNT_METRIC, 1, with_status(self.base_tags, ProbeStatus.FAILURE.value))
            return ProbeResult(
                success=False,
                connection_latency=time.perf_counter() - start,
                failure_stage=FailureStage.CONNECT,
                error_message=str(e),
            )

        try:
            return self._ping_and_query(connector, deadline, start)
        finally:
            connector.close()

    def _ping_and_query(self, connector: DatabaseConnector, deadline: float, start: float) -> ProbeResult:
        error_message = None
        try:
            connector.ping(deadline)
            success = True
        except ConnectionError as e:
            logger.warning(f"Connection failed: {e}")
            error_message = str(e)
            success = False
        connection_latency = time.perf_counter() - start

        status = ProbeStatus.SUCCESS if success else ProbeStatus.FAILURE
        tags = with_status(self.base_tags, status.value)
        self.sink.distribution(CONNECTION_LATENCY_METRIC, connection_latency, tags)
        self.sink.increment(ATTEMPT_COUNT_METRIC, 1, tags)

        if not success:
            return ProbeResult(
                success=False,
                connection_latency=connection_latency,
                failure_stage=FailureStage.PING,
                error_message=error_message,
            )

        # Query outcome never downgrades the connection result
        failure_stage = FailureStage.NONE
        query_status = ProbeStatus.SUCCESS
        query_start = time.perf_counter()
        try:
            connector.test_query(deadline)
        except (QueryError, ConnectionError) as e:
            logger.warning(f"Test query failed: {e}")
            error_message = str(e)
            failure_stage = FailureStage.QUERY
            query_status = ProbeStatus.QUERY_FAILURE
        query_latency = time.perf_counter() - query_start

        self.sink.distribution(
            QUERY_LATENCY_METRIC, query_latency, with_status(self.base_tags, query_status.value)
        )

        return ProbeResult(
            success=True,
            connection_latency=connection_latency,
            query_latency=query_latency,
            failure_stage=failure_stage,
            error_message=error_message,
        )
