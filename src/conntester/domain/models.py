from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

# seconds allowed for connect, ping and query together
DEFAULT_TIMEOUT = 5

class ProbeStatus(str, Enum):
    """Values of the `status` tag attached to every emission."""
    SUCCESS = "success"
    FAILURE = "failure"
    QUERY_FAILURE = "query_failure"

class FailureStage(str, Enum):
    NONE = "none"
    CONNECT = "connect"
    PING = "ping"
    QUERY = "query"

class ProbeResult(BaseModel):
    """
    Outcome of one probe cycle.
    `success` reflects the connection step only; a failed diagnostic query
    is reported through `failure_stage` without downgrading it.
    Latencies are in seconds.
    """
    model_config = ConfigDict(frozen=True)

    success: bool
    connection_latency: float
    query_latency: Optional[float] = None
    failure_stage: FailureStage = FailureStage.NONE
    error_message: Optional[str] = None

    @property
    def connection_latency_ms(self) -> float:
        return self.connection_latency * 1000

    @property
    def query_latency_ms(self) -> Optional[float]:
        if self.query_latency is None:
            return None
        return self.query_latency * 1000
