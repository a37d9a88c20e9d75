import logging
from typing import Optional, Sequence
from datadog.dogstatsd import DogStatsd
from .exceptions import MetricsError

logger = logging.getLogger("conntester")

ATTEMPT_COUNT_METRIC = "chalk.conntester.attempt_count"
CONNECTION_LATENCY_METRIC = "chalk.conntester.duration"
QUERY_LATENCY_METRIC = "chalk.conntester.test_query_duration"

DEFAULT_STATSD_ADDRESS = "127.0.0.1:8125"
_UNIX_SCHEME = "unix://"

def parse_address(address: str) -> tuple:
    """
    Splits a sink address into (host, port, socket_path).
    Accepts "host:port", "[v6addr]:port" and "unix:///path/to.sock".
    """
    address = (address or "").strip()
    if address.startswith(_UNIX_SCHEME):
        socket_path = address[len(_UNIX_SCHEME):]
        if not socket_path:
            raise MetricsError(f"Invalid StatsD address '{address}': empty socket path")
        return None, None, socket_path

    host, sep, port_str = address.rpartition(":")
    if not sep or not host:
        raise MetricsError(f"Invalid StatsD address '{address}': expected host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]

    try:
        port = int(port_str)
    except ValueError:
        raise MetricsError(f"Invalid StatsD address '{address}': port must be a number")
    if not 0 < port < 65536:
        raise MetricsError(f"Invalid StatsD address '{address}': port out of range")
    return host, port, None

class MetricsSink:
    """
    Fire-and-forget DogStatsD emitter.
    Emission failures are logged and swallowed; nothing here blocks a probe.
    """
    def __init__(self, address: str = DEFAULT_STATSD_ADDRESS):
        host, port, socket_path = parse_address(address)
        self.address = address
        try:
            if socket_path:
                self._client = DogStatsd(socket_path=socket_path, disable_telemetry=True, disable_buffering=True)
            else:
                self._client = DogStatsd(host=host, port=port, disable_telemetry=True, disable_buffering=True)
        except Exception as e:
            raise MetricsError(f"Failed to initialize StatsD client: {e}")
        self._client.namespace = None

    def increment(self, name: str, value: int = 1, tags: Optional[Sequence[str]] = None) -> None:
        try:
            self._client.increment(name, value, tags=list(tags or []))
        except Exception as e:
            logger.warning(f"Failed to emit counter {name}: {e}")

    def distribution(self, name: str, value: float, tags: Optional[Sequence[str]] = None) -> None:
        try:
            self._client.distribution(name, value, tags=list(tags or []))
        except Exception as e:
            logger.warning(f"Failed to emit distribution {name}: {e}")

    def close(self) -> None:
        try:
            self._client.flush()
            self._client.close_socket()
        except Exception as e:
            logger.warning(f"Failed to close StatsD client: {e}")

    def __enter__(self) -> "MetricsSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
