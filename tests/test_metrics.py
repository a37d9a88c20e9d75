import socket
import pytest
from conntester.exceptions import ConfigurationError, MetricsError
from conntester.metrics import (
    ATTEMPT_COUNT_METRIC,
    CONNECTION_LATENCY_METRIC,
    MetricsSink,
    parse_address,
)

@pytest.mark.parametrize("address, expected", [
    ("127.0.0.1:8125", ("127.0.0.1", 8125, None)),
    ("statsd.internal:9125", ("statsd.internal", 9125, None)),
    ("[::1]:8125", ("::1", 8125, None)),
    ("unix:///var/run/datadog/dsd.socket", (None, None, "/var/run/datadog/dsd.socket")),
])
def test_parse_address(address, expected):
    assert parse_address(address) == expected

@pytest.mark.parametrize("address", ["", "localhost", ":8125", "host:port", "host:0", "host:70000", "unix://"])
def test_unusable_address_is_fatal(address):
    with pytest.raises(MetricsError):
        MetricsSink(address)

def test_metrics_error_is_a_configuration_error():
    assert issubclass(MetricsError, ConfigurationError)

@pytest.fixture
def udp_listener():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2)
    yield sock
    sock.close()

def test_emits_dogstatsd_datagrams(udp_listener):
    """Counter and distribution reach the wire with tags and no namespace."""
    port = udp_listener.getsockname()[1]
    with MetricsSink(f"127.0.0.1:{port}") as sink:
        sink.increment(ATTEMPT_COUNT_METRIC, 1, ["env:test", "status:success"])
        counter = udp_listener.recv(4096).decode()
        sink.distribution(CONNECTION_LATENCY_METRIC, 0.5, ["env:test", "status:success"])
        dist = udp_listener.recv(4096).decode()

    assert counter.startswith("chalk.conntester.attempt_count:1|c|#env:test,status:success")
    assert dist.startswith("chalk.conntester.duration:0.5|d|#env:test,status:success")

class ExplodingClient:
    def increment(self, *args, **kwargs):
        raise OSError("socket gone")

    def distribution(self, *args, **kwargs):
        raise OSError("socket gone")

    def flush(self):
        raise OSError("socket gone")

    def close_socket(self):
        raise OSError("socket gone")

def test_emission_failures_are_swallowed(caplog):
    sink = MetricsSink("127.0.0.1:8125")
    sink._client = ExplodingClient()

    sink.increment(ATTEMPT_COUNT_METRIC, 1, ["status:success"])
    sink.distribution(CONNECTION_LATENCY_METRIC, 0.1, ["status:success"])
    sink.close()

    messages = [r.getMessage() for r in caplog.records]
    assert any("Failed to emit counter" in m for m in messages)
    assert any("Failed to emit distribution" in m for m in messages)
