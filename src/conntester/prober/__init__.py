from typing import Sequence
import typer
from ..domain.interfaces import MetricsEmitter
from ..domain.models import ProbeResult
from .checker import ConnectionProber, DEFAULT_TIMEOUT

def format_result(result: ProbeResult) -> str:
    if not result.success:
        return f"Connection test failed (latency: {result.connection_latency_ms:.3f}ms)"
    if result.query_latency is not None:
        return (
            f"Connection test completed successfully "
            f"(connection: {result.connection_latency_ms:.3f}ms, query: {result.query_latency_ms:.3f}ms)"
        )
    return f"Connection test completed successfully (connection: {result.connection_latency_ms:.3f}ms)"

class ProbeRunner:
    """
    Facade Pattern: one probe cycle plus its console summary line.
    """
    def __init__(self, uri: str, sink: MetricsEmitter, timeout: int = DEFAULT_TIMEOUT, base_tags: Sequence[str] = ()):
        self.uri = uri
        self._prober = ConnectionProber(sink, timeout=timeout, base_tags=base_tags)

    def run_cycle(self) -> ProbeResult:
        result = self._prober.run(self.uri)
        line = format_result(result)
        if result.success:
            typer.secho(line, fg=typer.colors.GREEN)
        else:
            typer.secho(line, fg=typer.colors.RED)
        return result

__all__ = ["ConnectionProber", "ProbeRunner", "format_result", "DEFAULT_TIMEOUT"]
