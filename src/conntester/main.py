import logging
import signal
import typer
from typing import Optional
from pathlib import Path
from .config import ProbeConfig
from .exceptions import ConfigurationError
from .log import setup_logger
from .metrics import MetricsSink
from .prober import ProbeRunner
from .scheduler import Scheduler, run_once

app = typer.Typer(help="Database connection latency probe reporting to StatsD")

def _install_stop_handlers(scheduler: Scheduler) -> None:
    def _handle(signum, frame):
        logging.getLogger("conntester").info(f"Received signal {signum}, stopping")
        scheduler.stop()

    signal.signal(signal.SIGTERM, _handle)

@app.command()
def run(
    uri: Optional[str] = typer.Option(None, "-uri", "--uri", help="Database connection URI (required)"),
    timeout: Optional[int] = typer.Option(None, "-timeout", "--timeout", help="Deadline in seconds for connect, ping and query [default: 5]"),
    statsd: Optional[str] = typer.Option(None, "-statsd", "--statsd", help="StatsD server address [default: 127.0.0.1:8125]"),
    repeat: Optional[float] = typer.Option(None, "-repeat", "--repeat", help="Repeat delay in seconds (0 = run once, values under 1ms mean 1 second)"),
    tags: Optional[str] = typer.Option(None, "-tags", "--tags", help="Custom tags in format k:v,k:v to add to metrics"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to YAML configuration file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Opens a connection, pings it, runs SELECT 1 and reports latencies.
    Exits 0/1 on the connection outcome, or repeats forever with -repeat.
    """
    logger = setup_logger(logging.DEBUG if verbose else logging.INFO)

    try:
        probe_config = ProbeConfig.load(config, uri=uri, timeout=timeout, statsd=statsd, repeat=repeat, tags=tags)
        sink = MetricsSink(probe_config.statsd)
    except ConfigurationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    with sink:
        runner = ProbeRunner(probe_config.uri, sink, timeout=probe_config.timeout, base_tags=probe_config.tags)
        interval = probe_config.repeat_interval

        if interval is None:
            raise typer.Exit(code=run_once(runner.run_cycle))

        typer.echo(f"Starting repeated connection tests every {interval:.3f} seconds...")
        scheduler = Scheduler(runner.run_cycle, interval)
        _install_stop_handlers(scheduler)
        try:
            scheduler.run_forever()
        except KeyboardInterrupt:
            scheduler.stop()
        logger.info(f"Stopped after {scheduler.ticks} probe cycles")

if __name__ == "__main__":
    app()
