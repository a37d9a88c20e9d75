from typing import Protocol, Sequence

class DatabaseConnector(Protocol):
    """One database endpoint, opened and released once per probe cycle."""

    def connect(self, deadline: float) -> None: ...

    def ping(self, deadline: float) -> None: ...

    def test_query(self, deadline: float) -> None: ...

    def close(self) -> None: ...

class MetricsEmitter(Protocol):
    """Best-effort metric sink. Implementations must never raise from emit calls."""

    def increment(self, name: str, value: int, tags: Sequence[str]) -> None: ...

    def distribution(self, name: str, value: float, tags: Sequence[str]) -> None: ...

    def close(self) -> None: ...
