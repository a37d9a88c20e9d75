import pytest
from typing import List, Sequence, Tuple

class RecordingSink:
    """In-memory MetricsEmitter capturing every emission in order."""
    def __init__(self):
        self.emissions: List[Tuple[str, str, float, List[str]]] = []
        self.closed = False

    def increment(self, name: str, value: int = 1, tags: Sequence[str] = ()) -> None:
        self.emissions.append(("count", name, value, list(tags)))

    def distribution(self, name: str, value: float, tags: Sequence[str] = ()) -> None:
        self.emissions.append(("distribution", name, value, list(tags)))

    def close(self) -> None:
        self.closed = True

    def named(self, name: str):
        return [e for e in self.emissions if e[1] == name]

@pytest.fixture
def sink():
    return RecordingSink()

@pytest.fixture
def sqlite_uri(tmp_path):
    return f"sqlite:///{tmp_path / 'probe.db'}"

@pytest.fixture
def unreachable_uri(tmp_path):
    # parent directory does not exist, so sqlite can not open the file
    return f"sqlite:///{tmp_path / 'missing' / 'probe.db'}"

@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("CONNTESTER_URI", "CONNTESTER_TIMEOUT", "CONNTESTER_STATSD", "CONNTESTER_REPEAT", "CONNTESTER_TAGS"):
        monkeypatch.delenv(var, raising=False)
