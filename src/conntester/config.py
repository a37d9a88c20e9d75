from typing import Annotated, Any, List, Optional
from pathlib import Path
import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from .exceptions import ConfigurationError
from .metrics import DEFAULT_STATSD_ADDRESS
from .domain.models import DEFAULT_TIMEOUT
from .scheduler import resolve_interval
from .tags import parse_tags

class ProbeConfig(BaseSettings):
    """
    Immutable probe settings.
    Precedence: explicit overrides (CLI) > YAML file > CONNTESTER_* env vars > defaults.
    """
    model_config = SettingsConfigDict(env_prefix="CONNTESTER_", frozen=True, extra="ignore")

    uri: str = Field(min_length=1)
    timeout: int = Field(default=DEFAULT_TIMEOUT, gt=0)
    statsd: str = DEFAULT_STATSD_ADDRESS
    repeat: float = Field(default=0.0, allow_inf_nan=False)
    tags: Annotated[List[str], NoDecode] = []

    @field_validator("uri")
    @classmethod
    def _strip_uri(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Database URI is required")
        return v

    @field_validator("tags", mode="before")
    @classmethod
    def _parse_tags(cls, v: Any) -> List[str]:
        if v is None:
            return []
        if isinstance(v, str):
            return parse_tags(v)
        return parse_tags(",".join(str(item) for item in v))

    @property
    def repeat_interval(self) -> Optional[float]:
        return resolve_interval(self.repeat)

    @classmethod
    def load(cls, config_path: Optional[Path] = None, **overrides: Any) -> "ProbeConfig":
        raw = {}
        if config_path is not None:
            raw.update(cls._read_yaml(config_path))
        raw.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**raw)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}")

    @staticmethod
    def _read_yaml(config_path: Path) -> dict:
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid configuration format: {e}")

        if not isinstance(raw_config, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {config_path}")
        return raw_config
