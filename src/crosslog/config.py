"""
Pydantic configuration schemas for crosslog.

A small YAML file describes one logger:

    name: billing-worker
    verbose: true
    use_system_log: false
    primary:
      type: file
      path: logs/billing.log
    alerts:
      channel: https://hooks.slack.com/services/T000/B000/XXXX
      username: billing-bot

Usage:
    config = LoggerConfig.from_yaml("logging.yaml")
    log = configure_from_config(config)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from crosslog.alerts import COLOR_GOOD, send_alert
from crosslog.core import Logger, Terminator, configure
from crosslog.sinks import FileSink, MemorySink, Sink, StreamSink


class SinkType(str, Enum):
    STDERR = "stderr"
    STDOUT = "stdout"
    FILE = "file"
    MEMORY = "memory"


class SinkConfig(BaseModel):
    type: SinkType = SinkType.FILE
    path: Optional[str] = None                # file

    @model_validator(mode="after")
    def validate_path(self) -> "SinkConfig":
        if self.type == SinkType.FILE and not self.path:
            raise ValueError("file sink requires 'path'")
        return self

    def build(self) -> Sink:
        if self.type == SinkType.FILE:
            return FileSink(self.path)
        if self.type == SinkType.MEMORY:
            return MemorySink()
        return StreamSink(self.type.value)


class AlertConfig(BaseModel):
    channel: str
    username: str = "crosslog"
    timeout_seconds: float = Field(10.0, gt=0)

    def send(self, title: str, text: str, color: str = COLOR_GOOD) -> None:
        """Post an alert to the configured channel. Raises AlertError."""
        send_alert(
            self.channel, self.username, title, color, text,
            timeout=self.timeout_seconds,
        )


class LoggerConfig(BaseModel):
    name: str
    verbose: bool = False
    use_system_log: bool = False
    primary: SinkConfig
    alerts: Optional[AlertConfig] = None

    @model_validator(mode="before")
    @classmethod
    def default_primary(cls, data: Any) -> Any:
        """Without a primary sink, log to logs/<name>.log."""
        if isinstance(data, dict) and data.get("primary") is None and data.get("name"):
            data = {**data, "primary": {"type": "file", "path": f"logs/{data['name']}.log"}}
        return data

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("logger name must not be empty")
        return v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "LoggerConfig":
        """Load and validate from a YAML file."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.from_yaml_string(raw)

    @classmethod
    def from_yaml_string(cls, yaml_string: str) -> "LoggerConfig":
        """Load and validate from a YAML string."""
        data = yaml.safe_load(yaml_string) or {}
        return cls.model_validate(data)

    @classmethod
    def from_dict(cls, data: dict) -> "LoggerConfig":
        return cls.model_validate(data)

    def build_sink(self) -> Sink:
        return self.primary.build()

    def to_dict(self, exclude_none: bool = True) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=exclude_none)


def configure_from_config(
    config: LoggerConfig,
    *,
    terminate: Optional[Terminator] = None,
) -> Logger:
    """Build the primary sink described by `config` and pass it to configure()."""
    return configure(
        config.name,
        config.verbose,
        config.use_system_log,
        config.build_sink(),
        terminate=terminate,
    )
