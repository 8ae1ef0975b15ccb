"""
Tests for Pydantic config schemas.

Covers:
- LoggerConfig defaults and validation
- YAML parsing (string and file)
- SinkConfig → sink construction
- configure_from_config wiring into the registry
"""

from unittest.mock import patch

import pytest
import yaml
from pydantic import ValidationError

from crosslog.config import (
    AlertConfig,
    LoggerConfig,
    SinkConfig,
    SinkType,
    configure_from_config,
)
from crosslog.core import LoggerRegistry
from crosslog.sinks import FileSink, MemorySink, StreamSink


@pytest.fixture(autouse=True)
def reset_registry():
    LoggerRegistry.reset()
    yield
    LoggerRegistry.reset()


FULL_YAML = """
name: billing-worker
verbose: true
use_system_log: false
primary:
  type: file
  path: logs/billing.log
alerts:
  channel: https://hooks.example.com/services/T000/B000
  username: billing-bot
"""


# ═══════════════════════════════════════════════════════════════════
#  LoggerConfig
# ═══════════════════════════════════════════════════════════════════

class TestLoggerConfig:
    def test_defaults(self):
        cfg = LoggerConfig(name="svc")
        assert cfg.verbose is False
        assert cfg.use_system_log is False
        assert cfg.primary.type == SinkType.FILE
        assert cfg.primary.path == "logs/svc.log"
        assert cfg.alerts is None

    def test_sink_type_defaults_to_file(self):
        assert SinkConfig(path="svc.log").type == SinkType.FILE

    def test_name_required(self):
        with pytest.raises(ValidationError):
            LoggerConfig.model_validate({})

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="must not be empty"):
            LoggerConfig(name="   ")

    def test_from_yaml_string(self):
        cfg = LoggerConfig.from_yaml_string(FULL_YAML)
        assert cfg.name == "billing-worker"
        assert cfg.verbose is True
        assert cfg.primary.type == SinkType.FILE
        assert cfg.primary.path == "logs/billing.log"
        assert cfg.alerts.username == "billing-bot"
        assert cfg.alerts.timeout_seconds == 10.0

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "logging.yaml"
        path.write_text(FULL_YAML)
        cfg = LoggerConfig.from_yaml(path)
        assert cfg.name == "billing-worker"

    def test_empty_yaml_fails_validation(self):
        with pytest.raises(ValidationError):
            LoggerConfig.from_yaml_string("")

    def test_to_dict_round_trips_through_yaml(self):
        cfg = LoggerConfig.from_yaml_string(FULL_YAML)
        again = LoggerConfig.from_dict(yaml.safe_load(yaml.safe_dump(cfg.to_dict())))
        assert again == cfg


# ═══════════════════════════════════════════════════════════════════
#  SinkConfig
# ═══════════════════════════════════════════════════════════════════

class TestSinkConfig:
    def test_file_requires_path(self):
        with pytest.raises(ValidationError, match="requires 'path'"):
            SinkConfig(type="file")

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            SinkConfig(type="kafka")

    def test_build_stream(self, capsys):
        sink = SinkConfig(type="stdout").build()
        assert isinstance(sink, StreamSink)
        sink.write("x\n")
        assert capsys.readouterr().out == "x\n"

    def test_build_memory(self):
        assert isinstance(SinkConfig(type="memory").build(), MemorySink)

    def test_build_file(self, tmp_path):
        sink = SinkConfig(type="file", path=str(tmp_path / "a" / "svc.log")).build()
        assert isinstance(sink, FileSink)
        sink.close()


# ═══════════════════════════════════════════════════════════════════
#  configure_from_config
# ═══════════════════════════════════════════════════════════════════

class TestConfigureFromConfig:
    def test_installs_default(self, tmp_path):
        cfg = LoggerConfig(
            name="svc",
            primary=SinkConfig(type="file", path=str(tmp_path / "svc.log")),
        )
        log = configure_from_config(cfg, terminate=lambda code: None)
        assert LoggerRegistry.default() is log
        log.info("from config")
        log.close()
        assert "from config" in (tmp_path / "svc.log").read_text()

    def test_file_sink_owned(self, tmp_path):
        cfg = LoggerConfig(
            name="svc",
            primary=SinkConfig(type="file", path=str(tmp_path / "svc.log")),
        )
        log = configure_from_config(cfg, terminate=lambda code: None)
        assert len(log.closers) == 1
        log.close()

    def test_verbose_passed_through(self, capsys):
        cfg = LoggerConfig(name="svc", verbose=True, primary=SinkConfig(type="memory"))
        configure_from_config(cfg).info("shown")
        assert "shown" in capsys.readouterr().out

    def test_stderr_primary_prints_errors_once(self, capsys):
        cfg = LoggerConfig(name="svc", primary=SinkConfig(type="stderr"))
        configure_from_config(cfg, terminate=lambda code: None).error("once")
        assert capsys.readouterr().err.count("once") == 1

    def test_stdout_primary_verbose_prints_info_once(self, capsys):
        cfg = LoggerConfig(name="svc", verbose=True, primary=SinkConfig(type="stdout"))
        configure_from_config(cfg, terminate=lambda code: None).info("once")
        assert capsys.readouterr().out.count("once") == 1


class TestAlertConfig:
    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            AlertConfig(channel="https://hooks.example.com/x", timeout_seconds=0)

    def test_send_uses_configured_channel(self):
        cfg = AlertConfig(channel="https://hooks.example.com/x", username="bot", timeout_seconds=3)
        with patch("crosslog.config.send_alert") as send:
            cfg.send("Deploy", "done")
        send.assert_called_once_with(
            "https://hooks.example.com/x", "bot", "Deploy", "good", "done", timeout=3.0
        )
