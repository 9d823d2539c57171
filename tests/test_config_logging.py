"""Tests for config and logging."""

import json
import logging
import os
import sys
from unittest.mock import patch

import pytest

from loan_origination.config import (
    IdGeneratorConfig,
    KafkaConfig,
    LoanOriginationConfig,
    PublisherConfig,
    SimulationConfig,
)
from loan_origination.exceptions import ConfigurationError
from loan_origination.bootstrap import build_service
from loan_origination.logging import LoanJsonFormatter, configure_logging, setup_logging


class TestKafkaConfig:
    """Tests for KafkaConfig."""

    def test_default_values(self) -> None:
        """Test default Kafka producer settings."""
        config = KafkaConfig()

        assert config.bootstrap_servers == "localhost:9092"
        assert config.acks == "all"
        assert config.retries == 3
        assert config.flush_timeout == 10.0

    def test_to_dict(self) -> None:
        """Test conversion to confluent-kafka config dict."""
        config = KafkaConfig(bootstrap_servers="kafka:9092", acks="1", linger_ms=5, compression="lz4")

        result = config.to_dict()

        assert result == {
            "bootstrap.servers": "kafka:9092",
            "acks": "1",
            "linger.ms": 5,
            "compression.type": "lz4",
            "retries": 3,
        }
        assert "flush_timeout" not in result


class TestPublisherConfig:
    """Tests for PublisherConfig."""

    def test_default_values(self) -> None:
        """Test default publisher backend and topic."""
        config = PublisherConfig()

        assert config.backend == "log"
        assert config.loan_invested_topic == "loan_invested"

    @pytest.mark.parametrize("backend", ["kafka", "memory", "log"])
    def test_valid_backends(self, backend: str) -> None:
        """Every known backend is accepted."""
        assert PublisherConfig(backend=backend).backend == backend

    def test_unknown_backend(self) -> None:
        """An unknown backend name is rejected."""
        with pytest.raises(ConfigurationError, match="Unknown publisher backend"):
            PublisherConfig(backend="rabbitmq")


class TestLoanOriginationConfig:
    """Tests for LoanOriginationConfig."""

    def test_default_values(self) -> None:
        """Test default nested configs and log settings."""
        config = LoanOriginationConfig()

        assert isinstance(config.kafka, KafkaConfig)
        assert config.id_generator == IdGeneratorConfig(node_id=1)
        assert config.simulation == SimulationConfig()
        assert config.log_level == "INFO"
        assert config.log_format == "standard"

    def test_from_env_default(self) -> None:
        """Test creating config from an empty environment."""
        with patch.dict(os.environ, {}, clear=True):
            config = LoanOriginationConfig.from_env()

        assert config.kafka.bootstrap_servers == "localhost:9092"
        assert config.id_generator.node_id == 1
        assert config.publisher.backend == "log"
        assert config.simulation.seed is None
        assert config.simulation.num_loans == 100

    def test_from_env_custom(self) -> None:
        """Test creating config from custom environment variables."""
        env = {
            "KAFKA_BOOTSTRAP_SERVERS": "kafka-cluster:9092",
            "KAFKA_ACKS": "1",
            "KAFKA_FLUSH_TIMEOUT": "2.5",
            "NODE_ID": "17",
            "PUBLISHER_BACKEND": "kafka",
            "LOAN_INVESTED_TOPIC": "prod.loan-invested",
            "SIM_LOANS": "250",
            "SIM_WORKERS": "4",
            "SEED": "12345",
            "LOG_LEVEL": "DEBUG",
            "LOG_FORMAT": "json",
        }
        with patch.dict(os.environ, env, clear=True):
            config = LoanOriginationConfig.from_env()

        assert config.kafka.bootstrap_servers == "kafka-cluster:9092"
        assert config.kafka.acks == "1"
        assert config.kafka.flush_timeout == 2.5
        assert config.id_generator.node_id == 17
        assert config.publisher.backend == "kafka"
        assert config.publisher.loan_invested_topic == "prod.loan-invested"
        assert config.simulation.num_loans == 250
        assert config.simulation.max_workers == 4
        assert config.simulation.seed == 12345
        assert config.log_level == "DEBUG"
        assert config.log_format == "json"

    def test_from_env_invalid_number(self) -> None:
        """A non-numeric NODE_ID names the offending variable."""
        with patch.dict(os.environ, {"NODE_ID": "one"}, clear=True):
            with pytest.raises(ConfigurationError, match="NODE_ID"):
                LoanOriginationConfig.from_env()

    def test_from_env_invalid_backend(self) -> None:
        """An unknown PUBLISHER_BACKEND fails config loading."""
        with patch.dict(os.environ, {"PUBLISHER_BACKEND": "smtp"}, clear=True):
            with pytest.raises(ConfigurationError):
                LoanOriginationConfig.from_env()

    def test_from_env_empty_values_use_defaults(self) -> None:
        """Variables exported with an empty value behave as if unset."""
        env = {
            "KAFKA_BOOTSTRAP_SERVERS": "",
            "KAFKA_FLUSH_TIMEOUT": "",
            "NODE_ID": "",
            "PUBLISHER_BACKEND": "",
            "SIM_LOANS": "",
            "SIM_WORKERS": " ",
            "SEED": "",
            "LOG_FORMAT": "",
        }
        with patch.dict(os.environ, env, clear=True):
            config = LoanOriginationConfig.from_env()

        assert config.kafka.bootstrap_servers == "localhost:9092"
        assert config.kafka.flush_timeout == 10.0
        assert config.id_generator.node_id == 1
        assert config.publisher.backend == "log"
        assert config.simulation.num_loans == 100
        assert config.simulation.max_workers == 8
        assert config.simulation.seed is None
        assert config.log_format == "standard"

    def test_empty_node_id_builds_service(self) -> None:
        """An empty NODE_ID still yields a working snowflake generator."""
        with patch.dict(os.environ, {"NODE_ID": ""}, clear=True):
            config = LoanOriginationConfig.from_env()

        service = build_service(config)

        assert service.repository.count() == 0


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_setup_logging_default(self) -> None:
        """Test the package logger defaults to INFO."""
        setup_logging()

        assert logging.getLogger("loan_origination").level == logging.INFO

    def test_setup_logging_debug(self) -> None:
        """Test the root logger takes the requested level."""
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_setup_logging_invalid_level(self) -> None:
        """Test logging with invalid level defaults to INFO."""
        setup_logging(level="INVALID")

        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self) -> None:
        """Test the json format installs LoanJsonFormatter."""
        setup_logging(format_type="json")

        assert any(isinstance(h.formatter, LoanJsonFormatter) for h in logging.getLogger().handlers)

    def test_setup_logging_replaces_handlers(self) -> None:
        """Test repeated setup leaves a single handler."""
        root = logging.getLogger()
        root.addHandler(logging.StreamHandler())
        root.addHandler(logging.StreamHandler())

        setup_logging()

        assert len(root.handlers) == 1

    def test_external_loggers_quieted(self) -> None:
        """Kafka and Faker loggers stay at WARNING."""
        setup_logging(level="DEBUG")

        assert logging.getLogger("confluent_kafka").level == logging.WARNING
        assert logging.getLogger("faker").level == logging.WARNING

    def test_unknown_format_rejected(self) -> None:
        """A misspelled format is a configuration error, not a silent fallback."""
        with pytest.raises(ConfigurationError, match="Unknown log format"):
            setup_logging(format_type="xml")

    def test_configure_logging_from_config(self) -> None:
        """Level and format come from the config unless overridden."""
        config = LoanOriginationConfig(log_level="WARNING", log_format="json")

        configure_logging(config)
        assert logging.getLogger().level == logging.WARNING
        assert isinstance(logging.getLogger().handlers[0].formatter, LoanJsonFormatter)

        configure_logging(config, "standard")
        assert not isinstance(logging.getLogger().handlers[0].formatter, LoanJsonFormatter)


class TestLoanJsonFormatter:
    """Tests for LoanJsonFormatter."""

    def _record(self, **kwargs) -> logging.LogRecord:
        params = {
            "name": "test.logger",
            "level": logging.INFO,
            "pathname": "/path/to/file.py",
            "lineno": 42,
            "msg": "Loan %d approved",
            "args": (7,),
            "exc_info": None,
        }
        params.update(kwargs)
        return logging.LogRecord(**params)

    def test_format_basic(self) -> None:
        """Test the core JSON fields."""
        data = json.loads(LoanJsonFormatter().format(self._record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "test.logger"
        assert data["message"] == "Loan 7 approved"
        assert "timestamp" in data

    def test_format_with_exception(self) -> None:
        """Test exception text is included."""
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        data = json.loads(LoanJsonFormatter().format(self._record(level=logging.ERROR, exc_info=exc_info)))

        assert data["level"] == "ERROR"
        assert "ValueError" in data["exception"]

    def test_format_with_loan_context(self) -> None:
        """Loan context passed via extra becomes top-level JSON fields."""
        logger = logging.getLogger("loan_origination.test")
        record = logger.makeRecord(
            logger.name,
            logging.INFO,
            "service.py",
            10,
            "Loan %d approved",
            (7,),
            None,
            extra={"loan_id": 7, "state": "APPROVED"},
        )

        data = json.loads(LoanJsonFormatter().format(record))

        assert data["loan_id"] == 7
        assert data["state"] == "APPROVED"
        assert "topic" not in data

    def test_format_includes_thread(self) -> None:
        """Each JSON line names the worker thread that logged it."""
        data = json.loads(LoanJsonFormatter().format(self._record()))

        assert data["thread"] == "MainThread"

class TestPackageInit:
    """Tests for loan_origination __init__.py."""

    def test_version_exported(self) -> None:
        """Test __version__ is exported."""
        from loan_origination import __version__

        assert isinstance(__version__, str)
