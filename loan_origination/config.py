"""Configuration management for loan-origination."""

from dataclasses import dataclass, field
from typing import Any

from loan_origination.exceptions import ConfigurationError

PUBLISHER_BACKENDS = ("kafka", "memory", "log")


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 0
    compression: str = "none"
    retries: int = 3
    flush_timeout: float = 10.0

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class IdGeneratorConfig:
    """Snowflake id generator configuration."""

    node_id: int = 1


@dataclass
class PublisherConfig:
    """Event publisher selection."""

    backend: str = "log"
    loan_invested_topic: str = "loan_invested"

    def __post_init__(self) -> None:
        if self.backend not in PUBLISHER_BACKENDS:
            raise ConfigurationError(
                f"Unknown publisher backend {self.backend!r}, expected one of {PUBLISHER_BACKENDS}"
            )


@dataclass
class SimulationConfig:
    """Configuration for the workflow simulation."""

    num_loans: int = 100
    max_workers: int = 8
    max_investors_per_loan: int = 5
    seed: int | None = None


@dataclass
class LoanOriginationConfig:
    """Main configuration for loan-origination."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    id_generator: IdGeneratorConfig = field(default_factory=IdGeneratorConfig)
    publisher: PublisherConfig = field(default_factory=PublisherConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LoanOriginationConfig":
        """Create config from environment variables."""
        kafka = KafkaConfig(
            bootstrap_servers=_env("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=_env("KAFKA_ACKS", "all"),
            flush_timeout=_parse(float, "KAFKA_FLUSH_TIMEOUT", "10"),
        )

        id_generator = IdGeneratorConfig(node_id=_parse(int, "NODE_ID", "1"))

        publisher = PublisherConfig(
            backend=_env("PUBLISHER_BACKEND", "log"),
            loan_invested_topic=_env("LOAN_INVESTED_TOPIC", "loan_invested"),
        )

        simulation = SimulationConfig(
            num_loans=_parse(int, "SIM_LOANS", "100"),
            max_workers=_parse(int, "SIM_WORKERS", "8"),
            seed=_parse(int, "SEED", None),
        )

        return cls(
            kafka=kafka,
            id_generator=id_generator,
            publisher=publisher,
            simulation=simulation,
            log_level=_env("LOG_LEVEL", "INFO"),
            log_format=_env("LOG_FORMAT", "standard"),
        )


def _env(name: str, default: str | None) -> str | None:
    """Read an environment variable, treating an empty value as unset."""
    import os

    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw


def _parse(cast: Any, name: str, default: str | None) -> Any:
    """Read an environment variable and convert it.

    Unset or empty variables fall back to ``default``; only a variable
    with no default may come back as None.
    """
    raw = _env(name, default)
    if raw is None:
        return None
    try:
        return cast(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid value for {name}: {raw!r}") from exc
