"""Configuration management for collection-engine."""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from collection_engine.exceptions import ConfigurationError
from collection_engine.models.collection.enums import RemainderPolicy


@dataclass
class SchedulingConfig:
    """Limits for splitting a debt into installments."""

    max_installments: int = 60
    max_interval_days: int = 365
    default_interval_days: int = 30
    remainder_policy: RemainderPolicy = RemainderPolicy.NONE


@dataclass
class AgreementConfig:
    """Defaults for settlement agreements."""

    max_installments: int = 60
    default_interest_rate_percent: Decimal = Decimal("0")


@dataclass
class DashboardConfig:
    """Dashboard and reporting parameters."""

    upcoming_window_days: int = 7
    top_debtors_limit: int = 5
    monthly_recovery_goal: Decimal = Decimal("50000")


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class EngineConfig:
    """Main configuration for collection-engine."""

    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    agreement: AgreementConfig = field(default_factory=AgreementConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    seed: int | None = None
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables.

        Raises
        ------
        ConfigurationError
            If a variable holds a value of the wrong type.
        """
        import os

        try:
            scheduling = SchedulingConfig(
                max_installments=int(os.getenv("COLLECTION_MAX_INSTALLMENTS", "60")),
                max_interval_days=int(os.getenv("COLLECTION_MAX_INTERVAL_DAYS", "365")),
                default_interval_days=int(os.getenv("COLLECTION_DEFAULT_INTERVAL_DAYS", "30")),
                remainder_policy=RemainderPolicy(
                    os.getenv("COLLECTION_REMAINDER_POLICY", "NONE").upper()
                ),
            )

            agreement = AgreementConfig(
                max_installments=int(os.getenv("COLLECTION_AGREEMENT_MAX_INSTALLMENTS", "60")),
                default_interest_rate_percent=Decimal(
                    os.getenv("COLLECTION_AGREEMENT_INTEREST", "0")
                ),
            )

            dashboard = DashboardConfig(
                upcoming_window_days=int(os.getenv("COLLECTION_UPCOMING_DAYS", "7")),
                top_debtors_limit=int(os.getenv("COLLECTION_TOP_DEBTORS", "5")),
                monthly_recovery_goal=Decimal(os.getenv("COLLECTION_RECOVERY_GOAL", "50000")),
            )

            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except (ValueError, ArithmeticError) as exc:
            raise ConfigurationError(f"Invalid collection-engine environment: {exc}") from exc

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            scheduling=scheduling,
            agreement=agreement,
            dashboard=dashboard,
            output=output,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
