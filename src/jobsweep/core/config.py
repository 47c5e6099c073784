"""Configuration management for jobsweep."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from jobsweep.core.exceptions import ConfigurationError

DEFAULT_THRESHOLD_DAYS = 14


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"
    output: str = "stdout"


class CleanerSettings(BaseModel):
    """Settings for a single cleanup run."""

    cluster: str = Field(..., min_length=1, description="EKS cluster name")
    profile: str | None = Field(None, description="AWS profile with access to the cluster")
    role_arn: str | None = Field(None, description="IAM role ARN with access to the cluster")
    region: str | None = Field(None, description="AWS region of the cluster")
    namespaces: str | None = Field(None, description="Comma-delimited namespace allow-list")
    days: int = Field(DEFAULT_THRESHOLD_DAYS, ge=0, description="Age threshold in days")
    dry_run: bool = False
    max_concurrent: int | None = Field(None, ge=1, description="Bound on namespace tasks")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def check_auth_mode(self) -> "CleanerSettings":
        """Exactly one of profile or role_arn must be supplied."""
        if not self.profile and not self.role_arn:
            raise ValueError("either `profile` or `role_arn` is required")
        if self.profile and self.role_arn:
            raise ValueError("`profile` and `role_arn` are mutually exclusive")
        return self

    @property
    def uses_profile(self) -> bool:
        return bool(self.profile)

    @classmethod
    def build(cls, **values: Any) -> "CleanerSettings":
        """Validate settings, reporting problems as ConfigurationError.

        Keys whose value is None are dropped so model defaults apply.

        Raises:
            ConfigurationError: If the settings are invalid
        """
        data = {key: value for key, value in values.items() if value is not None}
        try:
            return cls(**data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration: {problems}") from e

    @classmethod
    def from_file(cls, path: str | Path, **overrides: Any) -> "CleanerSettings":
        """Load settings from a YAML file.

        Args:
            path: Path to configuration file
            **overrides: Values that take precedence over the file (None is ignored)

        Returns:
            CleanerSettings instance

        Raises:
            ConfigurationError: If file cannot be loaded, parsed or validated
        """
        config_path = Path(path).expanduser()

        if not config_path.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open() as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration must be a mapping: {config_path}")

        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls.build(**data)
