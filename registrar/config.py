"""Registrar configuration using pydantic-settings."""

import logging
from datetime import timedelta

from pydantic import Field
from pydantic_settings import BaseSettings

from .capacity import StaticQuotas


class RegistrarSettings(BaseSettings):
    """Configuration for the registration read model.

    All settings can be configured via environment variables with the
    REGISTRAR_ prefix. For example:
    - REGISTRAR_REGISTRATION_PERIOD_MINUTES=45
    - REGISTRAR_QUOTAS='{"single": 10, "bed_in_double": 20}'
    - REGISTRAR_LOG_LEVEL=DEBUG

    The waitlist reservation window is fixed at 30 minutes and is not
    configurable.

    Attributes:
        registration_period_minutes: How long an issued reservation holds
            a room type.
        quotas: Maximum concurrent occupants per room type.
        log_level: Level for the `registrar` logger.

    Example:
        >>> settings = RegistrarSettings()
        >>> settings.configure_logging()
        >>> model = RegistrationReadModel.from_settings(source, settings)
    """

    registration_period_minutes: int = Field(default=30, gt=0)
    quotas: dict[str, int] = Field(default_factory=dict)
    log_level: str = "INFO"

    model_config = {"env_prefix": "REGISTRAR_"}

    @property
    def registration_period(self) -> timedelta:
        return timedelta(minutes=self.registration_period_minutes)

    def capacity_oracle(self) -> StaticQuotas:
        """Build a capacity oracle from the configured quotas."""
        return StaticQuotas(self.quotas)

    def configure_logging(self) -> None:
        """Set the level of the package logger.

        Raises:
            AttributeError: If log_level does not name a logging level.
        """
        logging.getLogger("registrar").setLevel(getattr(logging, self.log_level.upper()))
