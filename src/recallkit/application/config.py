from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from recallkit.domain.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_BASE_EASE,
    DEFAULT_EASY_BONUS,
    DEFAULT_HARD_PENALTY,
    DEFAULT_INITIAL_INTERVAL,
    DEFAULT_LOAD_BALANCE,
    DEFAULT_MAX_FUZZING_DAYS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_MINIMUM_EASE,
    ENV_PREFIX,
)
from recallkit.domain.scheduling.models import SchedulerSettings


def config_file_candidates() -> list[Path]:
    return [
        Path.home() / ".config" / CONFIG_DIR_NAME / "config.toml",
        Path.home() / ".recallkit.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for recallkit.
    Supports loading from:
    1. Environment variables (RECALLKIT_*)
    2. Config file (~/.config/recallkit/config.toml)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        extra="ignore",
        frozen=True,
    )

    # Ease
    base_ease: int = Field(default=DEFAULT_BASE_EASE, ge=1)
    minimum_ease: int = Field(default=DEFAULT_MINIMUM_EASE, ge=1)
    easy_bonus: float = Field(default=DEFAULT_EASY_BONUS, ge=1.0)
    hard_penalty: float = Field(default=DEFAULT_HARD_PENALTY, gt=0.0, le=1.0)

    # Intervals
    maximum_interval: int = Field(default=DEFAULT_MAXIMUM_INTERVAL, ge=1)
    initial_interval: int = Field(default=DEFAULT_INITIAL_INTERVAL, ge=1)

    # Load balancing
    load_balance: bool = DEFAULT_LOAD_BALANCE
    max_fuzzing_days: int = Field(default=DEFAULT_MAX_FUZZING_DAYS, ge=0)

    # Output
    verbose: int = 1

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # First existing file wins
        toml_file = next((f for f in config_file_candidates() if f.exists()), None)

        # Earlier sources take priority: explicit overrides > env > file.
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @model_validator(mode="after")
    def check_ease_bounds(self) -> "AppConfig":
        if self.base_ease < self.minimum_ease:
            raise ValueError(
                f"base_ease ({self.base_ease}) must not be below minimum_ease ({self.minimum_ease})"
            )
        if self.initial_interval > self.maximum_interval:
            raise ValueError(
                f"initial_interval ({self.initial_interval}) exceeds "
                f"maximum_interval ({self.maximum_interval})"
            )
        return self

    def to_scheduler_settings(self) -> SchedulerSettings:
        return SchedulerSettings(
            base_ease=self.base_ease,
            easy_bonus=self.easy_bonus,
            hard_penalty=self.hard_penalty,
            minimum_ease=self.minimum_ease,
            maximum_interval=self.maximum_interval,
            initial_interval=self.initial_interval,
            load_balance=self.load_balance,
            max_fuzzing_days=self.max_fuzzing_days,
        )


def resolve_config(overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/recallkit/config.toml (if exists)
    3. Environment variables (RECALLKIT_*)
    4. overrides (passed from Typer); None values are ignored
    """
    cleaned = {k: v for k, v in (overrides or {}).items() if v is not None}
    return AppConfig(**cleaned)
