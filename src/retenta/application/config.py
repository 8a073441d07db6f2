from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from retenta.domain import constants
from retenta.domain.progress.models import SchedulerConfig


def config_files() -> list[Path]:
    return [
        Path.home() / ".config/retenta/config.toml",
        Path.home() / ".retenta.toml",
    ]


class AppConfig(BaseSettings):
    """
    Configuration model for retenta.
    Supports loading from:
    1. Environment variables (RETENTA_*)
    2. Config file (~/.config/retenta/config.toml)
    3. Manual overrides (CLI / server requests)
    """

    model_config = SettingsConfigDict(
        env_prefix="RETENTA_",
        extra="ignore",
    )

    # Storage
    progress_path: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/retenta/progress.json"
    )
    language: str = constants.DEFAULT_LANGUAGE

    # Scheduler tuning
    min_ease: float = constants.EASE_FACTOR_MIN
    default_ease: float = constants.EASE_FACTOR_DEFAULT
    interval_ladder: tuple[int, ...] = constants.INTERVAL_LADDER_DAYS
    pass_threshold: int = constants.QUALITY_PASS
    mastery_weights: tuple[float, float, float] = constants.MASTERY_WEIGHTS
    mastery_interval_days: int = constants.MASTERY_INTERVAL_DAYS
    mastery_streak_target: int = constants.MASTERY_STREAK_TARGET
    mastered_threshold: int = constants.MASTERED_THRESHOLD
    review_slots: int = constants.REVIEW_SLOTS_PER_PAGE
    max_review_items: int = constants.MAX_REVIEW_ITEMS_PER_SESSION
    max_new_items: int = constants.MAX_NEW_ITEMS_PER_SESSION
    presentation_budget: int = constants.PRESENTATION_BUDGET

    # Clock / randomness
    timezone: str | None = None
    seed: int | None = None

    # Logging: 0 = INFO, 1+ = DEBUG for the retenta loggers
    verbose: int = Field(default=0, ge=0)

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
        toml_file = next((f for f in config_files() if f.exists()), None)

        # Earlier sources take priority: overrides, then env, then file
        if toml_file:
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("progress_path", mode="before")
    @classmethod
    def resolve_progress_path(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("language")
    @classmethod
    def normalize_language(cls, v: str) -> str:
        v = v.strip().lower()
        if not v or constants.ITEM_KEY_SEPARATOR in v:
            raise ValueError(f"invalid language code: {v!r}")
        return v

    @field_validator("timezone")
    @classmethod
    def check_timezone(cls, v: str | None) -> str | None:
        if v is None:
            return None
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {v!r}") from e
        return v

    def scheduler_config(self) -> SchedulerConfig:
        """Build the domain tuning object from the resolved settings."""
        return SchedulerConfig(
            min_ease=self.min_ease,
            default_ease=self.default_ease,
            interval_ladder=tuple(self.interval_ladder),
            pass_threshold=self.pass_threshold,
            mastery_weights=tuple(self.mastery_weights),
            mastery_interval_days=self.mastery_interval_days,
            mastery_streak_target=self.mastery_streak_target,
            mastered_threshold=self.mastered_threshold,
            review_slots=self.review_slots,
            max_review_items=self.max_review_items,
            max_new_items=self.max_new_items,
            presentation_budget=self.presentation_budget,
        )

    def tzinfo(self) -> ZoneInfo | None:
        return ZoneInfo(self.timezone) if self.timezone else None


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/retenta/config.toml (if exists)
    3. Environment variables (RETENTA_*)
    4. cli_overrides (None values are dropped)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
