"""Configuration management for the T20 attribute calculator using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="T20AC_",
        extra="ignore",
    )

    # Ruleset Settings
    default_total_points: int = Field(
        default=10, description="Point pool a fresh character starts with"
    )
    races_file: Path | None = Field(
        default=None, description="Race catalog YAML file (None uses the packaged catalog)"
    )

    # Session Flags
    editable_points: bool = Field(
        default=False, description="Initial value of the editable points option"
    )
    others_points_section: bool = Field(
        default=False, description="Initial value of the other points option"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format (console or json)")

    @property
    def data_dir(self) -> Path:
        """Get the packaged data directory path."""
        return Path(__file__).parent / "data"

    @property
    def race_catalog_path(self) -> Path:
        """Get the race catalog file that should be loaded."""
        return self.races_file or self.data_dir / "races.yaml"


class CalculatorConfig(BaseModel):
    """
    Session-scoped options toggled by the user.

    Attributes:
        editable_points: The user may change the total point pool. While False
            the character's pool is pinned to the configured default.
        others_points_section: The "other" column is shown and counted in
            attribute totals. While False, manual adjustments are kept on the
            character but left out of the totals.
    """

    model_config = ConfigDict(frozen=True)

    editable_points: bool = Field(
        default=False, description="Allow the user to edit the total point pool"
    )
    others_points_section: bool = Field(
        default=False, description="Show and count the manual 'other' bonus column"
    )

    @classmethod
    def from_settings(cls, settings: Settings) -> "CalculatorConfig":
        """Build the initial option set from process settings."""
        return cls(
            editable_points=settings.editable_points,
            others_points_section=settings.others_points_section,
        )

    @classmethod
    def option_keys(cls) -> list[str]:
        """Option names in display order."""
        return list(cls.model_fields)

    @classmethod
    def label_key(cls, option: str) -> str:
        """
        Get the text-resolution key for an option label.

        Args:
            option: Option name (e.g., "editable_points")

        Returns:
            Translation key such as "configOptions.editablePoints"

        Raises:
            KeyError: If the option is not a known option
        """
        if option not in cls.model_fields:
            raise KeyError(option)
        head, *rest = option.split("_")
        return "configOptions." + head + "".join(part.capitalize() for part in rest)

    def toggled(self, option: str) -> "CalculatorConfig":
        """Return a copy with one option flipped."""
        if option not in type(self).model_fields:
            raise KeyError(option)
        return self.model_copy(update={option: not getattr(self, option)})


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
