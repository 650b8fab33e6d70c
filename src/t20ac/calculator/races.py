"""
Racial bonus catalog for the T20 attribute calculator.

Handles loading and validating race definitions from YAML files. A race either
grants a fixed bonus set, or a number of equal-sized bonus slots that the user
assigns to attributes of their choice.
"""

from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path
from typing import Annotated, Any, Literal

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from t20ac.config import get_settings

from .attributes import AttributeName

logger = structlog.get_logger(__name__)


class RaceCatalogLoadError(Exception):
    """Raised when there's an error loading race data."""

    pass


class RaceValidationError(Exception):
    """Raised when race validation fails."""

    pass


class FixedRacialBonus(BaseModel):
    """
    Race with a fixed set of attribute bonuses.

    Attributes:
        bonuses: Attribute -> bonus; attributes not listed get 0
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["fixed"] = "fixed"
    bonuses: dict[AttributeName, int] = Field(default_factory=dict)

    def bonus_for(self, attribute: AttributeName | str) -> int:
        """Get the bonus for one attribute (0 where undeclared)."""
        return self.bonuses.get(AttributeName(attribute), 0)


class ChoiceRacialBonus(BaseModel):
    """
    Race whose bonuses are assigned by the user.

    Attributes:
        magnitude: Bonus granted by each slot
        count: Number of slots; each goes to a different attribute
        excluded: Attributes that may not receive a slot
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["choice"] = "choice"
    magnitude: int = Field(..., ge=1)
    count: int = Field(..., ge=1)
    excluded: frozenset[AttributeName] = Field(default_factory=frozenset)

    @model_validator(mode="after")
    def _check_slots_fit(self) -> "ChoiceRacialBonus":
        assignable = len(AttributeName) - len(self.excluded)
        if self.count > assignable:
            raise ValueError(
                f"count {self.count} exceeds the {assignable} attributes that can receive it"
            )
        return self

    def allows(self, attribute: AttributeName | str) -> bool:
        """Check whether an attribute may receive a slot."""
        return AttributeName(attribute) not in self.excluded


RacialBonusSpec = Annotated[FixedRacialBonus | ChoiceRacialBonus, Field(discriminator="type")]


class RaceEntry(BaseModel):
    """One race as it appears in the catalog file."""

    id: str = Field(..., min_length=1, description="Unique race identifier")
    spec: RacialBonusSpec


class RaceCatalog:
    """
    Ordered mapping from race id to its bonus specification.

    Iteration and keys() follow definition order, which is also the order
    races are offered to the user.
    """

    def __init__(self, races: dict[str, FixedRacialBonus | ChoiceRacialBonus]) -> None:
        self._races = dict(races)

    def __contains__(self, race_id: object) -> bool:
        return race_id in self._races

    def __iter__(self) -> Iterator[str]:
        return iter(self._races)

    def __len__(self) -> int:
        return len(self._races)

    def lookup(self, race_id: str) -> FixedRacialBonus | ChoiceRacialBonus | None:
        """
        Get the bonus specification for a race.

        Args:
            race_id: The race identifier (e.g., "dwarf")

        Returns:
            The race's bonus spec, or None if the race is not in the catalog
        """
        return self._races.get(race_id)

    def keys(self) -> list[str]:
        """All selectable race ids in definition order."""
        return list(self._races)


def load_yaml_file(file_path: Path) -> list[dict[str, Any]]:
    """
    Load a YAML file containing race definitions.

    Args:
        file_path: Path to the YAML file

    Returns:
        List of race dictionaries

    Raises:
        RaceCatalogLoadError: If the file cannot be loaded or parsed
    """
    try:
        with open(file_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RaceCatalogLoadError(f"YAML parsing error in {file_path}: {e}") from e
    except FileNotFoundError as e:
        raise RaceCatalogLoadError(f"File not found: {file_path}") from e
    except OSError as e:
        raise RaceCatalogLoadError(f"Error loading {file_path}: {e}") from e

    if not data:
        raise RaceCatalogLoadError(f"Empty YAML file: {file_path}")

    if not isinstance(data, dict) or "races" not in data:
        raise RaceCatalogLoadError(f"Missing 'races' key in {file_path}")

    races = data["races"]
    if not isinstance(races, list):
        raise RaceCatalogLoadError(f"'races' must be a list in {file_path}")

    return races


def create_race_from_data(race_data: dict[str, Any], file_path: Path) -> RaceEntry:
    """
    Create a RaceEntry from dictionary data.

    The YAML layout is flat (id, type and the type's fields side by side), so
    everything except the id is validated as the bonus spec.

    Raises:
        RaceValidationError: If required fields are missing or invalid
    """
    if not isinstance(race_data, dict):
        raise RaceValidationError(f"Race entry in {file_path} must be a mapping")

    if "id" not in race_data:
        raise RaceValidationError(f"Race entry in {file_path} missing required field: id")

    spec_data = {key: value for key, value in race_data.items() if key != "id"}
    try:
        return RaceEntry(id=race_data["id"], spec=spec_data)
    except ValidationError as e:
        raise RaceValidationError(
            f"Race '{race_data['id']}' in {file_path} is invalid: {e}"
        ) from e


def load_race_catalog(file_path: Path | None = None) -> RaceCatalog:
    """
    Load and validate a race catalog file.

    Args:
        file_path: Path to the catalog YAML. If None, uses the configured
            races_file or the catalog shipped with the package.

    Returns:
        RaceCatalog in file order

    Raises:
        RaceCatalogLoadError: If loading fails
        RaceValidationError: If an entry is invalid or an id is duplicated
    """
    if file_path is None:
        file_path = get_settings().race_catalog_path

    races: dict[str, FixedRacialBonus | ChoiceRacialBonus] = {}
    for race_data in load_yaml_file(file_path):
        entry = create_race_from_data(race_data, file_path)

        if entry.id in races:
            raise RaceValidationError(f"Duplicate race ID '{entry.id}' found in {file_path}")

        races[entry.id] = entry.spec

    logger.info("race_catalog_loaded", path=str(file_path), count=len(races))
    return RaceCatalog(races)


@lru_cache
def get_race_catalog() -> RaceCatalog:
    """Get the cached default race catalog."""
    return load_race_catalog()
