"""Character attributes and the point-buy character record.

A character holds six attributes, each split into three independent parts:
the purchased base value, the racial bonus and a manual "other" adjustment.
The total is always derived from those parts and never stored.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .cost_table import NEUTRAL_BASE


class AttributeName(StrEnum):
    """Core character attributes."""

    STRENGTH = "strength"
    DEXTERITY = "dexterity"
    CONSTITUTION = "constitution"
    INTELLIGENCE = "intelligence"
    WISDOM = "wisdom"
    CHARISMA = "charisma"


# Constant attribute names for easy import
ATTRIBUTE_NAMES = [attr.value for attr in AttributeName]


class AttributeValue(BaseModel):
    """
    One attribute of a character.

    Attributes:
        base: Value bought with the point pool (must be in the cost table's domain)
        race: Bonus granted by the selected race
        other: Manual adjustment, passed through untouched
    """

    model_config = ConfigDict(validate_assignment=True)

    base: int = Field(default=NEUTRAL_BASE, description="Purchased base value")
    race: int = Field(default=0, description="Racial bonus")
    other: int = Field(default=0, description="Manual adjustment")

    @property
    def total(self) -> int:
        """Base + race + other."""
        return self.base + self.race + self.other


class Points(BaseModel):
    """Point pool of a character."""

    model_config = ConfigDict(validate_assignment=True)

    total: int = Field(..., description="Size of the point pool")
    left: int = Field(..., description="Points not yet spent (may be negative)")


def _default_attributes() -> dict[AttributeName, AttributeValue]:
    return {name: AttributeValue() for name in AttributeName}


class Character(BaseModel):
    """
    Point-buy character record.

    Attributes:
        attrs: Mapping from each of the six attributes to its AttributeValue
        race: Selected race id, or None when no race is selected
        points: Point pool; points.left is kept equal to
            points.total - attribute cost by recompute_points
    """

    model_config = ConfigDict(validate_assignment=True)

    attrs: dict[AttributeName, AttributeValue] = Field(default_factory=_default_attributes)
    race: str | None = Field(default=None, description="Selected race id")
    points: Points

    @field_validator("attrs")
    @classmethod
    def _require_all_attributes(
        cls, attrs: dict[AttributeName, AttributeValue]
    ) -> dict[AttributeName, AttributeValue]:
        missing = [name.value for name in AttributeName if name not in attrs]
        if missing:
            raise ValueError(f"Missing attributes: {', '.join(missing)}")
        return attrs

    def attribute(self, name: AttributeName | str) -> AttributeValue:
        """
        Get one attribute by name.

        Raises:
            ValueError: If the name is not one of the six attributes
        """
        return self.attrs[AttributeName(name)]

    def race_bonuses(self) -> dict[str, int]:
        """Racial component of every attribute, keyed by attribute name."""
        return {name.value: value.race for name, value in self.attrs.items()}
