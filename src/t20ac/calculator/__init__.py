"""Point-buy attribute calculator: cost table, race catalog and derivation rules."""

from .attributes import ATTRIBUTE_NAMES, AttributeName, AttributeValue, Character, Points
from .cost_table import DEFAULT_COST_TABLE, T20_ATTRIBUTE_COSTS, CostTable, cost
from .derivation import (
    assign_racial_choice,
    attribute_total,
    attribute_totals,
    clear_racial_choice,
    new_character,
    on_race_change,
    racial_choices_left,
    recompute_points,
    reconcile_editable_points,
    reset_character,
    set_base_attribute,
    set_other_bonus,
    set_total_points,
)
from .errors import CalculatorError, InvalidAttributeValue, RacialChoiceError, UnknownRace
from .points import attribute_cost, points_left
from .races import (
    ChoiceRacialBonus,
    FixedRacialBonus,
    RaceCatalog,
    RaceCatalogLoadError,
    RaceValidationError,
    get_race_catalog,
    load_race_catalog,
)

__all__ = [
    "ATTRIBUTE_NAMES",
    "AttributeName",
    "AttributeValue",
    "Character",
    "Points",
    "DEFAULT_COST_TABLE",
    "T20_ATTRIBUTE_COSTS",
    "CostTable",
    "cost",
    "attribute_cost",
    "points_left",
    "new_character",
    "on_race_change",
    "recompute_points",
    "set_total_points",
    "reconcile_editable_points",
    "reset_character",
    "set_base_attribute",
    "set_other_bonus",
    "assign_racial_choice",
    "clear_racial_choice",
    "racial_choices_left",
    "attribute_total",
    "attribute_totals",
    "ChoiceRacialBonus",
    "FixedRacialBonus",
    "RaceCatalog",
    "RaceCatalogLoadError",
    "RaceValidationError",
    "get_race_catalog",
    "load_race_catalog",
    "CalculatorError",
    "InvalidAttributeValue",
    "RacialChoiceError",
    "UnknownRace",
]
