"""Character derivation: racial bonus resolution and point budget upkeep.

Every operation takes the character explicitly and returns the resulting
character. Most mutate and return the same object; set_total_points and the
operations built on it return a fresh character, so callers must always keep
the returned value.

Callers own invariant restoration: after any change to a base value run
recompute_points, and after any race, config or pool change run
reconcile_editable_points. Race resolution must finish before points are
recomputed.
"""

import structlog

from t20ac.config import CalculatorConfig, get_settings

from .attributes import AttributeName, AttributeValue, Character, Points
from .cost_table import DEFAULT_COST_TABLE, CostTable
from .errors import RacialChoiceError, UnknownRace
from .points import attribute_cost
from .races import ChoiceRacialBonus, RaceCatalog, get_race_catalog

logger = structlog.get_logger(__name__)


def new_character(total_points: int | None = None) -> Character:
    """
    Create a default-shaped character.

    All six attributes sit at the neutral (zero-cost) base with no racial or
    other bonus, no race is selected and the whole pool is unspent.

    Args:
        total_points: Size of the point pool. If None, uses the configured default.
    """
    if total_points is None:
        total_points = get_settings().default_total_points

    return Character(
        attrs={name: AttributeValue() for name in AttributeName},
        race=None,
        points=Points(total=total_points, left=total_points),
    )


def on_race_change(
    character: Character, new_race: str | None, catalog: RaceCatalog | None = None
) -> Character:
    """
    Select a race and resolve its bonuses onto the attributes.

    A fixed race overwrites every racial component with its declared bonus
    (0 where undeclared). A choice race, or no race, zeroes every racial
    component; choice slots must be assigned again by the user.

    Raises:
        UnknownRace: If new_race is not in the catalog (character is left untouched)
    """
    if catalog is None:
        catalog = get_race_catalog()

    spec = None
    if new_race is not None:
        spec = catalog.lookup(new_race)
        if spec is None:
            raise UnknownRace(new_race)

    character.race = new_race
    for name, value in character.attrs.items():
        value.race = spec.bonus_for(name) if spec is not None and spec.type == "fixed" else 0

    logger.debug(
        "race_resolved",
        race=new_race,
        bonus_type=spec.type if spec is not None else None,
        bonuses=character.race_bonuses(),
    )
    return character


def recompute_points(character: Character, table: CostTable = DEFAULT_COST_TABLE) -> Character:
    """
    Restore points.left = points.total - attribute cost.

    Must run after every change to a base value.

    Raises:
        InvalidAttributeValue: If any base value is outside the table's domain
    """
    character.points.left = character.points.total - attribute_cost(character, table)
    logger.debug("points_recomputed", total=character.points.total, left=character.points.left)
    return character


def set_total_points(character: Character, new_total: int) -> Character:
    """
    Replace the character with a fresh one that has a new point pool.

    Changing the budget discards every allocation, the race and all bonuses.
    """
    logger.debug("points_total_set", old_total=character.points.total, new_total=new_total)
    return new_character(new_total)


def reconcile_editable_points(
    character: Character,
    config: CalculatorConfig,
    default_total: int | None = None,
) -> Character:
    """
    Pin the point pool to the default while pool editing is disabled.

    Does nothing when config.editable_points is True, or when the pool
    already equals the default. Otherwise the character is reset to a fresh
    one with the default pool.
    """
    if config.editable_points:
        return character

    if default_total is None:
        default_total = get_settings().default_total_points

    if character.points.total == default_total:
        return character

    logger.debug(
        "points_pool_pinned", total=character.points.total, default_total=default_total
    )
    return set_total_points(character, default_total)


def reset_character(
    character: Character,
    default_total: int | None = None,
) -> Character:
    """Reset to the default shape with the default point pool."""
    if default_total is None:
        default_total = get_settings().default_total_points
    return set_total_points(character, default_total)


def set_base_attribute(
    character: Character,
    attribute: AttributeName | str,
    value: int,
    table: CostTable = DEFAULT_COST_TABLE,
) -> Character:
    """
    Buy a base value for one attribute and recompute the points left.

    Raises:
        InvalidAttributeValue: If the value is not purchasable; nothing changes
    """
    table.validate(value)
    character.attribute(attribute).base = value
    return recompute_points(character, table)


def set_other_bonus(character: Character, attribute: AttributeName | str, value: int) -> Character:
    """Set the manual adjustment of one attribute."""
    character.attribute(attribute).other = value
    return character


def _choice_spec(character: Character, catalog: RaceCatalog) -> ChoiceRacialBonus:
    spec = catalog.lookup(character.race) if character.race is not None else None
    if not isinstance(spec, ChoiceRacialBonus):
        raise RacialChoiceError(
            f"Race {character.race or 'none'} does not let the player choose bonuses"
        )
    return spec


def racial_choices_left(character: Character, catalog: RaceCatalog | None = None) -> int:
    """
    Count the unassigned bonus slots of the character's choice race.

    Returns 0 for a fixed race or when no race is selected.
    """
    if catalog is None:
        catalog = get_race_catalog()
    try:
        spec = _choice_spec(character, catalog)
    except RacialChoiceError:
        return 0

    used = sum(1 for value in character.attrs.values() if value.race != 0)
    return max(0, spec.count - used)


def assign_racial_choice(
    character: Character, attribute: AttributeName | str, catalog: RaceCatalog | None = None
) -> Character:
    """
    Spend one bonus slot of the character's choice race on an attribute.

    Raises:
        RacialChoiceError: If the race is not a choice race, the attribute is
            excluded or already has a slot, or no slots are left
    """
    if catalog is None:
        catalog = get_race_catalog()
    spec = _choice_spec(character, catalog)
    name = AttributeName(attribute)

    if not spec.allows(name):
        raise RacialChoiceError(f"{character.race} cannot put a bonus on {name.value}")

    target = character.attrs[name]
    if target.race != 0:
        raise RacialChoiceError(f"{name.value} already has a racial bonus")

    if racial_choices_left(character, catalog) == 0:
        raise RacialChoiceError(f"All {spec.count} racial bonuses are already assigned")

    target.race = spec.magnitude
    return character


def clear_racial_choice(
    character: Character, attribute: AttributeName | str, catalog: RaceCatalog | None = None
) -> Character:
    """
    Free the bonus slot held by an attribute.

    Raises:
        RacialChoiceError: If the race is not a choice race
    """
    if catalog is None:
        catalog = get_race_catalog()
    _choice_spec(character, catalog)
    character.attribute(attribute).race = 0
    return character


def attribute_total(
    character: Character,
    attribute: AttributeName | str,
    config: CalculatorConfig | None = None,
) -> int:
    """
    Get the displayed total of one attribute.

    The "other" adjustment only counts while the others section is enabled
    (or when no config is given).
    """
    value = character.attribute(attribute)
    if config is not None and not config.others_points_section:
        return value.base + value.race
    return value.total


def attribute_totals(
    character: Character, config: CalculatorConfig | None = None
) -> dict[str, int]:
    """Get the displayed total of every attribute, keyed by attribute name."""
    return {name.value: attribute_total(character, name, config) for name in AttributeName}
