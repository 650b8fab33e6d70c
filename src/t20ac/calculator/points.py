"""Point budget calculations for base attribute allocations."""

from .attributes import AttributeName, Character
from .cost_table import DEFAULT_COST_TABLE, CostTable


def attribute_cost(character: Character, table: CostTable = DEFAULT_COST_TABLE) -> int:
    """
    Calculate the points spent on all six base attributes.

    Args:
        character: The character to price
        table: Cost table to price base values with

    Returns:
        Sum of the cost of every attribute's base value

    Raises:
        InvalidAttributeValue: If any base value is outside the table's domain
    """
    return sum(table.cost(character.attrs[name].base) for name in AttributeName)


def points_left(character: Character, table: CostTable = DEFAULT_COST_TABLE) -> int:
    """
    Calculate the unspent points of a character.

    A negative result means the character is over budget; that is a valid
    state for the caller to flag, not an error.
    """
    return character.points.total - attribute_cost(character, table)
