"""Point-buy cost table for base attributes.

The default curve is the Tormenta20 (Game of the Year) table: values below the
neutral 0 refund points, and the price per point grows from +3 upward.
"""

from collections.abc import Mapping

from .errors import InvalidAttributeValue

# Tormenta20 point-buy costs (base value -> points spent)
T20_ATTRIBUTE_COSTS: dict[int, int] = {
    -1: -1,
    0: 0,
    1: 1,
    2: 2,
    3: 4,
    4: 7,
}

NEUTRAL_BASE = 0


class CostTable:
    """
    Lookup from a base attribute value to the points it costs.

    The domain is exactly the set of keys supplied; it must include the
    neutral base value 0 at cost 0, which is the default allocation.
    """

    def __init__(self, costs: Mapping[int, int]) -> None:
        if costs.get(NEUTRAL_BASE) != 0:
            raise ValueError("Cost table must price the neutral base value 0 at 0 points")
        self._costs = dict(sorted(costs.items()))

    def __contains__(self, value: object) -> bool:
        return value in self._costs

    def __repr__(self) -> str:
        return f"CostTable({self._costs!r})"

    @property
    def domain(self) -> list[int]:
        """Purchasable base values in ascending order."""
        return list(self._costs)

    @property
    def minimum(self) -> int:
        return self.domain[0]

    @property
    def maximum(self) -> int:
        return self.domain[-1]

    def cost(self, value: int) -> int:
        """
        Get the point cost of a base attribute value.

        Args:
            value: The base attribute value

        Returns:
            Points spent to reach that value (negative values refund points)

        Raises:
            InvalidAttributeValue: If the value is outside the table's domain

        Examples:
            >>> DEFAULT_COST_TABLE.cost(3)
            4
            >>> DEFAULT_COST_TABLE.cost(-1)
            -1
        """
        try:
            return self._costs[value]
        except KeyError:
            raise InvalidAttributeValue(value, self.domain) from None

    def validate(self, value: int) -> None:
        """Raise InvalidAttributeValue unless the value is purchasable."""
        if value not in self._costs:
            raise InvalidAttributeValue(value, self.domain)


DEFAULT_COST_TABLE = CostTable(T20_ATTRIBUTE_COSTS)


def cost(value: int, table: CostTable = DEFAULT_COST_TABLE) -> int:
    """Get the point cost of a base value using the given (default T20) table."""
    return table.cost(value)
