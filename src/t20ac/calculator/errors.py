"""Exceptions raised by the attribute calculator."""


class CalculatorError(Exception):
    """Base class for rejected calculator operations."""

    pass


class InvalidAttributeValue(CalculatorError):
    """Raised when a base attribute value is outside the cost table's domain."""

    def __init__(self, value: int, domain: list[int]) -> None:
        self.value = value
        self.domain = domain
        super().__init__(
            f"Base attribute value {value} is not purchasable "
            f"(allowed: {domain[0]} to {domain[-1]})"
        )


class UnknownRace(CalculatorError):
    """Raised when a race id is not present in the race catalog."""

    def __init__(self, race_id: str) -> None:
        self.race_id = race_id
        super().__init__(f"Unknown race: {race_id!r}")


class RacialChoiceError(CalculatorError):
    """Raised when a racial bonus slot cannot be assigned or cleared."""

    pass
