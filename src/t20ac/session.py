"""Session state for one character being built in the calculator."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from t20ac.calculator import (
    DEFAULT_COST_TABLE,
    AttributeName,
    Character,
    CostTable,
    RaceCatalog,
    assign_racial_choice,
    attribute_totals,
    clear_racial_choice,
    get_race_catalog,
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
from t20ac.config import CalculatorConfig, get_settings
from t20ac.logging_config import ensure_logging

logger = structlog.get_logger(__name__)


class SessionState(str, Enum):
    """Session state enumeration."""

    UNINITIALIZED = "uninitialized"  # No character created yet
    EDITING = "editing"  # Default character created, accepting edits


@dataclass(frozen=True)
class CharacterSummary:
    """Snapshot of a character prepared for display."""

    race: str | None
    race_type: str | None
    points_total: int
    points_left: int
    bases: dict[str, int]
    race_bonuses: dict[str, int]
    other_bonuses: dict[str, int]
    totals: dict[str, int]
    racial_choices_left: int
    show_others: bool

    @property
    def over_budget(self) -> bool:
        """True when more points are spent than the pool holds."""
        return self.points_left < 0


class CharacterSession:
    """
    Holds the current character and options, and applies user events.

    The character and config are two cells with get-current / set-next
    semantics. Each event method runs one calculator operation on a copy of
    the character and then restores the invariants in a fixed order (race
    resolution, points recomputation, pool reconciliation) before the copy
    becomes current. A rejected operation leaves the session unchanged.
    """

    def __init__(
        self,
        config: CalculatorConfig | None = None,
        catalog: RaceCatalog | None = None,
        table: CostTable = DEFAULT_COST_TABLE,
        default_total: int | None = None,
    ) -> None:
        """
        Initialize a new session.

        Args:
            config: Initial options. If None, built from settings.
            catalog: Race catalog. If None, uses the default catalog.
            table: Cost table used to price base values
            default_total: Default point pool. If None, uses the configured default.
        """
        settings = get_settings()
        ensure_logging(settings)
        self.catalog = catalog if catalog is not None else get_race_catalog()
        self.table = table
        self.default_total = (
            default_total if default_total is not None else settings.default_total_points
        )
        self.state = SessionState.UNINITIALIZED
        self._config = config if config is not None else CalculatorConfig.from_settings(settings)
        self._character: Character | None = None

    def start(self) -> Character:
        """Create the default character and begin editing."""
        self._character = new_character(self.default_total)
        self.state = SessionState.EDITING
        logger.info("session_started", default_total=self.default_total)
        return self._character

    @property
    def character(self) -> Character:
        """The current character."""
        if self._character is None:
            raise RuntimeError("Session has not been started")
        return self._character

    @property
    def config(self) -> CalculatorConfig:
        """The current options."""
        return self._config

    def set_character(self, value: Character | Callable[[Character], Character]) -> None:
        """Replace the current character with a value or a function of the previous one."""
        if callable(value):
            value = value(self.character)
        self._character = value
        self.state = SessionState.EDITING

    def set_config(
        self, value: CalculatorConfig | Callable[[CalculatorConfig], CalculatorConfig]
    ) -> None:
        """Replace the options and re-check the point pool against them."""
        if callable(value):
            value = value(self._config)
        self._config = value
        logger.info("config_changed", **value.model_dump())
        if self._character is not None:
            self._apply("config_reconciled", lambda character: character)

    def toggle_option(self, option: str) -> CalculatorConfig:
        """Flip one option by name."""
        self.set_config(lambda config: config.toggled(option))
        return self._config

    def select_race(self, race: str | None) -> Character:
        """Select a race (or None) and resolve its bonuses."""
        return self._apply(
            "race_changed",
            lambda character: on_race_change(character, race, self.catalog),
        )

    def set_base(self, attribute: AttributeName | str, value: int) -> Character:
        """Buy a base value for one attribute."""
        return self._apply(
            "base_changed",
            lambda character: set_base_attribute(character, attribute, value, self.table),
            attribute=str(attribute),
            value=value,
        )

    def set_other(self, attribute: AttributeName | str, value: int) -> Character:
        """Set the manual adjustment of one attribute."""
        return self._apply(
            "other_changed",
            lambda character: set_other_bonus(character, attribute, value),
            attribute=str(attribute),
            value=value,
        )

    def assign_choice(self, attribute: AttributeName | str) -> Character:
        """Spend one racial bonus slot on an attribute."""
        return self._apply(
            "racial_choice_assigned",
            lambda character: assign_racial_choice(character, attribute, self.catalog),
            attribute=str(attribute),
        )

    def clear_choice(self, attribute: AttributeName | str) -> Character:
        """Free the racial bonus slot of an attribute."""
        return self._apply(
            "racial_choice_cleared",
            lambda character: clear_racial_choice(character, attribute, self.catalog),
            attribute=str(attribute),
        )

    def set_total_points(self, total: int) -> Character:
        """
        Change the point pool, discarding all allocations.

        While editable_points is off the request is refused and the current
        character is returned unchanged.
        """
        if not self._config.editable_points:
            logger.warning(
                "points_pool_locked", requested=total, points_total=self.character.points.total
            )
            return self.character

        return self._apply(
            "points_total_changed",
            lambda character: set_total_points(character, total),
            total=total,
        )

    def reset(self) -> Character:
        """Reset the character to the default shape."""
        return self._apply(
            "character_reset",
            lambda character: reset_character(character, self.default_total),
        )

    def summary(self) -> CharacterSummary:
        """Build a display snapshot of the current character."""
        character = self.character
        spec = self.catalog.lookup(character.race) if character.race is not None else None
        return CharacterSummary(
            race=character.race,
            race_type=spec.type if spec is not None else None,
            points_total=character.points.total,
            points_left=character.points.left,
            bases={name.value: value.base for name, value in character.attrs.items()},
            race_bonuses=character.race_bonuses(),
            other_bonuses={name.value: value.other for name, value in character.attrs.items()},
            totals=attribute_totals(character, self._config),
            racial_choices_left=racial_choices_left(character, self.catalog),
            show_others=self._config.others_points_section,
        )

    def _apply(
        self, event: str, operation: Callable[[Character], Character], **context: object
    ) -> Character:
        character = operation(self.character.model_copy(deep=True))
        character = recompute_points(character, self.table)
        character = reconcile_editable_points(character, self._config, self.default_total)
        self.set_character(character)
        logger.info(
            event,
            race=character.race,
            points_total=character.points.total,
            points_left=character.points.left,
            **context,
        )
        return character
