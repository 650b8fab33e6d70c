"""Tests for race resolution and point budget upkeep."""

import pytest

from t20ac.calculator import (
    ATTRIBUTE_NAMES,
    AttributeName,
    InvalidAttributeValue,
    RacialChoiceError,
    UnknownRace,
    assign_racial_choice,
    attribute_cost,
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
from t20ac.config import CalculatorConfig


def set_bases(character, *bases):
    for name, base in zip(AttributeName, bases, strict=True):
        character.attrs[name].base = base


class TestNewCharacter:
    """Tests for the default character shape."""

    def test_default_shape(self):
        """Six neutral attributes, no race, full pool."""
        character = new_character(12)
        assert [name.value for name in character.attrs] == ATTRIBUTE_NAMES
        for value in character.attrs.values():
            assert (value.base, value.race, value.other) == (0, 0, 0)
        assert character.race is None
        assert character.points.total == 12
        assert character.points.left == 12

    def test_default_pool_from_settings(self):
        """Without a pool size the T20 default of 10 applies."""
        assert new_character().points.total == 10

    def test_default_pool_env(self, monkeypatch):
        """The default pool follows T20AC_DEFAULT_TOTAL_POINTS."""
        monkeypatch.setenv("T20AC_DEFAULT_TOTAL_POINTS", "20")
        character = new_character()
        assert character.points.total == 20
        assert character.points.left == 20


class TestOnRaceChange:
    """Tests for racial bonus resolution."""

    def test_fixed_race(self, character, example_catalog):
        """Human sets strength and constitution to +1, the rest to 0."""
        on_race_change(character, "Human", example_catalog)
        assert character.race == "Human"
        assert character.race_bonuses() == {
            "strength": 1,
            "dexterity": 0,
            "constitution": 1,
            "intelligence": 0,
            "wisdom": 0,
            "charisma": 0,
        }

    def test_fixed_race_overwrites_prior_state(self, character, example_catalog):
        """Declared bonuses replace whatever was there, undeclared become 0."""
        for value in character.attrs.values():
            value.race = 5
        on_race_change(character, "Elf", example_catalog)
        assert character.race_bonuses() == {
            "strength": 0,
            "dexterity": 1,
            "constitution": -1,
            "intelligence": 2,
            "wisdom": 0,
            "charisma": 0,
        }

    def test_choice_race_zeroes(self, character, example_catalog):
        """Goblin clears every racial component, whatever the previous race."""
        on_race_change(character, "Human", example_catalog)
        on_race_change(character, "Goblin", example_catalog)
        assert character.race == "Goblin"
        assert set(character.race_bonuses().values()) == {0}

    def test_choice_to_choice_discards_assignments(self, character, example_catalog):
        """Slots assigned for one choice race are not carried to the next."""
        on_race_change(character, "Goblin", example_catalog)
        assign_racial_choice(character, "strength", example_catalog)
        on_race_change(character, "Lefou", example_catalog)
        assert set(character.race_bonuses().values()) == {0}

    def test_unset_race_zeroes(self, character, example_catalog):
        """Clearing the race removes every racial bonus."""
        on_race_change(character, "Human", example_catalog)
        on_race_change(character, None, example_catalog)
        assert character.race is None
        assert set(character.race_bonuses().values()) == {0}

    @pytest.mark.parametrize("race", ["Human", "Goblin", "Elf", None])
    def test_idempotent(self, character, example_catalog, race):
        """Selecting the same race twice matches selecting it once."""
        on_race_change(character, race, example_catalog)
        once = character.race_bonuses()
        on_race_change(character, race, example_catalog)
        assert character.race_bonuses() == once

    def test_unknown_race_rejected(self, character, example_catalog):
        """An unknown race raises and leaves the character as it was."""
        on_race_change(character, "Human", example_catalog)
        before = character.model_copy(deep=True)
        with pytest.raises(UnknownRace, match="Dragon") as exc_info:
            on_race_change(character, "Dragon", example_catalog)
        assert exc_info.value.race_id == "Dragon"
        assert character == before

    def test_base_and_other_untouched(self, character, example_catalog):
        """Race resolution only writes the racial component."""
        character.attrs[AttributeName.STRENGTH].base = 2
        character.attrs[AttributeName.STRENGTH].other = 1
        on_race_change(character, "Human", example_catalog)
        assert character.attrs[AttributeName.STRENGTH].base == 2
        assert character.attrs[AttributeName.STRENGTH].other == 1

    def test_packaged_catalog_default(self, character):
        """Without a catalog argument the T20 races are used."""
        on_race_change(character, "minotaur")
        assert character.attribute("strength").race == 2
        assert character.attribute("constitution").race == 1
        assert character.attribute("wisdom").race == -1


class TestRecomputePoints:
    """Tests for keeping points.left in step with base values."""

    def test_stale_until_recomputed(self, character):
        """Direct base edits leave points.left stale until recompute runs."""
        character.attrs[AttributeName.STRENGTH].base = 3
        assert character.points.left == 10
        recompute_points(character)
        assert character.points.left == 6

    @pytest.mark.parametrize(
        "bases",
        [(0, 0, 0, 0, 0, 0), (4, 4, 4, 4, 4, 4), (-1, -1, 2, 3, 1, 0), (4, -1, -1, -1, 0, 2)],
    )
    def test_invariant_holds(self, character, bases):
        """points.left == points.total - attribute cost after recompute."""
        set_bases(character, *bases)
        recompute_points(character)
        assert character.points.left == character.points.total - attribute_cost(character)

    def test_example_table(self, character, example_table):
        """The example table prices strength 3 at 6."""
        character.attrs[AttributeName.STRENGTH].base = 3
        recompute_points(character, example_table)
        assert character.points.left == 4

    def test_race_change_then_recompute(self, character, example_catalog):
        """Race changes never alter the cost."""
        character.attrs[AttributeName.DEXTERITY].base = 2
        on_race_change(character, "Elf", example_catalog)
        recompute_points(character)
        assert character.points.left == 8


class TestSetBaseAttribute:
    """Tests for buying base values."""

    def test_sets_and_recomputes(self, character):
        """Buying a value updates the points left immediately."""
        set_base_attribute(character, "strength", 4)
        assert character.attribute("strength").base == 4
        assert character.points.left == 3

    def test_rejects_out_of_domain(self, character):
        """Unpurchasable values are rejected, not clamped."""
        set_base_attribute(character, "dexterity", 2)
        with pytest.raises(InvalidAttributeValue):
            set_base_attribute(character, "dexterity", 5)
        assert character.attribute("dexterity").base == 2
        assert character.points.left == 8

    def test_custom_table(self, character, example_table):
        """Values only the custom table allows are accepted with it."""
        set_base_attribute(character, "wisdom", 5, example_table)
        assert character.points.left == -2

    def test_unknown_attribute(self, character):
        """Attribute names outside the six are rejected."""
        with pytest.raises(ValueError):
            set_base_attribute(character, "luck", 1)


class TestSetTotalPoints:
    """Tests for changing the point pool."""

    def test_fresh_character(self, character, example_catalog):
        """A new pool discards allocations, race and bonuses."""
        set_base_attribute(character, "strength", 3)
        set_other_bonus(character, "wisdom", 2)
        on_race_change(character, "Human", example_catalog)

        updated = set_total_points(character, 15)
        assert updated.points.total == 15
        assert updated.points.left == 15
        assert updated.race is None
        for value in updated.attrs.values():
            assert (value.base, value.race, value.other) == (0, 0, 0)

    def test_reset_uses_default(self, character):
        """reset_character restores the default pool."""
        set_base_attribute(character, "strength", 3)
        updated = reset_character(set_total_points(character, 20))
        assert updated.points.total == 10
        assert updated.points.left == 10


class TestReconcileEditablePoints:
    """Tests for pinning the pool while editing is disabled."""

    @pytest.mark.parametrize("total", [0, 10, 25])
    def test_noop_when_editable(self, total):
        """With editing enabled any pool is kept as is."""
        character = new_character(total)
        set_base_attribute(character, "strength", 1)
        config = CalculatorConfig(editable_points=True)
        assert reconcile_editable_points(character, config, 10) is character
        assert character.points.total == total

    def test_noop_when_default(self, character):
        """A pool already at the default is left alone."""
        set_base_attribute(character, "strength", 2)
        result = reconcile_editable_points(character, CalculatorConfig(), 10)
        assert result is character
        assert result.attribute("strength").base == 2

    def test_forces_default(self):
        """A diverged pool is reset to a fresh default character."""
        character = new_character(25)
        set_base_attribute(character, "strength", 4)
        result = reconcile_editable_points(character, CalculatorConfig(), 10)
        assert result.points.total == 10
        assert result.points.left == 10
        assert result.attribute("strength").base == 0

    def test_default_total_from_settings(self):
        """Without a default the configured pool is used."""
        result = reconcile_editable_points(new_character(3), CalculatorConfig())
        assert result.points.total == 10


class TestRacialChoices:
    """Tests for assigning choice race bonus slots."""

    def test_assign(self, character, example_catalog):
        """Each slot grants the race's magnitude."""
        on_race_change(character, "Goblin", example_catalog)
        assert racial_choices_left(character, example_catalog) == 2
        assign_racial_choice(character, "dexterity", example_catalog)
        assert character.attribute("dexterity").race == 1
        assert racial_choices_left(character, example_catalog) == 1

    def test_all_slots_used(self, character, example_catalog):
        """No more than count slots may be assigned."""
        on_race_change(character, "Goblin", example_catalog)
        assign_racial_choice(character, "dexterity", example_catalog)
        assign_racial_choice(character, "wisdom", example_catalog)
        with pytest.raises(RacialChoiceError, match="already assigned"):
            assign_racial_choice(character, "charisma", example_catalog)
        assert character.attribute("charisma").race == 0

    def test_same_attribute_twice(self, character, example_catalog):
        """Each slot goes to a different attribute."""
        on_race_change(character, "Goblin", example_catalog)
        assign_racial_choice(character, "dexterity", example_catalog)
        with pytest.raises(RacialChoiceError, match="already has"):
            assign_racial_choice(character, "dexterity", example_catalog)

    def test_excluded_attribute(self, character, example_catalog):
        """Excluded attributes cannot receive a slot."""
        on_race_change(character, "Lefou", example_catalog)
        with pytest.raises(RacialChoiceError, match="charisma"):
            assign_racial_choice(character, "charisma", example_catalog)

    def test_fixed_race_has_no_choices(self, character, example_catalog):
        """Fixed races and no race cannot assign slots."""
        assert racial_choices_left(character, example_catalog) == 0
        with pytest.raises(RacialChoiceError):
            assign_racial_choice(character, "strength", example_catalog)

        on_race_change(character, "Human", example_catalog)
        assert racial_choices_left(character, example_catalog) == 0
        with pytest.raises(RacialChoiceError):
            assign_racial_choice(character, "wisdom", example_catalog)
        with pytest.raises(RacialChoiceError):
            clear_racial_choice(character, "strength", example_catalog)

    def test_clear_frees_slot(self, character, example_catalog):
        """Clearing a slot lets it be spent elsewhere."""
        on_race_change(character, "Goblin", example_catalog)
        assign_racial_choice(character, "dexterity", example_catalog)
        assign_racial_choice(character, "wisdom", example_catalog)
        clear_racial_choice(character, "wisdom", example_catalog)
        assert character.attribute("wisdom").race == 0
        assign_racial_choice(character, "charisma", example_catalog)
        assert character.attribute("charisma").race == 1

    def test_packaged_human(self, character):
        """T20 humans pick three +1 bonuses."""
        on_race_change(character, "human")
        for name in ("strength", "dexterity", "wisdom"):
            assign_racial_choice(character, name)
        assert racial_choices_left(character) == 0
        assert sum(character.race_bonuses().values()) == 3


class TestAttributeTotals:
    """Tests for derived attribute totals."""

    def test_total_is_sum_of_parts(self, character, example_catalog):
        """Total = base + race + other."""
        set_base_attribute(character, "strength", 3)
        on_race_change(character, "Human", example_catalog)
        set_other_bonus(character, "strength", 2)
        assert character.attribute("strength").total == 6
        assert attribute_total(character, "strength") == 6

    def test_total_follows_parts(self, character):
        """Totals are derived, so they follow every part change."""
        set_other_bonus(character, "wisdom", 1)
        assert attribute_total(character, "wisdom") == 1
        set_base_attribute(character, "wisdom", 4)
        assert attribute_total(character, "wisdom") == 5

    def test_others_hidden(self, character):
        """With the others section off, manual adjustments are left out."""
        set_base_attribute(character, "charisma", 2)
        set_other_bonus(character, "charisma", 3)
        hidden = CalculatorConfig(others_points_section=False)
        shown = CalculatorConfig(others_points_section=True)
        assert attribute_total(character, "charisma", hidden) == 2
        assert attribute_total(character, "charisma", shown) == 5
        assert character.attribute("charisma").other == 3

    def test_totals_mapping(self, character, example_catalog):
        """attribute_totals covers all six attributes."""
        on_race_change(character, "Elf", example_catalog)
        assert attribute_totals(character) == {
            "strength": 0,
            "dexterity": 1,
            "constitution": -1,
            "intelligence": 2,
            "wisdom": 0,
            "charisma": 0,
        }

    def test_other_does_not_affect_points(self, character):
        """Manual adjustments are free."""
        set_other_bonus(character, "strength", 4)
        recompute_points(character)
        assert character.points.left == 10
