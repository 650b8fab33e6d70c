"""Shared fixtures for all tests."""

import pytest
import structlog

from t20ac.calculator import (
    ChoiceRacialBonus,
    CostTable,
    FixedRacialBonus,
    RaceCatalog,
    new_character,
)
from t20ac.calculator.races import get_race_catalog
from t20ac.config import get_settings

# Cost table used in the ruleset examples: wider than the T20 table, with a
# steeper refund below 0 and extra cost from 4 up.
EXAMPLE_COSTS = {-2: -4, -1: -2, 0: 0, 1: 2, 2: 4, 3: 6, 4: 9, 5: 12}


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Keep tests independent of the caller's environment and cached state.

    Settings and the default race catalog are cached process-wide, so both
    caches are cleared around every test and T20AC_ variables are removed.
    The CLI configures structlog against the captured stderr of its test, so
    logging is reset afterwards.
    """
    for var in (
        "T20AC_DEFAULT_TOTAL_POINTS",
        "T20AC_RACES_FILE",
        "T20AC_EDITABLE_POINTS",
        "T20AC_OTHERS_POINTS_SECTION",
        "T20AC_LOG_LEVEL",
        "T20AC_LOG_FORMAT",
    ):
        monkeypatch.delenv(var, raising=False)

    get_settings.cache_clear()
    get_race_catalog.cache_clear()
    yield
    get_settings.cache_clear()
    get_race_catalog.cache_clear()
    structlog.reset_defaults()


@pytest.fixture
def example_table():
    """Cost table from the ruleset examples."""
    return CostTable(EXAMPLE_COSTS)


@pytest.fixture
def example_catalog():
    """Small catalog with fixed and choice races."""
    return RaceCatalog(
        {
            "Human": FixedRacialBonus(bonuses={"strength": 1, "constitution": 1}),
            "Goblin": ChoiceRacialBonus(magnitude=1, count=2),
            "Elf": FixedRacialBonus(bonuses={"intelligence": 2, "dexterity": 1, "constitution": -1}),
            "Lefou": ChoiceRacialBonus(magnitude=1, count=3, excluded=["charisma"]),
        }
    )


@pytest.fixture
def character():
    """Fresh character with a 10 point pool."""
    return new_character(10)
