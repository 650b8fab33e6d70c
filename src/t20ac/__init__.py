"""T20AC - attribute point-buy calculator for Tormenta20."""

__version__ = "0.1.0"
