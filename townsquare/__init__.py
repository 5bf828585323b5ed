"""Town Square - nomination and clock-hand voting for social deduction games."""

__version__ = "0.1.0"
