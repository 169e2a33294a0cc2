"""chessdfs: immutable-position chess move generation and forced-line search."""

__version__ = "0.1.0"
