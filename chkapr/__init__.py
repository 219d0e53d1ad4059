"""chkapr: approval gate for canary releases."""

__version__ = "0.1.0"
