"""Stock piece allocation and cutting-plan engine."""

__version__ = "0.1.0"
