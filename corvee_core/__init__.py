"""Monthly household task distribution."""

__version__ = "0.1.0"
