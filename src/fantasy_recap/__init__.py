"""Weekly fantasy football recaps generated from Yahoo league data."""

__version__ = "0.1.0"
