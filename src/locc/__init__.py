"""locc: a small command-line geolocation utility."""

__version__ = "0.3.0"
