"""AI governance compliance API."""

__version__ = "0.1.0"
