"""newswatch - geopolitical news crawler and article store."""

__version__ = "0.1.0"
