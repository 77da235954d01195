"""GophKeeper - personal secrets manager."""

__version__ = "0.1.0"
