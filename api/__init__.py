"""Read-only JSON API over the analytics view-models."""

__version__ = "1.0.0"
