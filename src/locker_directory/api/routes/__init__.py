"""Route group exports."""

from . import health, lockers, relay, shipping

__all__ = ["health", "lockers", "relay", "shipping"]
