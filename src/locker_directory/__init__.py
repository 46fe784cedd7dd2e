"""Locker directory service: resilient parcel-locker lookup and shipping actions."""

__version__ = "0.1.0"
