"""Shipping action services."""

from .client import ShippingActionError, ShippingClient, ShippingConfigurationError

__all__ = ["ShippingClient", "ShippingActionError", "ShippingConfigurationError"]
