"""Delivery gate and message composition."""

from notifyy.delivery.composer import compose_message
from notifyy.delivery.gate import DeliveryGate

__all__ = ["DeliveryGate", "compose_message"]
