"""Mini README: Delivery request records submitted for planning."""

from .requests import DeliveryRequest, Requirements, group_by_date

__all__ = ["DeliveryRequest", "Requirements", "group_by_date"]
