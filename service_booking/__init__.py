"""Slot availability and booking state for a vehicle-service appointment desk."""

__version__ = "0.1.0"
