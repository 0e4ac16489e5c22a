"""Bloodless Medicine Monitor: literature aggregation for Patient Blood Management."""

__version__ = "0.1.0"
