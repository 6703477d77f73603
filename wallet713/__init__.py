"""Wallet data model: errors, outputs, seeds, slates, node client and foreign API."""

__version__ = "0.1.0"