"""Wallet transfer history exporter for Alchemy-indexed EVM chains."""

__version__ = "0.1.0"
