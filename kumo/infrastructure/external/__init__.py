"""Kraken clients and wire format."""
