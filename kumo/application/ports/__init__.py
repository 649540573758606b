"""Interfaces implemented by infrastructure/."""
