"""Command-line interface for exploring CO2 meter readings."""

__all__ = []
