"""Loan lifecycle and inventory tracking for a small institutional library."""

__version__ = "0.1.0"
