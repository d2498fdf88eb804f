"""Dialect adapters."""
