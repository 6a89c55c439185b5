"""Shared utilities: logging, timing, data loading and result persistence."""
