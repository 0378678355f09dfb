"""Shared helpers: YAML configuration, logging setup and number formatting."""
