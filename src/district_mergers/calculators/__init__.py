"""Consolidation estimate, budget modeling and anchor selection."""
