"""Test fixtures and synthetic data generators."""
