"""Shared test fixtures for diffpost."""
