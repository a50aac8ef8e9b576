"""Shared test fixtures and models."""
