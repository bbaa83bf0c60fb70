"""Shared helpers for togglestack tests."""
