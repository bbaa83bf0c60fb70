"""Shared helpers for togglestack internals."""
