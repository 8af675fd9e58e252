"""Utility helpers for chsql."""
