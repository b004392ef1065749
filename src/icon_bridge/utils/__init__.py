"""Utility helpers shared across icon-bridge."""
