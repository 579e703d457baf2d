"""Utility helpers for the Forma client."""
