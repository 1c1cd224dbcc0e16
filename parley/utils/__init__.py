"""Utility modules for Parley."""
