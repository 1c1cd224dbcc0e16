"""Parley - multi-provider LLM assistant orchestration."""

__version__ = "0.1.0"
