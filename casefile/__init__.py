"""Casefile: LLM-driven mystery generation and gameplay engine."""

__version__ = "0.1.0"
