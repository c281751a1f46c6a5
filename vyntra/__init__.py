"""Vyntra workflow engine: validated workflow documents run in simulated or live mode."""

__version__ = "0.1.0"
