"""
Command-line interface for Streamsweep.
"""

from .main import main

__all__ = ["main"]
